"""Page/page-size handling shared by services, API and CLI."""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    """A normalized 1-based page request."""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def to_meta(self, count: int) -> dict[str, Any]:
        return {"page": self.page, "page_size": self.page_size, "count": count}


def normalize_page(
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> Page:
    """Clamp raw paging input.

    Non-positive pages fall back to 1; a page size outside
    ``1..max_size`` falls back to ``default_size``.
    """
    if page is None or page < 1:
        page = 1
    if page_size is None or page_size < 1 or page_size > max_size:
        page_size = default_size
    return Page(page=page, page_size=page_size)
