"""Paper data model."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Optional, Sequence

if TYPE_CHECKING:
    from peerreview.models.review import Review
    from peerreview.models.user import User

PAPER_STATUSES = ("draft", "submitted", "under_review", "published")

# Statuses in which a paper accepts new reviews
REVIEWABLE_STATUSES = ("submitted", "under_review")


@dataclass
class Paper:
    """Represents a research paper owned by a single user."""

    title: str
    abstract: str
    owner_id: int
    authors: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    category: str = ""
    status: Literal["draft", "submitted", "under_review", "published"] = "draft"

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    # Relations, only loaded by PaperRepository.find_by_id(with_relations=True)
    owner: Optional["User"] = None
    reviews: Optional[list["Review"]] = None

    @property
    def is_reviewable(self) -> bool:
        return self.status in REVIEWABLE_STATUSES

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the API boundary; relations only when loaded."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "authors": list(self.authors),
            "keywords": list(self.keywords),
            "category": self.category,
            "status": self.status,
            "owner_id": self.owner_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.owner is not None:
            data["owner"] = self.owner.to_dict()
        if self.reviews is not None:
            data["reviews"] = [r.to_dict() for r in self.reviews]
        return data


def clean_list(values: Sequence[Any]) -> list[Any]:
    """Strip string entries and drop blank ones. Non-string items are kept."""
    cleaned: list[Any] = []
    for value in values:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        cleaned.append(value)
    return cleaned


@dataclass
class PaperUpdate:
    """Partial update for a paper.

    Only non-empty fields are applied. ``None``, a blank string or a list
    with no non-blank entries all mean "leave unchanged".
    """

    title: Optional[str] = None
    abstract: Optional[str] = None
    authors: Optional[list[str]] = None
    keywords: Optional[list[str]] = None
    category: Optional[str] = None

    def changed_fields(self) -> dict[str, Any]:
        """Supplied fields, stripped, with empty values left out."""
        fields: dict[str, Any] = {}
        for name in ("title", "abstract", "authors", "keywords", "category"):
            value = getattr(self, name)
            if isinstance(value, str):
                value = value.strip()
            elif isinstance(value, (list, tuple)):
                value = clean_list(value)
            if value:
                fields[name] = value
        return fields

    def apply_to(self, paper: Paper) -> Paper:
        for name, value in self.changed_fields().items():
            setattr(paper, name, value)
        return paper
