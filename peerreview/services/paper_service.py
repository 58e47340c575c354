"""Paper lifecycle: creation, owner-only edits and status transitions.

Status machine::

    draft --submit--> submitted --first review--> under_review --(external)--> published

No transition ever moves a paper back to ``draft``.
"""

import logging
from typing import Optional, Sequence

from peerreview.database.repository import PaperRepository
from peerreview.errors import InvalidStateError, NotFoundError, UnauthorizedError
from peerreview.models.paper import Paper, PaperUpdate, clean_list
from peerreview.utils.pagination import Page
from peerreview.validation import validate_paper_fields, validate_status

logger = logging.getLogger(__name__)


class PaperService:
    """Single authority for paper ownership checks and status changes."""

    def __init__(self, papers: PaperRepository):
        self.papers = papers

    # ── Commands ──────────────────────────────────────────────────────

    def create_paper(
        self,
        owner_id: int,
        title: str,
        abstract: str,
        authors: Sequence[str],
        keywords: Optional[Sequence[str]] = None,
        category: str = "",
    ) -> Paper:
        """Create a paper in ``draft`` status.

        Raises:
            ValidationError: If any field fails validation
            NotFoundError: If the owner does not exist
        """
        validate_paper_fields(title, abstract, authors, keywords, category)
        paper = Paper(
            title=title.strip(),
            abstract=abstract.strip(),
            authors=clean_list(authors),
            keywords=clean_list(keywords or []),
            category=category.strip(),
            owner_id=owner_id,
            status="draft",
        )
        paper = self.papers.create(paper)
        logger.info("User %s created paper %s", owner_id, paper.id)
        return paper

    def submit_paper(self, paper_id: int, requester_id: int) -> Paper:
        """Move an owned draft to ``submitted``.

        Raises:
            NotFoundError: If the paper does not exist
            UnauthorizedError: If the requester is not the owner
            InvalidStateError: If the paper is not a draft
        """
        paper = self._get_owned(paper_id, requester_id, "submit")
        if paper.status != "draft":
            raise InvalidStateError(f"Paper is not in draft status (current: {paper.status})")
        if not self.papers.transition_status(paper_id, "draft", "submitted"):
            # Someone else submitted it between our read and write
            current = self._get(paper_id)
            raise InvalidStateError(f"Paper is not in draft status (current: {current.status})")
        return self._get(paper_id)

    def update_paper(self, paper_id: int, requester_id: int, changes: PaperUpdate) -> Paper:
        """Apply the non-empty fields of ``changes``; status is left alone."""
        paper = self._get_owned(paper_id, requester_id, "update")
        fields = changes.changed_fields()
        if not fields:
            return paper
        validate_paper_fields(partial=True, **fields)
        changes.apply_to(paper)
        return self.papers.update(paper)

    def delete_paper(self, paper_id: int, requester_id: int) -> None:
        self._get_owned(paper_id, requester_id, "delete")
        self.papers.delete(paper_id)
        logger.info("User %s deleted paper %s", requester_id, paper_id)

    def advance_on_first_review(self, paper_id: int) -> bool:
        """``submitted`` -> ``under_review``; a no-op in any other status.

        Returns:
            True if the status changed
        """
        return self.papers.transition_status(paper_id, "submitted", "under_review")

    # ── Queries ───────────────────────────────────────────────────────

    def get_paper(self, paper_id: int) -> Paper:
        """Return a paper with its owner and reviews attached."""
        paper = self.papers.find_by_id(paper_id, with_relations=True)
        if paper is None:
            raise NotFoundError.for_resource("Paper", paper_id)
        return paper

    def list_papers(self, page: Page) -> list[Paper]:
        return self.papers.find_all(page.limit, page.offset)

    def list_user_papers(self, owner_id: int, page: Page) -> list[Paper]:
        return self.papers.find_by_owner(owner_id, page.limit, page.offset)

    def list_by_status(self, status: str, page: Page) -> list[Paper]:
        validate_status(status)
        return self.papers.find_by_status(status, page.limit, page.offset)

    def search_papers(self, query: str, page: Page) -> list[Paper]:
        query = (query or "").strip()
        if not query:
            return self.list_papers(page)
        return self.papers.search(query, page.limit, page.offset)

    # ── Private ───────────────────────────────────────────────────────

    def _get(self, paper_id: int) -> Paper:
        paper = self.papers.find_by_id(paper_id)
        if paper is None:
            raise NotFoundError.for_resource("Paper", paper_id)
        return paper

    def _get_owned(self, paper_id: int, requester_id: int, action: str) -> Paper:
        paper = self._get(paper_id)
        if paper.owner_id != requester_id:
            raise UnauthorizedError(f"Unauthorized to {action} this paper")
        return paper
