"""Review eligibility, review CRUD and score aggregation."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from peerreview.database.repository import PaperRepository, ReviewRepository
from peerreview.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PeerReviewError,
    UnauthorizedError,
)
from peerreview.models.paper import Paper
from peerreview.models.review import Review, ReviewMetadata
from peerreview.services.paper_service import PaperService
from peerreview.utils.pagination import Page
from peerreview.validation import validate_review_fields

logger = logging.getLogger(__name__)


@dataclass
class Eligibility:
    """Outcome of an eligibility probe, for callers that want a verdict
    instead of an exception."""

    eligible: bool
    code: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"eligible": self.eligible, "code": self.code, "reason": self.reason}


@dataclass
class ReviewSummary:
    reviews: list[Review]
    paper_score: float

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reviews": [r.to_dict() for r in self.reviews],
            "paper_score": self.paper_score,
            "review_count": self.review_count,
        }


class ReviewService:
    """Gates review creation and computes derived scores."""

    def __init__(
        self,
        reviews: ReviewRepository,
        papers: PaperRepository,
        lifecycle: PaperService,
    ):
        self.reviews = reviews
        self.papers = papers
        self.lifecycle = lifecycle

    # ── Eligibility ───────────────────────────────────────────────────

    def check_eligibility(self, paper_id: int, reviewer_id: int) -> Paper:
        """Raise unless ``reviewer_id`` may review ``paper_id`` right now.

        Checks run in a fixed order so the reported reason is
        deterministic: existence, self-review, paper status, duplicate.

        Returns:
            The paper, as currently stored
        """
        paper = self.papers.find_by_id(paper_id)
        if paper is None:
            raise NotFoundError.for_resource("Paper", paper_id)
        if paper.owner_id == reviewer_id:
            raise ForbiddenError("Authors cannot review their own papers")
        if not paper.is_reviewable:
            raise InvalidStateError(f"Paper is not open for review (status: {paper.status})")
        if self.reviews.find_by_paper_and_reviewer(paper_id, reviewer_id) is not None:
            raise ConflictError("You have already reviewed this paper")
        return paper

    def eligibility(self, paper_id: int, reviewer_id: int) -> Eligibility:
        try:
            self.check_eligibility(paper_id, reviewer_id)
        except NotFoundError:
            raise
        except PeerReviewError as e:
            return Eligibility(eligible=False, code=e.code, reason=e.message)
        return Eligibility(eligible=True)

    # ── Commands ──────────────────────────────────────────────────────

    def create_review(
        self,
        paper_id: int,
        reviewer_id: int,
        comment: str,
        score: int,
        recommendation: str,
    ) -> Review:
        """Validate, re-check eligibility, persist, then advance the paper.

        Raises:
            ValidationError: On bad comment, score or recommendation
            NotFoundError / ForbiddenError / InvalidStateError / ConflictError:
                See ``check_eligibility``
        """
        validate_review_fields(comment, score, recommendation)
        self.check_eligibility(paper_id, reviewer_id)

        review = Review(
            paper_id=paper_id,
            reviewer_id=reviewer_id,
            comment=comment.strip(),
            score=score,
            recommendation=recommendation,
            metadata=ReviewMetadata(),
        )
        review = self.reviews.create(review)
        logger.info(
            "Reviewer %s reviewed paper %s (score=%s, %s)",
            reviewer_id, paper_id, score, recommendation,
        )
        self.lifecycle.advance_on_first_review(paper_id)
        return review

    def update_review(
        self,
        review_id: int,
        requester_id: int,
        comment: str,
        score: int,
        recommendation: str,
    ) -> Review:
        """Replace comment, score and recommendation of an owned review."""
        review = self._get_owned(review_id, requester_id, "update")
        validate_review_fields(comment, score, recommendation)
        review.comment = comment.strip()
        review.score = score
        review.recommendation = recommendation
        return self.reviews.update(review)

    def delete_review(self, review_id: int, requester_id: int) -> None:
        """Delete an owned review. The paper's status is not reverted."""
        self._get_owned(review_id, requester_id, "delete")
        self.reviews.delete(review_id)
        logger.info("Reviewer %s deleted review %s", requester_id, review_id)

    # ── Queries ───────────────────────────────────────────────────────

    def get_review(self, review_id: int) -> Review:
        review = self.reviews.find_by_id(review_id)
        if review is None:
            raise NotFoundError.for_resource("Review", review_id)
        return review

    def list_paper_reviews(self, paper_id: int) -> list[Review]:
        return self.reviews.find_by_paper(paper_id)

    def list_reviewer_reviews(self, reviewer_id: int, page: Page) -> list[Review]:
        return self.reviews.find_by_reviewer(reviewer_id, page.limit, page.offset)

    def aggregate_score(self, paper_id: int) -> float:
        """Mean review score; 0.0 when the paper has no reviews."""
        return _mean_score(self.reviews.find_by_paper(paper_id))

    def paper_review_summary(self, paper_id: int) -> ReviewSummary:
        if self.papers.find_by_id(paper_id) is None:
            raise NotFoundError.for_resource("Paper", paper_id)
        reviews = self.reviews.find_by_paper(paper_id)
        return ReviewSummary(reviews=reviews, paper_score=_mean_score(reviews))

    def list_pending(self, reviewer_id: int, page: Page) -> list[Paper]:
        """Reviewable papers this reviewer has not reviewed yet."""
        return self.papers.find_pending_for_reviewer(reviewer_id, page.limit, page.offset)

    # ── Private ───────────────────────────────────────────────────────

    def _get_owned(self, review_id: int, requester_id: int, action: str) -> Review:
        review = self.get_review(review_id)
        if review.reviewer_id != requester_id:
            raise UnauthorizedError(f"Unauthorized to {action} this review")
        return review


def _mean_score(reviews: list[Review]) -> float:
    if not reviews:
        return 0.0
    return sum(r.score for r in reviews) / len(reviews)
