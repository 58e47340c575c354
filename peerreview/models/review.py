"""Review data model."""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

RECOMMENDATIONS = ("accept", "reject", "revision")

REVIEW_CRITERIA = ("originality", "methodology", "clarity", "significance")


def _zeroed_criteria() -> dict[str, int]:
    return {name: 0 for name in REVIEW_CRITERIA}


@dataclass
class ReviewMetadata:
    """Versioned review-criteria record attached to every review."""

    review_criteria: dict[str, int] = field(default_factory=_zeroed_criteria)
    review_type: str = "peer_review"
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "review_criteria": dict(self.review_criteria),
            "review_type": self.review_type,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ReviewMetadata":
        if not data:
            return cls()
        criteria = _zeroed_criteria()
        criteria.update(data.get("review_criteria") or {})
        return cls(
            review_criteria=criteria,
            review_type=str(data.get("review_type", "peer_review")),
            version=int(data.get("version", 1)),
        )


@dataclass
class Review:
    """A single reviewer's scored assessment of one paper."""

    paper_id: int
    reviewer_id: int
    score: int
    comment: str
    recommendation: Literal["accept", "reject", "revision"]
    metadata: ReviewMetadata = field(default_factory=ReviewMetadata)

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "paper_id": self.paper_id,
            "reviewer_id": self.reviewer_id,
            "score": self.score,
            "comment": self.comment,
            "recommendation": self.recommendation,
            "metadata": self.metadata.to_dict(),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
