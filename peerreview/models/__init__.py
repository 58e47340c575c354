"""Domain models."""

from peerreview.models.paper import PAPER_STATUSES, REVIEWABLE_STATUSES, Paper, PaperUpdate
from peerreview.models.review import RECOMMENDATIONS, Review, ReviewMetadata
from peerreview.models.user import USER_ROLES, User

__all__ = [
    "PAPER_STATUSES",
    "RECOMMENDATIONS",
    "REVIEWABLE_STATUSES",
    "USER_ROLES",
    "Paper",
    "PaperUpdate",
    "Review",
    "ReviewMetadata",
    "User",
]
