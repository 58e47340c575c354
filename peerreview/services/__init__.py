"""Service layer."""

from peerreview.services.paper_service import PaperService
from peerreview.services.review_service import Eligibility, ReviewService, ReviewSummary
from peerreview.services.user_service import UserService

__all__ = [
    "Eligibility",
    "PaperService",
    "ReviewService",
    "ReviewSummary",
    "UserService",
]
