"""PeerReview - paper submission and peer-review backend.

A small REST service where researchers register, submit papers,
and reviewers score them.
"""

__version__ = "1.0.0"

from peerreview.config import Settings
from peerreview.models.paper import Paper
from peerreview.models.review import Review
from peerreview.models.user import User

__all__ = ["Paper", "Review", "Settings", "User", "__version__"]
