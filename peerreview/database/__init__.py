"""Persistence layer."""

from peerreview.database.repository import (
    Database,
    PaperRepository,
    ReviewRepository,
    UserRepository,
)

__all__ = ["Database", "PaperRepository", "ReviewRepository", "UserRepository"]
