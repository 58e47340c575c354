"""Application state and request dependencies.

The database handle and services are built once per application by
``build_state`` and stored on ``app.state.ctx``; routes reach them
through ``get_state`` rather than a module-level global.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Query, Request

from peerreview.config import Settings
from peerreview.database.repository import Database, PaperRepository, ReviewRepository, UserRepository
from peerreview.errors import AuthenticationError, NotFoundError
from peerreview.models.user import User
from peerreview.services.paper_service import PaperService
from peerreview.services.review_service import ReviewService
from peerreview.services.user_service import UserService
from peerreview.utils.pagination import Page, normalize_page


@dataclass
class AppState:
    """All runtime services for one application instance."""

    settings: Settings
    db: Database
    users: UserService
    papers: PaperService
    reviews: ReviewService


def build_state(settings: Settings, db: Optional[Database] = None) -> AppState:
    """Wire repositories and services around one explicit database handle."""
    db = db or Database(settings.db_path)
    paper_repo = PaperRepository(db)
    review_repo = ReviewRepository(db)
    lifecycle = PaperService(paper_repo)
    return AppState(
        settings=settings,
        db=db,
        users=UserService(UserRepository(db)),
        papers=lifecycle,
        reviews=ReviewService(review_repo, paper_repo, lifecycle),
    )


# ============================================================================
# Dependencies
# ============================================================================


def get_state(request: Request) -> AppState:
    return request.app.state.ctx


def current_user(
    x_user_id: Optional[str] = Header(None, description="Caller's user id"),
    ctx: AppState = Depends(get_state),
) -> User:
    """Resolve the ``X-User-ID`` header to a registered user."""
    if not x_user_id:
        raise AuthenticationError("Missing X-User-ID header")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise AuthenticationError("Invalid X-User-ID header") from None
    try:
        return ctx.users.get_user(user_id)
    except NotFoundError:
        raise AuthenticationError(f"Unknown user {user_id}") from None


def page_params(
    page: Optional[int] = Query(None, description="1-based page number"),
    page_size: Optional[int] = Query(None, description="Items per page"),
    ctx: AppState = Depends(get_state),
) -> Page:
    return normalize_page(
        page,
        page_size,
        default_size=ctx.settings.default_page_size,
        max_size=ctx.settings.max_page_size,
    )
