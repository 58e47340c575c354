"""Paper endpoints (/api/v1/papers)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from peerreview.api.responses import success
from peerreview.api.state import AppState, current_user, get_state, page_params
from peerreview.models.paper import PaperUpdate
from peerreview.models.user import User
from peerreview.utils.pagination import Page

router = APIRouter(prefix="/api/v1/papers")


class PaperCreatePayload(BaseModel):
    """Request body for creating a paper."""
    title: str
    abstract: str
    authors: list[str]
    keywords: list[str] = []
    category: str = ""


class PaperUpdatePayload(BaseModel):
    """Partial update; omitted, null or empty fields stay unchanged."""
    title: Optional[str] = None
    abstract: Optional[str] = None
    authors: Optional[list[str]] = None
    keywords: Optional[list[str]] = None
    category: Optional[str] = None


# ============================================================================
# Collection
# ============================================================================


@router.post("")
def create_paper(
    body: PaperCreatePayload,
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    paper = ctx.papers.create_paper(
        owner_id=user.id,
        title=body.title,
        abstract=body.abstract,
        authors=body.authors,
        keywords=body.keywords,
        category=body.category,
    )
    return success(paper.to_dict(), status_code=201)


@router.get("")
def list_papers(
    search: str = Query("", description="Match title or abstract"),
    status: str = Query("", description="Filter by status"),
    page: Page = Depends(page_params),
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    """List papers, optionally filtered by status or a search query."""
    if status:
        papers = ctx.papers.list_by_status(status, page)
    elif search:
        papers = ctx.papers.search_papers(search, page)
    else:
        papers = ctx.papers.list_papers(page)
    return success([p.to_dict() for p in papers], page=page)


# NOTE: /my must be registered before /{paper_id}
@router.get("/my")
def my_papers(
    page: Page = Depends(page_params),
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    papers = ctx.papers.list_user_papers(user.id, page)
    return success([p.to_dict() for p in papers], page=page)


# ============================================================================
# Single paper
# ============================================================================


@router.get("/{paper_id}")
def get_paper(paper_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    """Paper with owner and reviews attached."""
    return success(ctx.papers.get_paper(paper_id).to_dict())


@router.put("/{paper_id}")
def update_paper(
    paper_id: int,
    body: PaperUpdatePayload,
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    changes = PaperUpdate(**body.model_dump(exclude_unset=True))
    paper = ctx.papers.update_paper(paper_id, user.id, changes)
    return success(paper.to_dict())


@router.delete("/{paper_id}")
def delete_paper(paper_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    ctx.papers.delete_paper(paper_id, user.id)
    return success(None)


@router.post("/{paper_id}/submit")
def submit_paper(paper_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    """Submit an owned draft for review."""
    paper = ctx.papers.submit_paper(paper_id, user.id)
    return success(paper.to_dict())


@router.get("/{paper_id}/reviews")
def paper_reviews(paper_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    """All reviews of a paper plus its mean score."""
    return success(ctx.reviews.paper_review_summary(paper_id).to_dict())


@router.get("/{paper_id}/eligibility")
def review_eligibility(paper_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    """Whether the caller may review this paper, and why not."""
    return success(ctx.reviews.eligibility(paper_id, user.id).to_dict())
