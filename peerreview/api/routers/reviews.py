"""Review endpoints (/api/v1/reviews)."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from peerreview.api.responses import success
from peerreview.api.state import AppState, current_user, get_state, page_params
from peerreview.models.user import User
from peerreview.utils.pagination import Page

router = APIRouter(prefix="/api/v1/reviews")


class ReviewPayload(BaseModel):
    """Comment, score and recommendation; shared by create and update."""
    comment: str
    score: int
    recommendation: str


class ReviewCreatePayload(ReviewPayload):
    paper_id: int


@router.post("")
def create_review(
    body: ReviewCreatePayload,
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    review = ctx.reviews.create_review(
        paper_id=body.paper_id,
        reviewer_id=user.id,
        comment=body.comment,
        score=body.score,
        recommendation=body.recommendation,
    )
    return success(review.to_dict(), status_code=201)


# NOTE: /my and /pending must be registered before /{review_id}
@router.get("/my")
def my_reviews(
    page: Page = Depends(page_params),
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    reviews = ctx.reviews.list_reviewer_reviews(user.id, page)
    return success([r.to_dict() for r in reviews], page=page)


@router.get("/pending")
def pending_reviews(
    page: Page = Depends(page_params),
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    """Papers open for review that the caller has not reviewed yet."""
    papers = ctx.reviews.list_pending(user.id, page)
    return success([p.to_dict() for p in papers], page=page)


@router.get("/{review_id}")
def get_review(review_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    return success(ctx.reviews.get_review(review_id).to_dict())


@router.put("/{review_id}")
def update_review(
    review_id: int,
    body: ReviewPayload,
    user: User = Depends(current_user),
    ctx: AppState = Depends(get_state),
):
    """Replace comment, score and recommendation."""
    review = ctx.reviews.update_review(
        review_id, user.id, body.comment, body.score, body.recommendation
    )
    return success(review.to_dict())


@router.delete("/{review_id}")
def delete_review(review_id: int, user: User = Depends(current_user), ctx: AppState = Depends(get_state)):
    ctx.reviews.delete_review(review_id, user.id)
    return success(None)
