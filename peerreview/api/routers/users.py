"""User registration and identity lookup (/api/v1/users)."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from peerreview.api.responses import success
from peerreview.api.state import AppState, current_user, get_state
from peerreview.models.user import User

router = APIRouter(prefix="/api/v1/users")


class RegisterPayload(BaseModel):
    """Request body for registering a user."""
    email: str
    name: str
    role: str = "researcher"
    institution: str = ""


@router.post("")
def register(body: RegisterPayload, ctx: AppState = Depends(get_state)):
    user = ctx.users.register_user(body.email, body.name, body.role, body.institution)
    return success(user.to_dict(), status_code=201)


# NOTE: /me must be registered before /{user_id}
@router.get("/me")
def profile(user: User = Depends(current_user)):
    """Return the caller's own profile."""
    return success(user.to_dict())


@router.get("/{user_id}")
def get_user(user_id: int, ctx: AppState = Depends(get_state)):
    return success(ctx.users.get_user(user_id).to_dict())
