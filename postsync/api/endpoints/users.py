"""Users API: read-only routes over the in-memory service."""

from fastapi import APIRouter

from postsync.api.dependencies import RemoteDep
from postsync.schemas.user import UserResponse

router = APIRouter()


@router.get("", response_model=list[UserResponse], response_model_exclude_none=True)
async def list_users(remote: RemoteDep):
    """List every user."""
    return [UserResponse.from_user(u) for u in await remote.fetch_users()]


@router.get("/{user_id}", response_model=UserResponse, response_model_exclude_none=True)
async def get_user(user_id: int, remote: RemoteDep):
    """Return one user (404 if absent)."""
    return UserResponse.from_user(await remote.fetch_user(user_id))
