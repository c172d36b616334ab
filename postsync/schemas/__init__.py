"""Pydantic request/response schemas for the mock posts service."""

from postsync.schemas.health import HealthResponse
from postsync.schemas.post import PostCreateRequest, PostResponse, PostUpdateRequest
from postsync.schemas.user import UserResponse

__all__ = [
    "HealthResponse",
    "PostCreateRequest",
    "PostResponse",
    "PostUpdateRequest",
    "UserResponse",
]
