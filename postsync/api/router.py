"""API router aggregation.

Routes are mounted at the root so the service has the same shape as the
public API (/posts, /posts/{id}, /users, /users/{id}) and the HTTP
adapter can target it by base URL alone.
"""

from fastapi import APIRouter

from postsync.api.endpoints import health, posts, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
