"""Presentation-layer dependency injection.

The in-memory posts service is created in the lifespan and stored on
app.state; routes receive it through get_posts_remote.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from postsync.infrastructure.external.in_memory import InMemoryPostRemoteService


def get_posts_remote(request: Request) -> InMemoryPostRemoteService:
    """Return the posts service held on app.state (503 if not initialized)."""
    remote = getattr(request.app.state, "posts_remote", None)
    if remote is None:
        raise HTTPException(status_code=503, detail="Posts service not initialized")
    return remote


RemoteDep = Annotated[InMemoryPostRemoteService, Depends(get_posts_remote)]
