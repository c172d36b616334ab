"""Posts API: thin routes delegating to the in-memory posts service."""

from typing import Annotated

from fastapi import APIRouter, Query

from postsync.api.dependencies import RemoteDep
from postsync.schemas.post import PostCreateRequest, PostResponse, PostUpdateRequest

router = APIRouter()


@router.get("", response_model=list[PostResponse])
async def list_posts(
    remote: RemoteDep,
    user_id: Annotated[int | None, Query(alias="userId", gt=0)] = None,
):
    """List every post, or the posts of one owner when userId is given."""
    if user_id is None:
        posts = await remote.fetch_collection()
    else:
        posts = await remote.fetch_owner_collection(user_id)
    return [PostResponse.from_post(p) for p in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, remote: RemoteDep):
    """Return one post (404 if absent)."""
    return PostResponse.from_post(await remote.fetch_entity(post_id))


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(body: PostCreateRequest, remote: RemoteDep):
    """Create a post; the service assigns its id."""
    return PostResponse.from_post(await remote.create_entity(body.to_draft()))


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(post_id: int, body: PostUpdateRequest, remote: RemoteDep):
    """Merge the provided fields onto the stored post (404 if absent)."""
    current = await remote.fetch_entity(post_id)
    updated = await remote.update_entity(current.with_changes(**body.changes()))
    return PostResponse.from_post(updated)


@router.delete("/{post_id}")
async def delete_post(post_id: int, remote: RemoteDep) -> dict:
    """Delete a post (404 if absent)."""
    await remote.delete_entity(post_id)
    return {}
