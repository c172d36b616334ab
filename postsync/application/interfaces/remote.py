"""Remote posts service interface (port).

Protocols define contracts that infrastructure adapters must fulfill (DIP).
Every method may raise TransportException (network failure, timeout, 5xx);
the methods that address one post raise NotFoundException when it is absent.
"""

from __future__ import annotations

from typing import Protocol

from postsync.domain.entities.post import Post, PostDraft
from postsync.domain.entities.user import User


class IPostRemoteService(Protocol):
    """Protocol for the remote owner of the posts and users resources."""

    async def fetch_collection(self) -> list[Post]:
        """Return every post."""

    async def fetch_owner_collection(self, owner_id: int) -> list[Post]:
        """Return the posts of one owner."""

    async def fetch_entity(self, post_id: int) -> Post:
        """Return one post. Raises NotFoundException if absent."""

    async def create_entity(self, draft: PostDraft) -> Post:
        """Create a post; the remote assigns its id."""

    async def update_entity(self, post: Post) -> Post:
        """Replace a post. Raises NotFoundException if post.id is unknown."""

    async def delete_entity(self, post_id: int) -> None:
        """Delete a post. Raises NotFoundException if post_id is unknown."""

    async def fetch_users(self) -> list[User]:
        """Return every user."""

    async def fetch_user(self, user_id: int) -> User:
        """Return one user. Raises NotFoundException if absent."""
