"""In-memory posts and users service.

Backs the mock HTTP service and tests. Behaves like the real remote:
ids are assigned as max(id) + 1, updates replace the stored post,
unknown ids raise NotFoundException. Optional artificial latency and an
injectable failure simulate an unreliable network.
"""

from __future__ import annotations

import asyncio
import logging

from postsync.core.constants import RESOURCE_POST, RESOURCE_USER
from postsync.domain.entities.post import Post, PostDraft
from postsync.domain.entities.user import Address, Company, User
from postsync.domain.exceptions import NotFoundException, TransportException

logger = logging.getLogger(__name__)


def default_posts() -> list[Post]:
    """Seed data: five posts owned by users 1 and 2."""
    return [
        Post(1, 1, "Test Post Title", "This is a test post body with some content to display."),
        Post(2, 1, "Another Test Post", "This is another test post with different content."),
        Post(3, 2, "Jane's Post", "A post written by Jane Smith about various topics."),
        Post(
            4,
            1,
            "Understanding React Hooks",
            "React Hooks have revolutionized how we write components. This post "
            "explores the most commonly used hooks and their practical applications.",
        ),
        Post(
            5,
            2,
            "Building Scalable APIs",
            "A comprehensive guide to building APIs that can handle growth and "
            "maintain performance as your application scales.",
        ),
    ]


def default_users() -> list[User]:
    """Seed data: the two owners of default_posts()."""
    return [
        User(
            1,
            "John Doe",
            "john.doe@example.com",
            username="johndoe",
            phone="555-0123",
            website="johndoe.com",
            company=Company("Doe Enterprises", "Innovation at its best", "synergistic solutions"),
            address=Address("123 Main St", "Apt 1", "Anytown", "12345", "40.7128", "-74.0060"),
        ),
        User(
            2,
            "Jane Smith",
            "jane.smith@example.com",
            username="janesmith",
            phone="555-0456",
            website="janesmith.com",
            company=Company("Smith & Co", "Quality first", "scalable platforms"),
            address=Address("456 Oak Ave", "Suite 200", "Other City", "67890", "34.0522", "-118.2437"),
        ),
    ]


class InMemoryPostRemoteService:
    """Remote posts and users service held in lists (implements IPostRemoteService)."""

    def __init__(
        self,
        posts: list[Post] | None = None,
        latency_seconds: float = 0.0,
        users: list[User] | None = None,
    ) -> None:
        """Initialize with seed posts and users and optional latency.

        Args:
            posts: Initial posts; defaults to default_posts().
            latency_seconds: Delay applied before every call.
            users: Known users; defaults to default_users().
        """
        self._posts: list[Post] = list(default_posts() if posts is None else posts)
        self._users: list[User] = list(default_users() if users is None else users)
        self.latency_seconds = latency_seconds
        self.calls: dict[str, int] = {}
        self._failure: Exception | None = None

    def fail_next(self, error: Exception | None = None) -> None:
        """Make the next call raise error (TransportException by default)."""
        self._failure = error or TransportException("Simulated network failure", status_code=503)

    @property
    def posts(self) -> list[Post]:
        return list(self._posts)

    @property
    def users(self) -> list[User]:
        return list(self._users)

    async def _enter(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        if self._failure is not None:
            error, self._failure = self._failure, None
            logger.debug("Simulated failure on %s: %s", name, error)
            raise error

    def _index(self, post_id: int) -> int:
        for i, post in enumerate(self._posts):
            if post.id == post_id:
                return i
        raise NotFoundException(RESOURCE_POST, post_id)

    async def fetch_collection(self) -> list[Post]:
        await self._enter("fetch_collection")
        return list(self._posts)

    async def fetch_owner_collection(self, owner_id: int) -> list[Post]:
        await self._enter("fetch_owner_collection")
        return [p for p in self._posts if p.belongs_to(owner_id)]

    async def fetch_entity(self, post_id: int) -> Post:
        await self._enter("fetch_entity")
        return self._posts[self._index(post_id)]

    async def create_entity(self, draft: PostDraft) -> Post:
        await self._enter("create_entity")
        next_id = max((p.id for p in self._posts), default=0) + 1
        post = Post(id=next_id, owner_id=draft.owner_id, title=draft.title, body=draft.body)
        self._posts.append(post)
        return post

    async def update_entity(self, post: Post) -> Post:
        await self._enter("update_entity")
        index = self._index(post.id)
        self._posts[index] = post
        return post

    async def delete_entity(self, post_id: int) -> None:
        await self._enter("delete_entity")
        del self._posts[self._index(post_id)]

    async def fetch_users(self) -> list[User]:
        await self._enter("fetch_users")
        return list(self._users)

    async def fetch_user(self, user_id: int) -> User:
        await self._enter("fetch_user")
        for user in self._users:
            if user.id == user_id:
                return user
        raise NotFoundException(RESOURCE_USER, user_id)
