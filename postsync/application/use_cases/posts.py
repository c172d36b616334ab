"""Posts use cases: read views and issue mutations.

PostsService binds each view to its cache key, its remote fetcher and its
freshness window, so callers never build keys themselves. Reads go through
QueryExecutor; writes go through MutationExecutor after draft validation.
"""

from __future__ import annotations

from postsync.application.interfaces.remote import IPostRemoteService
from postsync.application.services.mutation_executor import (
    MutationExecutor,
    MutationRecord,
)
from postsync.application.services.post_validator import validate_post_draft_or_raise
from postsync.application.services.query_executor import QueryExecutor
from postsync.core.config import Settings, get_settings
from postsync.domain.entities.post import Post, PostDraft
from postsync.domain.entities.user import User
from postsync.domain.enums import MutationKind
from postsync.infrastructure.cache.keys import (
    collection_key,
    entity_key,
    owner_collection_key,
    user_key,
    users_key,
)
from postsync.infrastructure.cache.store import CacheStore


class PostsService:
    """Cached access to posts (global, per-owner, single) and their users."""

    def __init__(
        self,
        remote: IPostRemoteService,
        store: CacheStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store if store is not None else CacheStore()
        self.remote = remote
        self.queries = QueryExecutor(
            self.store, stale_while_revalidate=self.settings.stale_while_revalidate
        )
        self.mutations = MutationExecutor(self.store, remote)

    async def get_posts(self) -> tuple[Post, ...]:
        """Return every post (global collection view)."""
        return await self.queries.read(
            collection_key(), self.remote.fetch_collection, self.settings.posts_freshness
        )

    async def get_posts_by_owner(self, owner_id: int) -> tuple[Post, ...]:
        """Return the posts of one owner.

        Raises:
            InvalidArgumentException: If owner_id is not a positive integer.
        """
        key = owner_collection_key(owner_id)
        return await self.queries.read(
            key,
            lambda: self.remote.fetch_owner_collection(owner_id),
            self.settings.owner_posts_freshness,
        )

    async def get_post(self, post_id: int) -> Post:
        """Return one post.

        Raises:
            InvalidArgumentException: If post_id is not a positive integer.
            NotFoundException: If the remote reports the post absent.
        """
        key = entity_key(post_id)
        return await self.queries.read(
            key,
            lambda: self.remote.fetch_entity(post_id),
            self.settings.post_freshness,
        )

    async def get_users(self) -> tuple[User, ...]:
        """Return every user (reused for users_freshness, 5 minutes by default)."""
        return await self.queries.read(
            users_key(), self.remote.fetch_users, self.settings.users_freshness
        )

    async def get_user(self, user_id: int) -> User:
        """Return one user.

        Raises:
            InvalidArgumentException: If user_id is not a positive integer.
            NotFoundException: If the remote reports the user absent.
        """
        key = user_key(user_id)
        return await self.queries.read(
            key,
            lambda: self.remote.fetch_user(user_id),
            self.settings.users_freshness,
        )

    async def refresh_posts(self) -> tuple[Post, ...]:
        """Refetch the global collection now, ignoring freshness."""
        return await self.queries.refetch(
            collection_key(), self.remote.fetch_collection, self.settings.posts_freshness
        )

    async def create_post(self, draft: PostDraft) -> Post:
        """Validate draft, then create it.

        Raises:
            ValidationException: If the draft content is invalid.
        """
        validate_post_draft_or_raise(draft)
        return await self.mutations.create(draft)

    async def update_post(self, post: Post) -> Post:
        """Validate the new content of post, then update it."""
        validate_post_draft_or_raise(post.draft())
        return await self.mutations.update(post)

    async def delete_post(self, post_id: int, owner_id: int | None = None) -> None:
        """Delete a post; pass owner_id to patch only that owner's view."""
        await self.mutations.delete(post_id, owner_id=owner_id)

    def is_pending(self, kind: MutationKind, target: object) -> bool:
        """Return True while that mutation is in flight (disable its affordance)."""
        return self.mutations.is_pending(kind, target)

    def pending(self) -> list[MutationRecord]:
        return self.mutations.pending()

    async def settle(self) -> None:
        """Wait for background refreshes to finish."""
        await self.queries.drain()
