"""Mutation executor: create, update, and delete posts, then reconcile the cache.

Each operation is two-phase. First the remote call; on success, every view
the mutation touches is patched, written through, evicted or invalidated in
one synchronous step (no await between cache writes, so no reader observes
a partial cascade). On failure nothing in the cache changes and the error
is re-raised unchanged.

Only one mutation per (kind, target) may be in flight; a second call while
the first is pending raises OperationInProgressException without calling the
remote.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from postsync.application.interfaces.remote import IPostRemoteService
from postsync.domain.entities.post import Post, PostDraft, require_identifier
from postsync.domain.enums import MutationKind
from postsync.domain.exceptions import OperationInProgressException
from postsync.infrastructure.cache.cache_protocol import CacheStoreProtocol
from postsync.infrastructure.cache.keys import (
    CacheKey,
    collection_key,
    entity_key,
    owner_collection_key,
    owner_collection_prefix,
)
from postsync.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

PostsTransform = Callable[[Sequence[Post]], Iterable[Post]]


@dataclass
class MutationRecord:
    """A mutation that has been dispatched and not yet settled.

    Lives only for the duration of the call; used to disable UI affordances
    (e.g. a submit button) while the mutation is pending.
    """

    kind: MutationKind
    target: Any
    started_at: datetime
    settled: bool = field(default=False)


def _prepend(post: Post) -> PostsTransform:
    return lambda posts: (post, *(p for p in posts if p.id != post.id))


def _replace(post: Post) -> PostsTransform:
    return lambda posts: tuple(post if p.id == post.id else p for p in posts)


def _upsert(post: Post) -> PostsTransform:
    def transform(posts: Sequence[Post]) -> tuple[Post, ...]:
        if any(p.id == post.id for p in posts):
            return tuple(post if p.id == post.id else p for p in posts)
        return (*posts, post)

    return transform


def _remove(post_id: int) -> PostsTransform:
    return lambda posts: tuple(p for p in posts if p.id != post_id)


class MutationExecutor:
    """Runs post mutations against the remote and reconciles the CacheStore."""

    def __init__(self, store: CacheStoreProtocol, remote: IPostRemoteService) -> None:
        """Initialize the executor.

        Args:
            store: Cache store shared with the query executor.
            remote: Remote posts service.
        """
        self._store = store
        self._remote = remote
        self._pending: dict[tuple[MutationKind, Any], MutationRecord] = {}

    def is_pending(self, kind: MutationKind, target: Any) -> bool:
        """Return True while a mutation of kind for target is in flight.

        target is the draft for CREATE and the post id for UPDATE/DELETE.
        """
        return (kind, target) in self._pending

    def pending(self) -> list[MutationRecord]:
        """Return the records of every mutation currently in flight."""
        return list(self._pending.values())

    @contextmanager
    def _gate(self, kind: MutationKind, target: Any) -> Iterator[MutationRecord]:
        gate = (kind, target)
        if gate in self._pending:
            logger.info("Rejected %s for %r: already in progress", kind.value, target)
            raise OperationInProgressException(kind.value, target)
        record = MutationRecord(kind=kind, target=target, started_at=self._store.now())
        self._pending[gate] = record
        try:
            yield record
        finally:
            record.settled = True
            del self._pending[gate]

    @traced("postsync.mutation.create")
    async def create(self, draft: PostDraft) -> Post:
        """Create a post remotely, then prepend it to the collection view.

        The owner's collection view is invalidated rather than patched, and
        the single-post view is not populated.

        Raises:
            InvalidArgumentException: If draft.owner_id is not a positive integer.
            OperationInProgressException: If the same draft is already being created.
        """
        owner_collection_key(draft.owner_id)
        with self._gate(MutationKind.CREATE, draft):
            created = await self._remote.create_entity(draft)
            owner_key = owner_collection_key(created.owner_id)
            self._store.patch_collection(collection_key(), _prepend(created))
            self._store.invalidate(owner_key)
        add_span_attributes(post_id=created.id)
        logger.info("Created post %s (owner %s)", created.id, created.owner_id)
        return created

    @traced("postsync.mutation.update")
    async def update(self, post: Post, previous_owner_id: int | None = None) -> Post:
        """Replace a post remotely, then write the result through every view.

        The previous owner is previous_owner_id when given, else the owner
        of the cached copy (single-post view first, then the collection).
        When the owner changed, the previous owner's view drops the post and
        is invalidated wholesale; the new owner's view gains it. When the
        previous owner is unknown, every other owner view still holding the
        post is treated the same way.

        Raises:
            InvalidArgumentException: If post.id or post.owner_id is invalid.
            OperationInProgressException: If an update of post.id is pending.
        """
        entity_key(post.id)
        owner_collection_key(post.owner_id)
        if previous_owner_id is not None:
            require_identifier(previous_owner_id, "previous_owner_id")
        prior_owner = previous_owner_id or self._cached_owner(post.id)
        with self._gate(MutationKind.UPDATE, post.id):
            updated = await self._remote.update_entity(post)
            self._reconcile_update(updated, prior_owner)
        logger.info("Updated post %s (owner %s)", updated.id, updated.owner_id)
        return updated

    @traced("postsync.mutation.delete")
    async def delete(self, post_id: int, owner_id: int | None = None) -> None:
        """Delete a post remotely, then remove it from every cached view.

        The single-post view is evicted. When owner_id is given only that
        owner's view is patched; otherwise every owner view is invalidated.

        Raises:
            InvalidArgumentException: If post_id or owner_id is invalid.
            OperationInProgressException: If a delete of post_id is pending.
        """
        key = entity_key(post_id)
        owner_key = owner_collection_key(owner_id) if owner_id is not None else None
        with self._gate(MutationKind.DELETE, post_id):
            await self._remote.delete_entity(post_id)
            self._store.evict(key)
            remove = _remove(post_id)
            self._store.patch_collection(collection_key(), remove)
            if owner_key is not None:
                self._store.patch_collection(owner_key, remove)
            else:
                for cached_key in self._owner_keys():
                    self._store.patch_collection(cached_key, remove)
                self._store.invalidate_prefix(owner_collection_prefix())
        logger.info("Deleted post %s", post_id)

    def _reconcile_update(self, updated: Post, prior_owner: int | None) -> None:
        new_owner_key = owner_collection_key(updated.owner_id)
        moved = prior_owner is not None and prior_owner != updated.owner_id
        old_owner_key = owner_collection_key(prior_owner) if moved else None
        self._store.set(entity_key(updated.id), updated)
        self._store.patch_collection(collection_key(), _replace(updated))
        if old_owner_key is not None:
            self._store.patch_collection(old_owner_key, _remove(updated.id))
            self._store.invalidate(old_owner_key)
            self._store.patch_collection(new_owner_key, _upsert(updated))
        elif prior_owner is None:
            for key in self._owner_keys():
                if key != new_owner_key and self._holds(key, updated.id):
                    self._store.patch_collection(key, _remove(updated.id))
                    self._store.invalidate(key)
            self._store.patch_collection(new_owner_key, _upsert(updated))
        else:
            self._store.patch_collection(new_owner_key, _replace(updated))

    def _owner_keys(self) -> list[CacheKey]:
        return self._store.keys_with_prefix(owner_collection_prefix())

    def _holds(self, key: CacheKey, post_id: int) -> bool:
        entry = self._store.get(key)
        return (
            entry is not None
            and isinstance(entry.value, tuple)
            and any(p.id == post_id for p in entry.value)
        )

    def _cached_owner(self, post_id: int) -> int | None:
        entry = self._store.get(entity_key(post_id))
        if entry is not None and isinstance(entry.value, Post):
            return entry.value.owner_id
        entry = self._store.get(collection_key())
        if entry is not None and isinstance(entry.value, tuple):
            for cached in entry.value:
                if cached.id == post_id:
                    return cached.owner_id
        return None
