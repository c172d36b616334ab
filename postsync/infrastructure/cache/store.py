"""In-process cache store for posts views.

Maps a cache key to a CacheEntry {value, fetched_at, freshness_window,
in_flight}. Values are immutable (an entity or a tuple of entities), and every
write replaces the whole value in one assignment, so a reader never sees a
half-applied change. All methods are synchronous; under a single event loop
no other coroutine can run while one of them executes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from postsync.domain.entities.post import Post
from postsync.domain.entities.user import User
from postsync.infrastructure.cache.keys import CacheKey, format_key
from postsync.shared.utils.datetime import Clock, age_of, utc_now

logger = logging.getLogger(__name__)

CacheValue = Post | User | tuple[Post, ...] | tuple[User, ...] | None


@dataclass
class CacheEntry:
    """One cached view.

    fetched_at is None when the entry has never been filled or was
    explicitly invalidated. in_flight holds the future of the one fetch
    currently outstanding for this key, if any.
    """

    value: CacheValue = None
    fetched_at: datetime | None = None
    freshness_window: timedelta | None = None
    in_flight: asyncio.Future[Any] | None = None

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @property
    def is_invalidated(self) -> bool:
        """True when the entry holds a value but was marked stale."""
        return self.has_value and self.fetched_at is None

    def is_fresh(self, now: datetime, window: timedelta | None) -> bool:
        """Return whether the entry can be served without a fetch.

        Args:
            now: Reference time.
            window: Freshness window to apply. None means fresh until
                invalidated.
        """
        if not self.has_value or self.fetched_at is None:
            return False
        if window is None:
            return True
        return age_of(self.fetched_at, now) < window


class CacheStore:
    """Process-wide keyed store of posts views.

    Construct one per application session (or per test). The store knows
    nothing about the network; the query executor fills it and the mutation
    executor reconciles it.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        """Initialize an empty store.

        Args:
            clock: Returns the current UTC time; defaults to utc_now.
        """
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._clock = clock or utc_now

    def now(self) -> datetime:
        """Return the store's notion of the current time."""
        return self._clock()

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for key, or None if absent."""
        return self._entries.get(key)

    def set(
        self,
        key: CacheKey,
        value: CacheValue,
        freshness_window: timedelta | None = None,
    ) -> None:
        """Replace the value at key and stamp fetched_at = now.

        Creates the entry if absent. Does not touch in_flight.

        Args:
            key: Cache key (use postsync.infrastructure.cache.keys builders).
            value: An entity (Post, User), or an iterable of them for collection views.
            freshness_window: When given, replaces the entry's window.
        """
        stored = freeze_value(value)
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(freshness_window=freshness_window)
            self._entries[key] = entry
        elif freshness_window is not None:
            entry.freshness_window = freshness_window
        entry.value = stored
        entry.fetched_at = self._clock()
        logger.debug("Cache SET: %s", format_key(key))

    def patch_collection(
        self,
        key: CacheKey,
        transform: Callable[[Sequence[Post]], Iterable[Post]],
    ) -> bool:
        """Apply transform to the collection cached at key.

        No-op when the key is absent or holds no collection; a collection is
        never synthesized. fetched_at is left as is, so a stale view stays
        stale after patching.

        Returns:
            True if the collection was patched.
        """
        entry = self._entries.get(key)
        if entry is None or not isinstance(entry.value, tuple):
            return False
        entry.value = tuple(transform(entry.value))
        logger.debug("Cache PATCH: %s (%s items)", format_key(key), len(entry.value))
        return True

    def invalidate(self, key: CacheKey) -> bool:
        """Mark the entry stale (fetched_at = None) without discarding its value.

        Returns:
            True if an entry existed.
        """
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.fetched_at = None
        logger.info("Cache INVALIDATE: %s", format_key(key))
        return True

    def invalidate_prefix(self, prefix: CacheKey) -> int:
        """Mark stale every entry whose key starts with prefix.

        Returns:
            Number of entries invalidated.
        """
        count = 0
        for key in self.keys_with_prefix(prefix):
            self._entries[key].fetched_at = None
            count += 1
        if count:
            logger.info("Cache INVALIDATE: %s* (%s keys)", format_key(prefix), count)
        return count

    def evict(self, key: CacheKey) -> bool:
        """Remove the entry entirely. A fetch in flight for it will not be cached.

        Returns:
            True if an entry was removed.
        """
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        logger.debug("Cache EVICT: %s", format_key(key))
        return True

    def attach_in_flight(
        self,
        key: CacheKey,
        future: asyncio.Future[Any],
        freshness_window: timedelta | None = None,
    ) -> CacheEntry:
        """Record future as the single outstanding fetch for key.

        Creates an empty entry when the key is absent (lazy creation on
        first read).

        Raises:
            RuntimeError: If another fetch is already in flight for key.
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(freshness_window=freshness_window)
            self._entries[key] = entry
        elif entry.in_flight is not None and not entry.in_flight.done():
            raise RuntimeError(f"Fetch already in flight for {format_key(key)}")
        if freshness_window is not None:
            entry.freshness_window = freshness_window
        entry.in_flight = future
        return entry

    def owns_in_flight(self, key: CacheKey, future: asyncio.Future[Any]) -> bool:
        """Return True if future is still the in-flight fetch recorded for key."""
        entry = self._entries.get(key)
        return entry is not None and entry.in_flight is future

    def clear_in_flight(self, key: CacheKey, future: asyncio.Future[Any]) -> None:
        """Clear in_flight for key if it still refers to future.

        An entry left empty by a failed first fetch is dropped.
        """
        entry = self._entries.get(key)
        if entry is None or entry.in_flight is not future:
            return
        entry.in_flight = None
        if entry.value is None:
            del self._entries[key]

    def keys(self) -> list[CacheKey]:
        """Return a snapshot list of the keys currently stored."""
        return list(self._entries)

    def keys_with_prefix(self, prefix: CacheKey) -> list[CacheKey]:
        """Return the stored keys that start with prefix."""
        return [key for key in self._entries if key[: len(prefix)] == prefix]

    def snapshot(self) -> dict[CacheKey, tuple[CacheValue, datetime | None]]:
        """Return {key: (value, fetched_at)} for comparing store states."""
        return {
            key: (entry.value, entry.fetched_at) for key, entry in self._entries.items()
        }

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CacheKey]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)


def freeze_value(value: Any) -> CacheValue:
    """Normalize a value to its immutable stored form."""
    if value is None or isinstance(value, (Post, User)):
        return value
    return tuple(value)
