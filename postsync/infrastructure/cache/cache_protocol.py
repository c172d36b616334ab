"""Cache store protocol used by the executors (DIP).

The in-process CacheStore is the only implementation; tests may supply
their own to observe calls.
"""

import asyncio
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

from postsync.domain.entities.post import Post
from postsync.infrastructure.cache.keys import CacheKey
from postsync.infrastructure.cache.store import CacheEntry, CacheValue


class CacheStoreProtocol(Protocol):
    """Protocol for keyed view stores."""

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for key, or None."""
        ...

    def set(
        self,
        key: CacheKey,
        value: CacheValue,
        freshness_window: timedelta | None = None,
    ) -> None:
        """Replace the value at key and stamp fetched_at."""
        ...

    def patch_collection(
        self,
        key: CacheKey,
        transform: Callable[[Sequence[Post]], Iterable[Post]],
    ) -> bool:
        """Apply transform to the cached collection at key; no-op if absent."""
        ...

    def invalidate(self, key: CacheKey) -> bool:
        """Mark the entry at key stale, keeping its value."""
        ...

    def invalidate_prefix(self, prefix: CacheKey) -> int:
        """Mark every entry whose key starts with prefix stale."""
        ...

    def evict(self, key: CacheKey) -> bool:
        """Remove the entry at key."""
        ...

    def now(self) -> datetime:
        """Return the store's notion of the current time."""
        ...

    def attach_in_flight(
        self,
        key: CacheKey,
        future: asyncio.Future[Any],
        freshness_window: timedelta | None = None,
    ) -> CacheEntry:
        """Record future as the single outstanding fetch for key."""
        ...

    def owns_in_flight(self, key: CacheKey, future: asyncio.Future[Any]) -> bool:
        """Return True if future is still the in-flight fetch for key."""
        ...

    def clear_in_flight(self, key: CacheKey, future: asyncio.Future[Any]) -> None:
        """Clear in_flight for key if it still refers to future."""
        ...

    def keys_with_prefix(self, prefix: CacheKey) -> list[CacheKey]:
        """Return the stored keys that start with prefix."""
        ...
