"""Query executor: serve a view from cache or fetch it once.

A read returns the cached value while it is fresh. Otherwise it fetches
through the given fetcher, with at most one fetch in flight per key: every
concurrent read of the same key awaits that one fetch. The fetch runs in
its own task, so a caller that stops waiting does not cancel it and its
result still lands in the store.

Policy for stale values: an entry that was explicitly invalidated (value
kept, fetched_at cleared) is served as-is while a background refresh runs,
unless the caller opts out of stale-while-revalidate. An entry that merely
outlived its freshness window is refetched before the read returns.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from postsync.infrastructure.cache.cache_protocol import CacheStoreProtocol
from postsync.infrastructure.cache.keys import CacheKey, format_key
from postsync.infrastructure.cache.store import CacheValue, freeze_value
from postsync.shared.telemetry.tracing import record_cache_outcome, traced

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


class QueryExecutor:
    """Reads views through a CacheStore, de-duplicating concurrent fetches."""

    def __init__(
        self,
        store: CacheStoreProtocol,
        stale_while_revalidate: bool = True,
    ) -> None:
        """Initialize the executor.

        Args:
            store: Cache store shared with the mutation executor.
            stale_while_revalidate: Default policy for invalidated entries.
        """
        self._store = store
        self._stale_while_revalidate = stale_while_revalidate
        self._tasks: set[asyncio.Task[CacheValue]] = set()

    @property
    def store(self) -> CacheStoreProtocol:
        return self._store

    @traced("postsync.query.read")
    async def read(
        self,
        key: CacheKey,
        fetcher: Fetcher,
        freshness_window: timedelta | None = None,
        *,
        stale_while_revalidate: bool | None = None,
    ) -> CacheValue:
        """Return the value for key, fetching it only when required.

        Args:
            key: Cache key (use postsync.infrastructure.cache.keys builders).
            fetcher: Zero-argument coroutine function calling the remote.
            freshness_window: Maximum age of a served value; None means
                fresh until invalidated.
            stale_while_revalidate: Override the executor default for
                invalidated entries.

        Returns:
            An entity (Post, User) for single views, a tuple for collections.

        Raises:
            Whatever the fetcher raises (NotFoundException, TransportException);
            the cached value is left untouched in that case.
        """
        swr = (
            self._stale_while_revalidate
            if stale_while_revalidate is None
            else stale_while_revalidate
        )
        entry = self._store.get(key)
        if entry is not None:
            if entry.is_fresh(self._store.now(), freshness_window):
                logger.debug("Cache HIT: %s", format_key(key))
                record_cache_outcome("hit", key)
                return entry.value
            in_flight = entry.in_flight
            if in_flight is not None and not in_flight.done():
                if swr and entry.is_invalidated:
                    record_cache_outcome("stale", key)
                    return entry.value
                logger.debug("Cache DEDUP: %s", format_key(key))
                record_cache_outcome("dedup", key)
                return await asyncio.shield(in_flight)
            if swr and entry.is_invalidated:
                logger.debug("Cache STALE: %s (refreshing in background)", format_key(key))
                record_cache_outcome("stale", key)
                self._start_fetch(key, fetcher, freshness_window)
                return entry.value
        logger.debug("Cache MISS: %s", format_key(key))
        record_cache_outcome("miss", key)
        return await asyncio.shield(self._start_fetch(key, fetcher, freshness_window))

    async def refetch(
        self,
        key: CacheKey,
        fetcher: Fetcher,
        freshness_window: timedelta | None = None,
    ) -> CacheValue:
        """Fetch key now regardless of freshness, joining a fetch already in flight."""
        entry = self._store.get(key)
        if entry is not None and entry.in_flight is not None and not entry.in_flight.done():
            return await asyncio.shield(entry.in_flight)
        return await asyncio.shield(self._start_fetch(key, fetcher, freshness_window))

    def is_fetching(self, key: CacheKey) -> bool:
        """Return True while a fetch for key is outstanding."""
        entry = self._store.get(key)
        return entry is not None and entry.in_flight is not None and not entry.in_flight.done()

    async def drain(self) -> None:
        """Wait for every outstanding fetch (including background refreshes) to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _start_fetch(
        self,
        key: CacheKey,
        fetcher: Fetcher,
        freshness_window: timedelta | None,
    ) -> asyncio.Task[CacheValue]:
        task = asyncio.create_task(self._run_fetch(key, fetcher))
        self._store.attach_in_flight(key, task, freshness_window)
        self._tasks.add(task)
        task.add_done_callback(self._on_fetch_done)
        return task

    async def _run_fetch(self, key: CacheKey, fetcher: Fetcher) -> CacheValue:
        task = asyncio.current_task()
        try:
            value = await fetcher()
            if self._store.owns_in_flight(key, task):
                self._store.set(key, value)
                entry = self._store.get(key)
                return entry.value if entry is not None else freeze_value(value)
            # Evicted while fetching (e.g. the post was deleted): do not resurrect it.
            logger.info("Discarding fetch result for evicted key %s", format_key(key))
            return freeze_value(value)
        except Exception as exc:
            logger.warning("Fetch failed for %s: %s", format_key(key), exc)
            raise
        finally:
            self._store.clear_in_flight(key, task)

    def _on_fetch_done(self, task: asyncio.Task[CacheValue]) -> None:
        self._tasks.discard(task)
        if not task.cancelled():
            # Mark the exception retrieved; readers that awaited it re-raise it.
            task.exception()
