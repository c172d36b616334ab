"""Cache: in-process store and cache key builders.

Used by the query and mutation executors. Key format is in keys.py (DRY);
every component derives keys through these builders so all views agree.
"""

from postsync.infrastructure.cache.cache_protocol import CacheStoreProtocol
from postsync.infrastructure.cache.keys import (
    CacheKey,
    collection_key,
    entity_key,
    owner_collection_key,
    owner_collection_prefix,
    user_key,
    users_key,
)
from postsync.infrastructure.cache.store import (
    CacheEntry,
    CacheStore,
    CacheValue,
    freeze_value,
)

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheStore",
    "CacheStoreProtocol",
    "CacheValue",
    "freeze_value",
    "collection_key",
    "entity_key",
    "owner_collection_key",
    "owner_collection_prefix",
    "user_key",
    "users_key",
]
