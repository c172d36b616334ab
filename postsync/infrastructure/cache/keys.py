"""Cache key builders. Single place for key format (DRY).

Keys are tuples, so two keys built from equal arguments compare (and hash)
equal. The per-owner collection key extends the collection key, which lets
prefix invalidation target every owner view at once.
"""

from typing import Any

from postsync.core.constants import (
    CACHE_SEGMENT_COLLECTION,
    CACHE_SEGMENT_ENTITY,
    CACHE_SEGMENT_OWNER,
    CACHE_SEGMENT_USERS,
)
from postsync.domain.entities.post import require_identifier

CacheKey = tuple[Any, ...]


def collection_key() -> CacheKey:
    """Cache key for the global posts collection."""
    return (CACHE_SEGMENT_COLLECTION,)


def owner_collection_prefix() -> CacheKey:
    """Common prefix of every per-owner collection key."""
    return (CACHE_SEGMENT_COLLECTION, CACHE_SEGMENT_OWNER)


def owner_collection_key(owner_id: int) -> CacheKey:
    """Cache key for the posts of one owner.

    Raises:
        InvalidArgumentException: If owner_id is not a positive integer.
    """
    require_identifier(owner_id, "owner_id")
    return (*owner_collection_prefix(), owner_id)


def entity_key(post_id: int) -> CacheKey:
    """Cache key for a single post by id.

    Raises:
        InvalidArgumentException: If post_id is not a positive integer.
    """
    require_identifier(post_id, "post_id")
    return (CACHE_SEGMENT_ENTITY, post_id)


def users_key() -> CacheKey:
    """Cache key for the users collection."""
    return (CACHE_SEGMENT_USERS,)


def user_key(user_id: int) -> CacheKey:
    """Cache key for a single user by id.

    Raises:
        InvalidArgumentException: If user_id is not a positive integer.
    """
    require_identifier(user_id, "user_id")
    return (CACHE_SEGMENT_USERS, user_id)


def format_key(key: CacheKey) -> str:
    """Render a key for logs (e.g. collection:owner:3)."""
    return ":".join(str(part) for part in key)
