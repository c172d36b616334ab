"""Core constants: cache key segments and shared literal values.

Single source of truth for cache key structure (DRY). Used by
infrastructure cache key builders and by prefix invalidation.
"""

# Cache key segments (keys are tuples, e.g. ("collection", "owner", 3))
CACHE_SEGMENT_COLLECTION = "collection"
CACHE_SEGMENT_OWNER = "owner"
CACHE_SEGMENT_ENTITY = "entity"
CACHE_SEGMENT_USERS = "users"

# Resource type names used in error details and logs
RESOURCE_POST = "post"
RESOURCE_USER = "user"

# Draft validation limits (characters, after trimming)
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
BODY_MIN_LENGTH = 10
BODY_MAX_LENGTH = 1000
