"""Application services: query/mutation executors and draft validation."""

from postsync.application.services.mutation_executor import (
    MutationExecutor,
    MutationRecord,
)
from postsync.application.services.post_validator import (
    validate_post_draft,
    validate_post_draft_or_raise,
)
from postsync.application.services.query_executor import QueryExecutor

__all__ = [
    "MutationExecutor",
    "MutationRecord",
    "QueryExecutor",
    "validate_post_draft",
    "validate_post_draft_or_raise",
]
