"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from postsync.domain.entities import Post, PostDraft, User
from postsync.domain.enums import MutationKind
from postsync.domain.exceptions import (
    InvalidArgumentException,
    NotFoundException,
    OperationInProgressException,
    PostSyncException,
    TransportException,
    ValidationException,
)

__all__ = [
    "InvalidArgumentException",
    "MutationKind",
    "NotFoundException",
    "OperationInProgressException",
    "Post",
    "PostDraft",
    "PostSyncException",
    "TransportException",
    "User",
    "ValidationException",
]
