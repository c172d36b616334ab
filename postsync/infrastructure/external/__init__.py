"""Remote posts service adapters: HTTP (httpx) and in-memory."""

from postsync.infrastructure.external.http_client import HttpPostRemoteService
from postsync.infrastructure.external.in_memory import (
    InMemoryPostRemoteService,
    default_posts,
    default_users,
)

__all__ = [
    "HttpPostRemoteService",
    "InMemoryPostRemoteService",
    "default_posts",
    "default_users",
]
