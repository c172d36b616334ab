"""Use cases: posts views and mutations bound to keys and freshness windows."""

from postsync.application.use_cases.posts import PostsService

__all__ = ["PostsService"]
