"""HTTP surface of the mock posts service."""

from postsync.api.router import api_router

__all__ = ["api_router"]
