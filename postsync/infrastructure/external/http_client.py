"""HTTP adapter for a JSONPlaceholder-shaped posts and users API.

All calls use httpx.AsyncClient so they do not block the event loop.
404 on a single-post or single-user route maps to NotFoundException;
every other failure (network error, timeout, error status, unreadable
body) maps to TransportException. No retries: the caller decides whether
to re-invoke.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from postsync.core.config import Settings, get_settings
from postsync.core.constants import RESOURCE_POST, RESOURCE_USER
from postsync.domain.entities.post import Post, PostDraft
from postsync.domain.entities.user import User
from postsync.domain.exceptions import NotFoundException, TransportException
from postsync.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class HttpPostRemoteService:
    """Remote posts service over HTTP (implements IPostRemoteService)."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Source of api_base_url and api_timeout_seconds.
            http_client: Optional preconfigured client (tests, connection reuse).
                A client passed in is not closed by aclose().
        """
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.api_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "HttpPostRemoteService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this adapter created it."""
        if self._owns_client:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        post_id: int | None = None,
        user_id: int | None = None,
        **kwargs: Any,
    ) -> Any:
        logger.debug("Remote request: %s %s", method, path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("Remote timeout: %s %s", method, path)
            raise TransportException(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.warning("Remote network error: %s %s: %s", method, path, e)
            raise TransportException(f"Network error: {e}") from e
        logger.debug("Remote response: %s from %s", response.status_code, path)
        if response.status_code == 404 and post_id is not None:
            raise NotFoundException(RESOURCE_POST, post_id)
        if response.status_code == 404 and user_id is not None:
            raise NotFoundException(RESOURCE_USER, user_id)
        if response.is_error:
            logger.warning(
                "Remote error status %s: %s %s", response.status_code, method, path
            )
            raise TransportException(
                f"Remote returned {response.status_code} for {method} {path}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportException(
                f"Invalid JSON from {method} {path}", status_code=response.status_code
            ) from e

    def _to_post(self, data: Any, method: str, path: str) -> Post:
        try:
            return Post.from_payload(data)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportException(f"Malformed post in response to {method} {path}") from e

    def _to_posts(self, data: Any, path: str) -> list[Post]:
        if not isinstance(data, list):
            raise TransportException(f"Expected a list from GET {path}")
        return [self._to_post(item, "GET", path) for item in data]

    @traced("postsync.remote.fetch_collection")
    async def fetch_collection(self) -> list[Post]:
        data = await self._request("GET", "/posts")
        return self._to_posts(data, "/posts")

    @traced("postsync.remote.fetch_owner_collection")
    async def fetch_owner_collection(self, owner_id: int) -> list[Post]:
        data = await self._request("GET", "/posts", params={"userId": owner_id})
        return self._to_posts(data, f"/posts?userId={owner_id}")

    @traced("postsync.remote.fetch_entity")
    async def fetch_entity(self, post_id: int) -> Post:
        path = f"/posts/{post_id}"
        data = await self._request("GET", path, post_id=post_id)
        return self._to_post(data, "GET", path)

    @traced("postsync.remote.create_entity")
    async def create_entity(self, draft: PostDraft) -> Post:
        data = await self._request("POST", "/posts", json=draft.to_payload())
        return self._to_post(data, "POST", "/posts")

    @traced("postsync.remote.update_entity")
    async def update_entity(self, post: Post) -> Post:
        path = f"/posts/{post.id}"
        data = await self._request("PUT", path, post_id=post.id, json=post.to_payload())
        return self._to_post(data, "PUT", path)

    @traced("postsync.remote.delete_entity")
    async def delete_entity(self, post_id: int) -> None:
        await self._request("DELETE", f"/posts/{post_id}", post_id=post_id)

    def _to_user(self, data: Any, path: str) -> User:
        try:
            return User.from_payload(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TransportException(f"Malformed user in response to GET {path}") from e

    @traced("postsync.remote.fetch_users")
    async def fetch_users(self) -> list[User]:
        data = await self._request("GET", "/users")
        if not isinstance(data, list):
            raise TransportException("Expected a list from GET /users")
        return [self._to_user(item, "/users") for item in data]

    @traced("postsync.remote.fetch_user")
    async def fetch_user(self, user_id: int) -> User:
        path = f"/users/{user_id}"
        data = await self._request("GET", path, user_id=user_id)
        return self._to_user(data, path)
