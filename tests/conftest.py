"""Pytest configuration and fixtures for postsync.

Every test gets a fresh CacheStore driven by a controllable clock, so
freshness windows can be crossed without sleeping. HTTP tests run the mock
posts service in-process through httpx's ASGI transport.
"""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from postsync.application.services.mutation_executor import MutationExecutor
from postsync.application.services.query_executor import QueryExecutor
from postsync.core.config import Settings
from postsync.domain.entities.post import Post
from postsync.infrastructure.cache.store import CacheStore
from postsync.infrastructure.external.in_memory import InMemoryPostRemoteService
from postsync.main import create_app


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


POST_1 = Post(id=1, owner_id=1, title="A", body="a")
POST_2 = Post(id=2, owner_id=1, title="B", body="b")
POST_3 = Post(id=3, owner_id=2, title="C", body="c")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CacheStore:
    """Fresh cache store per test."""
    return CacheStore(clock=clock)


@pytest.fixture
def settings() -> Settings:
    """Settings with the default windows, independent of the environment."""
    return Settings(
        posts_freshness_seconds=60,
        owner_posts_freshness_seconds=60,
        post_freshness_seconds=None,
        users_freshness_seconds=300,
        stale_while_revalidate=True,
        telemetry_enabled=False,
    )


@pytest.fixture
def remote() -> InMemoryPostRemoteService:
    """In-memory remote seeded with POST_1 and POST_3."""
    return InMemoryPostRemoteService(posts=[POST_1, POST_3])


@pytest.fixture
def queries(store: CacheStore) -> QueryExecutor:
    return QueryExecutor(store)


@pytest.fixture
def mutations(store: CacheStore, remote: InMemoryPostRemoteService) -> MutationExecutor:
    return MutationExecutor(store, remote)


@pytest.fixture
def mock_service() -> InMemoryPostRemoteService:
    """Backing service for the mock HTTP app (default seed posts)."""
    return InMemoryPostRemoteService()


@pytest.fixture
async def client(mock_service: InMemoryPostRemoteService) -> AsyncClient:
    """Async HTTP client against the mock posts service (ASGI)."""
    transport = ASGITransport(app=create_app(posts_remote=mock_service))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
