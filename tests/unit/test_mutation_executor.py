"""MutationExecutor tests: write-through/invalidation cascade, exclusivity, failure."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from postsync.application.services.mutation_executor import MutationExecutor
from postsync.domain.entities.post import Post, PostDraft
from postsync.domain.enums import MutationKind
from postsync.domain.exceptions import (
    InvalidArgumentException,
    NotFoundException,
    OperationInProgressException,
    TransportException,
)
from postsync.infrastructure.cache.keys import (
    collection_key,
    entity_key,
    owner_collection_key,
)
from postsync.infrastructure.cache.store import CacheStore

P1 = Post(id=1, owner_id=1, title="A", body="a")
P2 = Post(id=2, owner_id=1, title="B", body="b")
P3 = Post(id=3, owner_id=2, title="C", body="c")


@pytest.fixture
def remote() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def executor(store: CacheStore, remote: AsyncMock) -> MutationExecutor:
    return MutationExecutor(store, remote)


def _seed(store: CacheStore) -> None:
    store.set(collection_key(), [P1, P3])
    store.set(owner_collection_key(1), [P1])
    store.set(owner_collection_key(2), [P3])
    store.set(entity_key(1), P1)


# ---- create ----


async def test_create_prepends_and_invalidates_owner_view(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    remote.create_entity.return_value = P2

    created = await executor.create(PostDraft(owner_id=1, title="B", body="b"))

    assert created == P2
    assert store.get(collection_key()).value == (P2, P1, P3)
    assert store.get(owner_collection_key(1)).fetched_at is None
    assert store.get(owner_collection_key(2)).fetched_at is not None
    assert store.get(entity_key(2)) is None


async def test_create_without_cached_collection_does_not_synthesize(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    remote.create_entity.return_value = P2

    await executor.create(P2.draft())

    assert store.get(collection_key()) is None
    assert len(store) == 0


async def test_create_failure_leaves_cache_identical(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    before = store.snapshot()
    remote.create_entity.side_effect = TransportException("down", status_code=503)

    with pytest.raises(TransportException):
        await executor.create(PostDraft(owner_id=1, title="B", body="b"))

    assert store.snapshot() == before
    assert executor.pending() == []


async def test_create_can_be_retried_after_transport_failure(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    draft = PostDraft(owner_id=1, title="B", body="b")
    remote.create_entity.side_effect = [TransportException("down"), P2]

    with pytest.raises(TransportException):
        await executor.create(draft)
    assert not executor.is_pending(MutationKind.CREATE, draft)

    assert await executor.create(draft) == P2
    assert remote.create_entity.await_count == 2
    assert store.get(collection_key()).value == (P2, P1, P3)
    assert executor.pending() == []


async def test_create_rejects_invalid_owner_before_remote_call(
    executor: MutationExecutor, remote: AsyncMock
) -> None:
    with pytest.raises(InvalidArgumentException):
        await executor.create(PostDraft(owner_id=0, title="B", body="b"))
    remote.create_entity.assert_not_awaited()


# ---- update ----


async def test_update_writes_through_every_view(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    updated = P1.with_changes(title="A2", body="a2")
    remote.update_entity.return_value = updated

    result = await executor.update(updated)

    assert result == updated
    assert store.get(entity_key(1)).value == updated
    assert store.get(collection_key()).value == (updated, P3)
    assert store.get(owner_collection_key(1)).value == (updated,)
    assert store.get(owner_collection_key(1)).fetched_at is not None
    assert store.get(owner_collection_key(2)).value == (P3,)


async def test_update_uses_server_result_not_input(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    confirmed = P1.with_changes(title="server title")
    remote.update_entity.return_value = confirmed

    await executor.update(P1.with_changes(title="client title"))

    assert store.get(entity_key(1)).value == confirmed


async def test_update_owner_change_invalidates_old_owner_and_includes_in_new(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    moved = Post(id=1, owner_id=2, title="A2", body="a2")
    remote.update_entity.return_value = moved

    await executor.update(moved)

    old_view = store.get(owner_collection_key(1))
    assert old_view.fetched_at is None
    assert moved.id not in [p.id for p in old_view.value]
    assert store.get(owner_collection_key(2)).value == (P3, moved)
    assert store.get(collection_key()).value == (moved, P3)


async def test_update_owner_change_with_explicit_previous_owner(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    store.set(owner_collection_key(1), [P1])
    moved = Post(id=1, owner_id=2, title="A", body="a")
    remote.update_entity.return_value = moved

    await executor.update(moved, previous_owner_id=1)

    assert store.get(owner_collection_key(1)).fetched_at is None
    assert store.get(owner_collection_key(1)).value == ()


async def test_update_unknown_previous_owner_clears_other_views_holding_post(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    store.set(owner_collection_key(1), [P1, P2])
    store.set(owner_collection_key(3), [])
    moved = Post(id=1, owner_id=2, title="A2", body="a2")
    remote.update_entity.return_value = moved

    await executor.update(moved)

    assert store.get(owner_collection_key(1)).value == (P2,)
    assert store.get(owner_collection_key(1)).fetched_at is None
    assert store.get(owner_collection_key(3)).fetched_at is not None


async def test_update_failure_leaves_cache_identical(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    before = store.snapshot()
    remote.update_entity.side_effect = TransportException("down", status_code=503)

    with pytest.raises(TransportException) as exc_info:
        await executor.update(P1.with_changes(title="A2", owner_id=2))

    assert exc_info.value.status_code == 503
    assert store.snapshot() == before
    assert executor.pending() == []


async def test_update_can_be_retried_after_transport_failure(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    updated = P1.with_changes(title="A2")
    remote.update_entity.side_effect = [TransportException("down"), updated]

    with pytest.raises(TransportException):
        await executor.update(updated)
    assert executor.pending() == []

    assert await executor.update(updated) == updated
    assert remote.update_entity.await_count == 2
    assert store.get(entity_key(1)).value == updated


async def test_update_not_found_surfaces_unchanged(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    before = store.snapshot()
    error = NotFoundException("post", 1)
    remote.update_entity.side_effect = error

    with pytest.raises(NotFoundException) as exc_info:
        await executor.update(P1)

    assert exc_info.value is error
    assert store.snapshot() == before


async def test_concurrent_update_of_same_post_is_rejected(
    executor: MutationExecutor, remote: AsyncMock
) -> None:
    gate = asyncio.Event()

    async def slow_update(post: Post) -> Post:
        await gate.wait()
        return post

    remote.update_entity.side_effect = slow_update
    first = asyncio.create_task(executor.update(P1))
    await asyncio.sleep(0)

    assert executor.is_pending(MutationKind.UPDATE, 1)
    with pytest.raises(OperationInProgressException) as exc_info:
        await executor.update(P1.with_changes(title="again"))
    assert exc_info.value.error_code == "OPERATION_IN_PROGRESS"

    gate.set()
    assert await first == P1
    remote.update_entity.assert_awaited_once()
    assert not executor.is_pending(MutationKind.UPDATE, 1)


async def test_updates_of_different_posts_run_concurrently(
    executor: MutationExecutor, remote: AsyncMock
) -> None:
    gate = asyncio.Event()

    async def slow_update(post: Post) -> Post:
        await gate.wait()
        return post

    remote.update_entity.side_effect = slow_update
    tasks = [asyncio.create_task(executor.update(p)) for p in (P1, P2)]
    await asyncio.sleep(0)
    assert {r.target for r in executor.pending()} == {1, 2}
    gate.set()

    assert await asyncio.gather(*tasks) == [P1, P2]


async def test_duplicate_create_of_same_draft_is_rejected(
    executor: MutationExecutor, remote: AsyncMock
) -> None:
    gate = asyncio.Event()
    draft = PostDraft(owner_id=1, title="B", body="b")

    async def slow_create(d: PostDraft) -> Post:
        await gate.wait()
        return P2

    remote.create_entity.side_effect = slow_create
    first = asyncio.create_task(executor.create(draft))
    await asyncio.sleep(0)

    with pytest.raises(OperationInProgressException):
        await executor.create(draft)
    gate.set()
    await first
    remote.create_entity.assert_awaited_once()


# ---- delete ----


async def test_delete_with_owner_patches_only_that_owner(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    remote.delete_entity.return_value = None

    await executor.delete(1, owner_id=1)

    assert store.get(entity_key(1)) is None
    assert store.get(collection_key()).value == (P3,)
    assert store.get(owner_collection_key(1)).value == ()
    assert store.get(owner_collection_key(1)).fetched_at is not None
    assert store.get(owner_collection_key(2)).fetched_at is not None


async def test_delete_without_owner_invalidates_every_owner_view(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    remote.delete_entity.return_value = None

    await executor.delete(1)

    assert store.get(entity_key(1)) is None
    assert store.get(collection_key()).value == (P3,)
    for owner in (1, 2):
        view = store.get(owner_collection_key(owner))
        assert view.fetched_at is None
        assert all(p.id != 1 for p in view.value)


async def test_delete_failure_leaves_cache_identical(
    executor: MutationExecutor, store: CacheStore, remote: AsyncMock
) -> None:
    _seed(store)
    before = store.snapshot()
    remote.delete_entity.side_effect = NotFoundException("post", 1)

    with pytest.raises(NotFoundException):
        await executor.delete(1)

    assert store.snapshot() == before


async def test_rejected_mutation_makes_no_remote_call(
    executor: MutationExecutor, remote: AsyncMock
) -> None:
    gate = asyncio.Event()

    async def slow_delete(post_id: int) -> None:
        await gate.wait()

    remote.delete_entity.side_effect = slow_delete
    first = asyncio.create_task(executor.delete(1))
    await asyncio.sleep(0)

    with pytest.raises(OperationInProgressException):
        await executor.delete(1)
    assert remote.delete_entity.await_count == 1
    record = executor.pending()[0]
    assert record.kind is MutationKind.DELETE
    assert record.settled is False

    gate.set()
    await first
    assert record.settled is True
