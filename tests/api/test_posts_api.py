"""Mock posts service API tests (JSONPlaceholder wire shape and error mapping)."""

import pytest
from httpx import AsyncClient

from postsync.core.exception_handlers import status_for
from postsync.domain.exceptions import (
    InvalidArgumentException,
    NotFoundException,
    OperationInProgressException,
    PostSyncException,
    TransportException,
    ValidationException,
)
from postsync.infrastructure.external.in_memory import InMemoryPostRemoteService


async def test_list_posts(client: AsyncClient) -> None:
    response = await client.get("/posts")
    assert response.status_code == 200
    data = response.json()
    assert [p["id"] for p in data] == [1, 2, 3, 4, 5]
    assert set(data[0]) == {"id", "userId", "title", "body"}


async def test_list_posts_by_owner(client: AsyncClient) -> None:
    response = await client.get("/posts", params={"userId": 2})
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [3, 5]


async def test_list_posts_rejects_invalid_owner(client: AsyncClient) -> None:
    response = await client.get("/posts", params={"userId": 0})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_get_post(client: AsyncClient) -> None:
    response = await client.get("/posts/3")
    assert response.status_code == 200
    assert response.json()["userId"] == 2


async def test_get_missing_post_returns_404(client: AsyncClient) -> None:
    response = await client.get("/posts/99")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "RESOURCE_NOT_FOUND"
    assert body["details"] == {"resource_type": "post", "resource_id": 99}


async def test_create_post_assigns_next_id(
    client: AsyncClient, mock_service: InMemoryPostRemoteService
) -> None:
    response = await client.post(
        "/posts", json={"userId": 1, "title": "New post", "body": "Body of the new post."}
    )
    assert response.status_code == 201
    assert response.json() == {
        "id": 6,
        "userId": 1,
        "title": "New post",
        "body": "Body of the new post.",
    }
    assert mock_service.posts[-1].id == 6


async def test_create_post_requires_owner(client: AsyncClient) -> None:
    response = await client.post("/posts", json={"title": "New post", "body": "Body"})
    assert response.status_code == 422


async def test_update_post_merges_fields(client: AsyncClient) -> None:
    response = await client.put("/posts/1", json={"title": "Renamed"})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Renamed"
    assert data["userId"] == 1
    assert data["body"] == "This is a test post body with some content to display."


async def test_update_post_can_change_owner(client: AsyncClient) -> None:
    response = await client.put(
        "/posts/1", json={"id": 1, "userId": 2, "title": "Moved", "body": "Moved body text."}
    )
    assert response.status_code == 200
    owned = await client.get("/posts", params={"userId": 2})
    assert 1 in [p["id"] for p in owned.json()]


async def test_update_missing_post_returns_404(client: AsyncClient) -> None:
    response = await client.put("/posts/99", json={"title": "Renamed"})
    assert response.status_code == 404


async def test_delete_post(client: AsyncClient) -> None:
    response = await client.delete("/posts/2")
    assert response.status_code == 200
    assert response.json() == {}
    assert (await client.get("/posts/2")).status_code == 404


async def test_simulated_failure_maps_to_502(
    client: AsyncClient, mock_service: InMemoryPostRemoteService
) -> None:
    mock_service.fail_next()
    response = await client.get("/posts")
    assert response.status_code == 502
    assert response.json()["error"] == "TRANSPORT_ERROR"


@pytest.mark.parametrize(
    ("exc", "status_code"),
    [
        (NotFoundException("post", 1), 404),
        (InvalidArgumentException("bad id"), 400),
        (ValidationException("bad draft"), 422),
        (OperationInProgressException("update", 1), 409),
        (TransportException("down", status_code=503), 502),
        (PostSyncException("other"), 400),
    ],
)
def test_status_for_domain_exceptions(exc: PostSyncException, status_code: int) -> None:
    assert status_for(exc) == status_code


async def test_list_users(client: AsyncClient) -> None:
    response = await client.get("/users")
    assert response.status_code == 200
    data = response.json()
    assert [u["id"] for u in data] == [1, 2]
    assert data[0]["company"]["catchPhrase"] == "Innovation at its best"
    assert data[0]["address"]["geo"] == {"lat": "40.7128", "lng": "-74.0060"}


async def test_get_missing_user_returns_404(client: AsyncClient) -> None:
    response = await client.get("/users/9")
    assert response.status_code == 404
    assert response.json()["details"]["resource_type"] == "user"
