"""Tests for the bookmark API client helpers."""

import json

import httpx
import pytest
import respx
from httpx import Response

from bookmark_client.api_client import (
    BookmarkApiClient,
    BookmarkApiError,
    api_delete,
    api_get,
    api_patch,
    api_post,
    api_put,
    get_api_base_url,
    get_default_timeout,
)


@pytest.fixture
def mock_api() -> respx.MockRouter:
    """Context manager for mocking API responses."""
    with respx.mock(base_url="http://localhost:8000") as respx_mock:
        yield respx_mock


@pytest.mark.asyncio
async def test__api_get__request_source_header_set(mock_api: respx.MockRouter) -> None:
    """Test that X-Request-Source header identifies the client."""
    mock_api.get("/test").mock(return_value=Response(200, json={}))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        await api_get(client, "/test")

    assert mock_api.calls[0].request.headers["x-request-source"] == "bookmark-client"


@pytest.mark.asyncio
async def test__api_post__request_source_header_set(mock_api: respx.MockRouter) -> None:
    mock_api.post("/test").mock(return_value=Response(201, json={}))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        await api_post(client, "/test", {"key": "value"})

    assert mock_api.calls[0].request.headers["x-request-source"] == "bookmark-client"


@pytest.mark.asyncio
async def test__api_patch__sends_json_body(mock_api: respx.MockRouter) -> None:
    route = mock_api.patch("/test").mock(return_value=Response(200, json={"ok": True}))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        result = await api_patch(client, "/test", {"action": "share"})

    assert result == {"ok": True}
    assert json.loads(route.calls[0].request.content) == {"action": "share"}


@pytest.mark.asyncio
async def test__api_put__raises_for_status(mock_api: respx.MockRouter) -> None:
    mock_api.put("/test").mock(return_value=Response(400, json={"detail": "bad"}))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        with pytest.raises(httpx.HTTPStatusError):
            await api_put(client, "/test", {})


def test__get_api_base_url__from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOOKMARKS_API_URL", "https://links.example.com")
    assert get_api_base_url() == "https://links.example.com"


def test__get_api_base_url__default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BOOKMARKS_API_URL", raising=False)
    assert get_api_base_url() == "http://localhost:8000"


def test__get_default_timeout__from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOOKMARKS_API_TIMEOUT", "5")
    assert get_default_timeout() == 5.0


@pytest.mark.asyncio
async def test__bookmark_api_client__not_found_is_parsed(mock_api: respx.MockRouter) -> None:
    mock_api.get("/bookmarks/42").mock(
        return_value=Response(404, json={"detail": "Bookmark not found"}),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        with pytest.raises(BookmarkApiError) as exc_info:
            await api.get_bookmark(42)

    assert exc_info.value.category == "not_found"
    assert str(exc_info.value) == "Bookmark '42' not found"


@pytest.mark.asyncio
async def test__bookmark_api_client__transport_error_is_internal(
    mock_api: respx.MockRouter,
) -> None:
    mock_api.get("/bookmarks/3").mock(side_effect=httpx.ConnectError("refused"))

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        with pytest.raises(BookmarkApiError) as exc_info:
            await api.get_bookmark(3)

    assert exc_info.value.category == "internal"


@pytest.mark.asyncio
async def test__bookmark_api_client__triage_queue_params(mock_api: respx.MockRouter) -> None:
    route = mock_api.get("/bookmarks/triage").mock(
        return_value=Response(
            200, json={"items": [], "total": 0, "offset": 10, "limit": 5, "has_more": False},
        ),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        page = await api.get_triage_queue(limit=5, offset=10)

    assert page["total"] == 0
    assert route.calls[0].request.url.params["limit"] == "5"
    assert route.calls[0].request.url.params["offset"] == "10"


@pytest.mark.asyncio
async def test__bookmark_api_client__shared_client_not_closed(
    mock_api: respx.MockRouter,
) -> None:
    mock_api.delete("/bookmarks/1").mock(return_value=Response(204))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as http_client:
        async with BookmarkApiClient(client=http_client) as api:
            await api.delete_bookmark(1)
        assert not http_client.is_closed


@pytest.mark.asyncio
async def test__bookmark_api_client__create_posts_to_collection(
    mock_api: respx.MockRouter,
) -> None:
    route = mock_api.post("/bookmarks/").mock(
        return_value=Response(201, json={"id": 1, "url": "https://example.com/a"}),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        created = await api.create_bookmark({"url": "https://example.com/a", "title": "A"})

    assert created["id"] == 1
    assert json.loads(route.calls[0].request.content) == {
        "url": "https://example.com/a",
        "title": "A",
    }


@pytest.mark.asyncio
async def test__bookmark_api_client__create_validation_error(mock_api: respx.MockRouter) -> None:
    mock_api.post("/bookmarks/").mock(
        return_value=Response(400, json={"detail": "Title is required"}),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        with pytest.raises(BookmarkApiError) as exc_info:
            await api.create_bookmark({"url": "https://example.com/a", "title": " "})

    assert exc_info.value.category == "validation"
    assert str(exc_info.value) == "Title is required"


@pytest.mark.asyncio
async def test__bookmark_api_client__by_url_sends_query(mock_api: respx.MockRouter) -> None:
    route = mock_api.get("/bookmarks/by-url").mock(return_value=Response(200, json={"id": 9}))

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        found = await api.get_bookmark_by_url("https://example.com/a?b=1")

    assert found == {"id": 9}
    assert route.calls[0].request.url.params["url"] == "https://example.com/a?b=1"


@pytest.mark.asyncio
async def test__bookmark_api_client__list_bookmarks_params(mock_api: respx.MockRouter) -> None:
    route = mock_api.get("/bookmarks/").mock(
        return_value=Response(
            200, json={"items": [], "total": 0, "offset": 0, "limit": 20, "has_more": False},
        ),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        await api.list_bookmarks(action="working", limit=20)

    params = route.calls[0].request.url.params
    assert params["action"] == "working"
    assert params["limit"] == "20"
    assert params["offset"] == "0"


@pytest.mark.asyncio
async def test__bookmark_api_client__delete_not_found(mock_api: respx.MockRouter) -> None:
    mock_api.delete("/bookmarks/5").mock(
        return_value=Response(404, json={"detail": "Bookmark not found"}),
    )

    async with BookmarkApiClient(base_url="http://localhost:8000") as api:
        with pytest.raises(BookmarkApiError) as exc_info:
            await api.delete_bookmark(5)

    assert exc_info.value.category == "not_found"


@pytest.mark.asyncio
async def test__api_delete__accepts_empty_response(mock_api: respx.MockRouter) -> None:
    route = mock_api.delete("/test").mock(return_value=Response(204))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        result = await api_delete(client, "/test")

    assert result is None
    assert route.calls[0].request.headers["x-request-source"] == "bookmark-client"


@pytest.mark.asyncio
async def test__api_delete__raises_on_error_status(mock_api: respx.MockRouter) -> None:
    mock_api.delete("/test").mock(return_value=Response(404, json={"detail": "gone"}))

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        with pytest.raises(httpx.HTTPStatusError):
            await api_delete(client, "/test")
