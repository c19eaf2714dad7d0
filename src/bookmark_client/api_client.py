"""HTTP client for the link triage API."""

import os
from types import TracebackType
from typing import Any, Self

import httpx

from shared.api_errors import ParsedApiError, parse_http_error


def get_api_base_url() -> str:
    """Get the API base URL from environment."""
    return os.getenv("BOOKMARKS_API_URL", "http://localhost:8000")


def get_default_timeout() -> float:
    """Get the default request timeout."""
    return float(os.getenv("BOOKMARKS_API_TIMEOUT", "30.0"))


def _get_headers() -> dict[str, str]:
    """Get common headers for API requests."""
    return {"X-Request-Source": "bookmark-client"}


async def api_get(
    client: httpx.AsyncClient,
    path: str,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Make a GET request to the API."""
    response = await client.get(path, params=params, headers=_get_headers())
    response.raise_for_status()
    return response.json()


async def api_post(
    client: httpx.AsyncClient,
    path: str,
    json: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Make a POST request to the API."""
    response = await client.post(path, json=json, headers=_get_headers())
    response.raise_for_status()
    return response.json()


async def api_patch(
    client: httpx.AsyncClient,
    path: str,
    json: dict[str, Any],
) -> dict[str, Any]:
    """Make a PATCH request to the API."""
    response = await client.patch(path, json=json, headers=_get_headers())
    response.raise_for_status()
    return response.json()


async def api_put(
    client: httpx.AsyncClient,
    path: str,
    json: dict[str, Any],
) -> dict[str, Any]:
    """Make a PUT request to the API."""
    response = await client.put(path, json=json, headers=_get_headers())
    response.raise_for_status()
    return response.json()


async def api_delete(client: httpx.AsyncClient, path: str) -> None:
    """Make a DELETE request to the API (expects an empty 204 response)."""
    response = await client.delete(path, headers=_get_headers())
    response.raise_for_status()


class BookmarkApiError(Exception):
    """Raised when the API rejects a request or cannot be reached."""

    def __init__(self, error: ParsedApiError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def category(self) -> str:
        """Semantic error category (not_found, validation, internal)."""
        return self.error.category


class BookmarkApiClient:
    """
    Thin async client over the bookmark endpoints.

    HTTP and transport failures are raised as BookmarkApiError with a parsed
    category. Pass an existing httpx.AsyncClient to share a connection pool (or
    to mount a mock transport); otherwise one is created from the environment.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or get_api_base_url(),
            timeout=timeout if timeout is not None else get_default_timeout(),
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, coro: Any, entity_type: str = "", entity_name: str = "") -> Any:
        try:
            return await coro
        except httpx.HTTPStatusError as e:
            raise BookmarkApiError(parse_http_error(e, entity_type, entity_name)) from e
        except httpx.RequestError as e:
            raise BookmarkApiError(ParsedApiError("internal", f"Request failed: {e}")) from e

    # --- Bookmarks ---

    async def create_bookmark(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a bookmark; returns the stored representation."""
        return await self._call(api_post(self._client, "/bookmarks/", data), "bookmark")

    async def get_bookmark(self, bookmark_id: int) -> dict[str, Any]:
        """Get a bookmark by ID."""
        return await self._call(
            api_get(self._client, f"/bookmarks/{bookmark_id}"), "bookmark", str(bookmark_id),
        )

    async def get_bookmark_by_url(self, url: str) -> dict[str, Any]:
        """Get the most recently saved bookmark for a URL."""
        return await self._call(
            api_get(self._client, "/bookmarks/by-url", {"url": url}), "bookmark", url,
        )

    async def replace_bookmark(self, bookmark_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Replace every content and metadata field (PUT)."""
        return await self._call(
            api_put(self._client, f"/bookmarks/{bookmark_id}", payload),
            "bookmark",
            str(bookmark_id),
        )

    async def update_bookmark(self, bookmark_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Update metadata fields only (PATCH)."""
        return await self._call(
            api_patch(self._client, f"/bookmarks/{bookmark_id}", payload),
            "bookmark",
            str(bookmark_id),
        )

    async def delete_bookmark(self, bookmark_id: int) -> None:
        """Delete a bookmark."""
        await self._call(
            api_delete(self._client, f"/bookmarks/{bookmark_id}"), "bookmark", str(bookmark_id),
        )

    # --- Listings ---

    async def get_triage_queue(self, limit: int = 50, offset: int = 0) -> dict[str, Any]:
        """Get one page of the triage queue."""
        return await self._call(
            api_get(self._client, "/bookmarks/triage", {"limit": limit, "offset": offset}),
        )

    async def list_bookmarks(
        self,
        action: str = "share",
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, Any]:
        """Get one page of bookmarks with the given action."""
        params = {"action": action, "limit": limit, "offset": offset}
        return await self._call(api_get(self._client, "/bookmarks/", params))
