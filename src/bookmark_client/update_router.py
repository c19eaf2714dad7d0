"""
Client-side routing of bookmark edits.

An edit touching any content field (title, url, description) is sent as a full
replace (PUT) built from the cached record; an edit touching only metadata is
sent as a partial update (PATCH) with exactly the supplied keys. The local cache
only ever holds representations returned by the server.
"""
import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum
from typing import Any

from bookmark_client.api_client import BookmarkApiClient
from shared.classification import BookmarkAction

CONTENT_FIELDS = frozenset({"title", "url", "description"})
# topic doubles as the project reference: projects are derived from it
METADATA_FIELDS = frozenset({"action", "topic", "share_to", "tags", "custom_properties"})

REPLACE_FIELDS = (
    "url",
    "title",
    "description",
    "action",
    "topic",
    "share_to",
    "tags",
    "custom_properties",
)


class UpdateKind(StrEnum):
    """How an edit is sent to the server."""

    FULL = "full"
    PARTIAL = "partial"


class UnknownBookmarkError(LookupError):
    """Raised when an edit targets a bookmark that is not in the local cache."""

    def __init__(self, bookmark_id: int) -> None:
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark {bookmark_id} is not loaded")


def classify_update(changes: Mapping[str, Any]) -> UpdateKind:
    """
    Decide whether an edit needs a full replace or a partial update.

    Presence of a content key decides, not its value: clearing a description
    (`{"description": None}`) is still a full replace. An empty mapping is a
    partial update.

    Raises:
        ValueError: If a key is neither a content nor a metadata field.
    """
    unknown = set(changes) - CONTENT_FIELDS - METADATA_FIELDS
    if unknown:
        raise ValueError(f"Unknown bookmark fields: {', '.join(sorted(unknown))}")
    if CONTENT_FIELDS.intersection(changes):
        return UpdateKind.FULL
    return UpdateKind.PARTIAL


def build_full_payload(current: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Merge changes over the cached record, keeping only the replaceable fields."""
    merged = {**current, **changes}
    return {field: merged.get(field) for field in REPLACE_FIELDS}


def build_partial_payload(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Payload for a metadata-only update: exactly the supplied keys.

    Raises:
        ValueError: If changes contain a content field or an unknown key.
    """
    if classify_update(changes) is UpdateKind.FULL:
        raise ValueError("Content fields require a full replace")
    return dict(changes)


class BookmarkCache:
    """Server representations of bookmarks, keyed by ID."""

    def __init__(self) -> None:
        self._records: dict[int, dict[str, Any]] = {}

    def __contains__(self, bookmark_id: object) -> bool:
        return bookmark_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def get(self, bookmark_id: int) -> dict[str, Any] | None:
        """Return a copy of the cached record, or None."""
        record = self._records.get(bookmark_id)
        return dict(record) if record is not None else None

    def put(self, record: Mapping[str, Any]) -> None:
        """Store a server representation under its ID."""
        self._records[record["id"]] = dict(record)

    def discard(self, bookmark_id: int) -> None:
        self._records.pop(bookmark_id, None)


class UpdateRouter:
    """Send bookmark edits to the API using the right operation shape."""

    def __init__(
        self,
        client: BookmarkApiClient,
        cache: BookmarkCache | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else BookmarkCache()
        self.logger = logger or logging.getLogger(__name__)

    async def update_bookmark(
        self,
        bookmark_id: int,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        """
        Apply an edit to a cached bookmark.

        On success the cached entry is replaced by the server's response, which
        is returned. On failure the cache is left untouched.

        Raises:
            UnknownBookmarkError: If the bookmark is not cached; nothing is sent.
            ValueError: If changes contain unknown fields; nothing is sent.
            BookmarkApiError: If the server rejects the request.
        """
        current = self.cache.get(bookmark_id)
        if current is None:
            raise UnknownBookmarkError(bookmark_id)

        kind = classify_update(changes)
        if kind is UpdateKind.FULL:
            payload = build_full_payload(current, changes)
            updated = await self.client.replace_bookmark(bookmark_id, payload)
        else:
            payload = build_partial_payload(changes)
            updated = await self.client.update_bookmark(bookmark_id, payload)

        self.cache.put(updated)
        self.logger.debug(
            "Bookmark %s updated (%s) fields=%s", bookmark_id, kind, sorted(changes),
        )
        return updated

    async def move_bookmarks(
        self,
        bookmark_ids: Iterable[int],
        action: BookmarkAction | None,
    ) -> list[dict[str, Any]]:
        """
        Set the action of several bookmarks, one metadata update each.

        Stops at the first failure; bookmarks before it keep their new action.
        """
        value = action.value if action is not None else None
        return [
            await self.update_bookmark(bookmark_id, {"action": value})
            for bookmark_id in bookmark_ids
        ]

    async def refresh(self, bookmark_id: int) -> dict[str, Any]:
        """Reload one bookmark from the server into the cache."""
        record = await self.client.get_bookmark(bookmark_id)
        self.cache.put(record)
        return record

    async def load_triage_queue(self, limit: int = 50, offset: int = 0) -> dict[str, Any]:
        """Fetch a page of the triage queue and cache every entry."""
        page = await self.client.get_triage_queue(limit=limit, offset=offset)
        for item in page["items"]:
            self.cache.put(item)
        return page

    async def load_bookmarks(
        self,
        action: BookmarkAction = BookmarkAction.SHARE,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, Any]:
        """Fetch a page of bookmarks with one action and cache every entry."""
        page = await self.client.list_bookmarks(action=action.value, limit=limit, offset=offset)
        for item in page["items"]:
            self.cache.put(item)
        return page

    async def create_bookmark(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Save a new bookmark and cache the stored representation.

        Raises:
            ValueError: If data contains unknown fields; nothing is sent.
            BookmarkApiError: If the server rejects the bookmark.
        """
        unknown = set(data) - CONTENT_FIELDS - METADATA_FIELDS - {"content"}
        if unknown:
            raise ValueError(f"Unknown bookmark fields: {', '.join(sorted(unknown))}")
        record = await self.client.create_bookmark(dict(data))
        self.cache.put(record)
        return record

    async def find_by_url(self, url: str) -> dict[str, Any]:
        """Look up the latest bookmark saved for a URL and cache it."""
        record = await self.client.get_bookmark_by_url(url)
        self.cache.put(record)
        return record

    async def delete_bookmark(self, bookmark_id: int) -> None:
        """
        Delete a cached bookmark; it is dropped from the cache once the server confirms.

        Raises:
            UnknownBookmarkError: If the bookmark is not cached; nothing is sent.
            BookmarkApiError: If the server rejects the request (cache untouched).
        """
        if bookmark_id not in self.cache:
            raise UnknownBookmarkError(bookmark_id)
        await self.client.delete_bookmark(bookmark_id)
        self.cache.discard(bookmark_id)
        self.logger.debug("Bookmark %s deleted", bookmark_id)
