"""Service layer for bookmark writes and point lookups."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkReplace, BookmarkUpdate
from services.exceptions import BookmarkNotFoundError, BookmarkValidationError
from services.utils import is_live, store_errors


def _require_content_fields(url: str | None, title: str | None) -> None:
    """Raise if a required content field is missing or blank."""
    if not url or not url.strip():
        raise BookmarkValidationError("URL is required")
    if not title or not title.strip():
        raise BookmarkValidationError("Title is required")


def _check_bookmark_id(bookmark_id: int) -> None:
    """Raise if the identifier cannot refer to a stored bookmark."""
    if isinstance(bookmark_id, bool) or not isinstance(bookmark_id, int) or bookmark_id < 1:
        raise BookmarkValidationError(f"Invalid bookmark ID: {bookmark_id!r}")


class BookmarkService:
    """
    Create, update and look up individual bookmarks.

    Methods take the request's session and never commit; the session generator
    commits once at request end. Database failures surface as StoreError.
    """

    entity_name = "Bookmark"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    async def create_bookmark(self, db: AsyncSession, data: BookmarkCreate) -> Bookmark:
        """
        Create a new bookmark.

        The action defaults to unset (awaiting triage) unless one is supplied.

        Raises:
            BookmarkValidationError: If url or title is missing or blank.
        """
        _require_content_fields(data.url, data.title)

        bookmark = Bookmark(
            url=data.url.strip(),
            title=data.title.strip(),
            description=data.description,
            content=data.content,
            action=data.action.value if data.action else None,
            topic=data.topic,
            share_to=data.share_to,
            tags=data.tags,
            custom_properties=data.custom_properties,
        )
        with store_errors("create_bookmark", self.logger):
            db.add(bookmark)
            await db.flush()
            await db.refresh(bookmark)

        self.logger.info(
            "Created bookmark %s (url=%s, action=%s)", bookmark.id, bookmark.url, bookmark.action,
        )
        return bookmark

    async def get_bookmark(self, db: AsyncSession, bookmark_id: int) -> Bookmark:
        """
        Get a live bookmark by ID.

        Raises:
            BookmarkValidationError: If the ID is not a positive integer.
            BookmarkNotFoundError: If no live bookmark has this ID.
        """
        _check_bookmark_id(bookmark_id)
        with store_errors("get_bookmark", self.logger):
            result = await db.execute(
                select(Bookmark).where(Bookmark.id == bookmark_id, is_live()),
            )
            bookmark = result.scalar_one_or_none()

        if bookmark is None:
            self.logger.warning("Bookmark not found: %s", bookmark_id)
            raise BookmarkNotFoundError(bookmark_id, self.entity_name)
        return bookmark

    async def get_bookmark_by_url(self, db: AsyncSession, url: str) -> Bookmark:
        """
        Get the most recently created live bookmark with exactly this URL.

        Used by capture clients to check whether a page was already saved.

        Raises:
            BookmarkValidationError: If url is blank.
            BookmarkNotFoundError: If no live bookmark has this URL.
        """
        if not url or not url.strip():
            raise BookmarkValidationError("URL is required")

        with store_errors("get_bookmark_by_url", self.logger):
            result = await db.execute(
                select(Bookmark)
                .where(Bookmark.url == url.strip(), is_live())
                .order_by(Bookmark.timestamp.desc(), Bookmark.id.desc())
                .limit(1),
            )
            bookmark = result.scalar_one_or_none()

        if bookmark is None:
            raise BookmarkNotFoundError(url, self.entity_name)
        return bookmark

    async def update_bookmark(
        self,
        db: AsyncSession,
        bookmark_id: int,
        data: BookmarkUpdate,
    ) -> Bookmark:
        """
        Apply a partial metadata update; only fields present in the request change.

        An update with no fields is a no-op that still returns the bookmark.

        Raises:
            BookmarkNotFoundError: If no live bookmark has this ID.
        """
        bookmark = await self.get_bookmark(db, bookmark_id)

        update_data = data.model_dump(exclude_unset=True, mode="json")
        if "tags" in update_data and update_data["tags"] is None:
            update_data["tags"] = []
        if "custom_properties" in update_data and update_data["custom_properties"] is None:
            update_data["custom_properties"] = {}

        for field, value in update_data.items():
            setattr(bookmark, field, value)

        with store_errors("update_bookmark", self.logger):
            await db.flush()
            await db.refresh(bookmark)

        self.logger.info(
            "Updated bookmark %s fields=%s", bookmark_id, sorted(update_data),
        )
        return bookmark

    async def replace_bookmark(
        self,
        db: AsyncSession,
        bookmark_id: int,
        data: BookmarkReplace,
    ) -> Bookmark:
        """
        Replace every content and metadata field of a bookmark.

        The stored page content and the creation timestamp are preserved.

        Raises:
            BookmarkValidationError: If url or title is missing or blank.
            BookmarkNotFoundError: If no live bookmark has this ID.
        """
        _require_content_fields(data.url, data.title)
        bookmark = await self.get_bookmark(db, bookmark_id)

        bookmark.url = data.url.strip()
        bookmark.title = data.title.strip()
        bookmark.description = data.description
        bookmark.action = data.action.value if data.action else None
        bookmark.topic = data.topic
        bookmark.share_to = data.share_to
        bookmark.tags = data.tags
        bookmark.custom_properties = data.custom_properties

        with store_errors("replace_bookmark", self.logger):
            await db.flush()
            await db.refresh(bookmark)

        self.logger.info("Replaced bookmark %s (url=%s)", bookmark_id, bookmark.url)
        return bookmark

    async def delete_bookmark(self, db: AsyncSession, bookmark_id: int) -> None:
        """
        Soft delete a bookmark; it disappears from every query and aggregation.

        Raises:
            BookmarkNotFoundError: If no live bookmark has this ID.
        """
        bookmark = await self.get_bookmark(db, bookmark_id)
        bookmark.deleted_at = utc_now()
        with store_errors("delete_bookmark", self.logger):
            await db.flush()

        self.logger.info("Soft deleted bookmark %s", bookmark_id)
