"""Bookmark CRUD and lifecycle listing endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_async_session,
    get_bookmark_service,
    get_lifecycle_service,
    get_settings,
    resolve_page_limit,
)
from core.config import Settings
from models.bookmark import Bookmark
from schemas.bookmark import (
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkReplace,
    BookmarkResponse,
    BookmarkUpdate,
)
from services.bookmark_service import BookmarkService
from services.lifecycle_service import LifecycleService
from shared.classification import BookmarkAction

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


def _list_response(
    bookmarks: list[Bookmark],
    total: int,
    offset: int,
    limit: int,
) -> BookmarkListResponse:
    items = [BookmarkResponse.model_validate(b) for b in bookmarks]
    return BookmarkListResponse(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.post("/", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Create a new bookmark; it enters the triage queue unless an action is given."""
    bookmark = await service.create_bookmark(db, data)
    return BookmarkResponse.model_validate(bookmark)


@router.get("/triage", response_model=BookmarkListResponse)
async def get_triage_queue(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int | None = Query(default=None, ge=1, description="Pagination limit"),
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
    settings: Settings = Depends(get_settings),
) -> BookmarkListResponse:
    """
    List bookmarks awaiting triage, newest first.

    A bookmark needs triage when its action is unset or `read-later`. Each entry
    carries derived `domain`, `age` and `suggested_action` fields.
    """
    limit = resolve_page_limit(limit, settings)
    bookmarks, total = await service.get_triage_queue(db, limit=limit, offset=offset)
    return _list_response(bookmarks, total, offset, limit)


@router.get("/", response_model=BookmarkListResponse)
async def list_bookmarks_by_action(
    action: BookmarkAction = Query(default=BookmarkAction.SHARE, description="Action to filter by"),  # noqa: E501
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int | None = Query(default=None, ge=1, description="Pagination limit"),
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
    settings: Settings = Depends(get_settings),
) -> BookmarkListResponse:
    """
    List bookmarks with a given action, newest first.

    - **action**: `read-later` (includes untriaged), `working`, `share` (default),
      `archived` or `irrelevant`
    """
    limit = resolve_page_limit(limit, settings)
    bookmarks, total = await service.get_bookmarks_by_action(
        db, action, limit=limit, offset=offset,
    )
    return _list_response(bookmarks, total, offset, limit)


@router.get("/by-url", response_model=BookmarkResponse)
async def get_bookmark_by_url(
    url: str = Query(..., min_length=1, description="Exact URL to look up"),
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Get the most recently saved bookmark for a URL."""
    bookmark = await service.get_bookmark_by_url(db, url)
    return BookmarkResponse.model_validate(bookmark)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = await service.get_bookmark(db, bookmark_id)
    return BookmarkResponse.model_validate(bookmark)


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: int,
    data: BookmarkUpdate,
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Update metadata fields only; omitted fields are left unchanged."""
    bookmark = await service.update_bookmark(db, bookmark_id, data)
    return BookmarkResponse.model_validate(bookmark)


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def replace_bookmark(
    bookmark_id: int,
    data: BookmarkReplace,
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkResponse:
    """Replace all content and metadata fields of a bookmark."""
    bookmark = await service.replace_bookmark(db, bookmark_id, data)
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
    service: BookmarkService = Depends(get_bookmark_service),
) -> None:
    """Delete a bookmark (soft delete)."""
    await service.delete_bookmark(db, bookmark_id)
