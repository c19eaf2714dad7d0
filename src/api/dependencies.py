"""FastAPI dependencies for injection."""
from fastapi import Depends, HTTPException

from core.config import Settings, get_settings
from db.session import get_async_session
from services.bookmark_service import BookmarkService
from services.lifecycle_service import LifecycleService


def get_bookmark_service() -> BookmarkService:
    """Provide the write/lookup service for a request."""
    return BookmarkService()


def get_lifecycle_service(settings: Settings = Depends(get_settings)) -> LifecycleService:
    """Provide the read/aggregation service configured from application settings."""
    return LifecycleService(settings)


def resolve_page_limit(limit: int | None, settings: Settings) -> int:
    """
    Apply the configured default and upper bound to a requested page size.

    The services reject bad pagination but never clamp, so bounds live here.
    """
    if limit is None:
        return settings.default_page_limit
    if limit > settings.max_page_limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must be at most {settings.max_page_limit}",
        )
    return limit


__all__ = [
    "get_async_session",
    "get_bookmark_service",
    "get_lifecycle_service",
    "get_settings",
    "resolve_page_limit",
]
