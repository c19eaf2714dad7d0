"""Client for the link triage API with update routing and a local cache."""

from .api_client import BookmarkApiClient, BookmarkApiError
from .update_router import (
    BookmarkCache,
    UnknownBookmarkError,
    UpdateKind,
    UpdateRouter,
    classify_update,
)

__all__ = [
    "BookmarkApiClient",
    "BookmarkApiError",
    "BookmarkCache",
    "UnknownBookmarkError",
    "UpdateKind",
    "UpdateRouter",
    "classify_update",
]
