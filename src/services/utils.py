"""Shared query filters and helpers for the bookmark services."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import ColumnElement, String, and_, func, or_, type_coerce
from sqlalchemy.exc import SQLAlchemyError

from models.bookmark import Bookmark
from services.exceptions import BookmarkValidationError, StoreError
from shared.classification import BookmarkAction


def is_live() -> ColumnElement[bool]:
    """Bookmarks that have not been soft-deleted."""
    return Bookmark.deleted_at.is_(None)


def needs_triage() -> ColumnElement[bool]:
    """
    Bookmarks awaiting triage: action unset, empty, or read-later.

    Shared by the triage queue and the summary stats so the two always agree.
    """
    return or_(
        Bookmark.action.is_(None),
        Bookmark.action == "",
        Bookmark.action == BookmarkAction.READ_LATER.value,
    )


def is_working() -> ColumnElement[bool]:
    """Bookmarks actively being worked on."""
    return Bookmark.action == BookmarkAction.WORKING.value


def is_reference() -> ColumnElement[bool]:
    """Bookmarks kept for reference: untriaged, read-later, or queued to share."""
    return or_(needs_triage(), Bookmark.action == BookmarkAction.SHARE.value)


def has_topic() -> ColumnElement[bool]:
    """Bookmarks with a non-empty topic (only these can form projects)."""
    return and_(Bookmark.topic.is_not(None), Bookmark.topic != "")


def action_filter(action: BookmarkAction) -> ColumnElement[bool]:
    """Filter for a single action; read-later includes unset and empty actions."""
    if action == BookmarkAction.READ_LATER:
        return needs_triage()
    return Bookmark.action == action.value


def latest_timestamp() -> ColumnElement[str]:
    """
    MAX(timestamp) read without datetime coercion.

    Callers parse the value with parse_timestamp so a malformed stored value
    becomes a placeholder instead of failing the whole aggregation.
    """
    return type_coerce(func.max(Bookmark.timestamp), String)


def check_pagination(limit: int, offset: int) -> None:
    """
    Reject out-of-range pagination arguments.

    Bounds are the caller's responsibility; nothing is clamped here.
    """
    if limit <= 0:
        raise BookmarkValidationError(f"limit must be a positive integer (got {limit})")
    if offset < 0:
        raise BookmarkValidationError(f"offset must be zero or greater (got {offset})")


@contextmanager
def store_errors(operation: str, logger: logging.Logger) -> Iterator[None]:
    """Translate database failures into StoreError, logging the original cause."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Store operation failed: %s", operation)
        raise StoreError(operation) from e
