"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from core.config import get_settings
from shared.classification import (
    BookmarkAction,
    compute_age,
    extract_domain,
    parse_timestamp,
    suggest_action,
)


def validate_and_normalize_tags(tags: list[str]) -> list[str]:
    """
    Normalize a list of tags.

    Tags are an unordered set: values are trimmed, empty strings are dropped and
    duplicates removed (first occurrence kept).

    Args:
        tags: List of tag strings to normalize.

    Returns:
        List of normalized tags.
    """
    normalized: list[str] = []
    for tag in tags:
        trimmed = tag.strip()
        if trimmed and trimmed not in normalized:
            normalized.append(trimmed)
    return normalized


def validate_url(url: str | None) -> str | None:
    """
    Validate URL scheme and length.

    Empty values pass through; requiredness is enforced by the service layer.
    """
    if not url:
        return url
    url = url.strip()
    settings = get_settings()
    if len(url) > settings.max_url_length:
        raise ValueError(
            f"URL exceeds maximum length of {settings.max_url_length:,} characters "
            f"(got {len(url):,} characters).",
        )
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise ValueError(f"Invalid URL format: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL format: only absolute http(s) URLs are accepted.")
    return url


def validate_title_length(title: str | None) -> str | None:
    """Validate that title doesn't exceed maximum length."""
    settings = get_settings()
    if title is not None and len(title) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(title):,} characters).",
        )
    return title


def validate_description_length(description: str | None) -> str | None:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if description is not None and len(description) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(description):,} characters).",
        )
    return description


def normalize_action(action: Any) -> Any:
    """Treat an empty action as unset."""
    if isinstance(action, str) and not action.strip():
        return None
    return action


class BookmarkMetadataFields(BaseModel):
    """Metadata fields shared by create and full-replace requests."""

    action: BookmarkAction | None = None
    topic: str | None = None
    share_to: str | None = None
    tags: list[str] = []
    custom_properties: dict[str, str] = {}

    @field_validator("action", mode="before")
    @classmethod
    def check_action(cls, v: Any) -> Any:
        """Normalize empty action to None."""
        return normalize_action(v)

    @field_validator("topic", "share_to")
    @classmethod
    def strip_optional_text(cls, v: str | None) -> str | None:
        """Trim topic/share destination; blank becomes None."""
        if v is None:
            return None
        return v.strip() or None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Normalize tags."""
        if v is None:
            return []
        return validate_and_normalize_tags(v)

    @field_validator("custom_properties", mode="before")
    @classmethod
    def default_custom_properties(cls, v: dict[str, str] | None) -> dict[str, str]:
        """Treat null custom properties as empty."""
        return v or {}


class BookmarkCreate(BookmarkMetadataFields):
    """Schema for creating a new bookmark."""

    url: str
    title: str
    description: str | None = None
    content: str | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Validate URL format."""
        return validate_url(v)

    @field_validator("title")
    @classmethod
    def check_title_length(cls, v: str) -> str:
        """Validate title length."""
        return validate_title_length(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class BookmarkReplace(BookmarkMetadataFields):
    """
    Schema for replacing every content and metadata field of a bookmark (PUT).

    Fields omitted from the request are reset to their defaults. The stored page
    `content` is not part of the replacement and is preserved.
    """

    url: str
    title: str
    description: str | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Validate URL format."""
        return validate_url(v)

    @field_validator("title")
    @classmethod
    def check_title_length(cls, v: str) -> str:
        """Validate title length."""
        return validate_title_length(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for a partial metadata update (PATCH).

    Only fields present in the request body are applied (see exclude_unset).
    Content fields are rejected; changing them requires a full replace.
    """

    model_config = ConfigDict(extra="forbid")

    action: BookmarkAction | None = None
    topic: str | None = None
    share_to: str | None = None
    tags: list[str] | None = None
    custom_properties: dict[str, str] | None = None

    @field_validator("action", mode="before")
    @classmethod
    def check_action(cls, v: Any) -> Any:
        """Normalize empty action to None."""
        return normalize_action(v)

    @field_validator("topic", "share_to")
    @classmethod
    def strip_optional_text(cls, v: str | None) -> str | None:
        """Trim topic/share destination; blank becomes None."""
        if v is None:
            return None
        return v.strip() or None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        """Normalize tags if provided."""
        if v is None:
            return None
        return validate_and_normalize_tags(v)


class BookmarkResponse(BaseModel):
    """
    Schema for bookmark responses, enriched with derived display fields.

    `domain`, `age` and `suggested_action` are computed on every read and never
    stored. Used for triage entries, lookups, and mutation responses alike.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    title: str
    description: str | None = None
    content: str | None = None
    action: str | None = None
    topic: str | None = None
    share_to: str | None = None
    tags: list[str] = []
    custom_properties: dict[str, str] = {}
    timestamp: datetime | None = None
    domain: str = ""
    age: str = ""
    suggested_action: BookmarkAction = BookmarkAction.READ_LATER

    @model_validator(mode="before")
    @classmethod
    def derive_display_fields(cls, data: Any) -> Any:
        """
        Build the response from an ORM object (or dict) and add derived fields.

        Timestamps are normalized to timezone-aware UTC; an unreadable timestamp
        becomes None and the age reads "unknown".
        """
        if isinstance(data, dict):
            data_dict = dict(data)
        else:
            data_dict = {}
            for key in [
                "id", "url", "title", "description", "content", "action",
                "topic", "share_to", "tags", "custom_properties", "timestamp",
            ]:
                if hasattr(data, key):
                    data_dict[key] = getattr(data, key)

        raw_timestamp = data_dict.get("timestamp")
        data_dict["timestamp"] = parse_timestamp(raw_timestamp)
        data_dict["tags"] = data_dict.get("tags") or []
        data_dict["custom_properties"] = data_dict.get("custom_properties") or {}

        domain = extract_domain(data_dict.get("url"))
        data_dict["domain"] = domain
        data_dict["age"] = compute_age(raw_timestamp)
        data_dict["suggested_action"] = suggest_action(
            domain, data_dict.get("title"), data_dict.get("description"),
        )
        return data_dict


class BookmarkListResponse(BaseModel):
    """Schema for paginated bookmark list responses."""

    items: list[BookmarkResponse]
    total: int  # Total count of bookmarks matching the query (before pagination)
    offset: int  # Current pagination offset
    limit: int  # Current pagination limit
    has_more: bool  # True if there are more results beyond this page
