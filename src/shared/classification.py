"""
Classification helpers for bookmarks.

Pure functions shared by the API schemas and the client: domain extraction,
human-readable age, the triage suggestion heuristic, and project status bands.
None of these raise on bad input - they are display aids and degrade to a
neutral value so that one malformed row never breaks a whole page.
"""
from datetime import UTC, datetime
from enum import StrEnum
from urllib.parse import urlsplit


class BookmarkAction(StrEnum):
    """Triage state of a bookmark. An unset action is stored as NULL."""

    READ_LATER = "read-later"
    WORKING = "working"
    SHARE = "share"
    ARCHIVED = "archived"
    IRRELEVANT = "irrelevant"


class ProjectStatus(StrEnum):
    """Recency band of a derived project, ordered from least to most decayed."""

    ACTIVE = "active"
    STALE = "stale"
    INACTIVE = "inactive"


UNKNOWN_AGE = "unknown"

_LEGACY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """
    Parse a timestamp into a timezone-aware UTC datetime.

    Accepts datetimes (naive values are treated as UTC), ISO 8601 strings, and the
    legacy `YYYY-MM-DD HH:MM:SS` format. Returns None for anything else.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.strptime(text, _LEGACY_TIMESTAMP_FORMAT)
            except ValueError:
                return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def extract_domain(url: str | None) -> str:
    """Return the host part of a URL, or an empty string if it cannot be parsed."""
    if not url:
        return ""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def compute_age(timestamp: datetime | str | None, now: datetime | None = None) -> str:
    """
    Coarse human-readable age of a timestamp.

    Returns "now" for anything under an hour old (or in the future), then
    "<n>h", "<n>d" and "<n>w". Unparseable input yields "unknown".
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return UNKNOWN_AGE

    current = parse_timestamp(now) if now is not None else datetime.now(UTC)
    hours = int((current - parsed).total_seconds() // 3600)

    if hours < 1:
        return "now"
    if hours < 24:
        return f"{hours}h"
    days = hours // 24
    if days < 7:
        return f"{days}d"
    return f"{days // 7}w"


# Ordered (label, domain keywords, text keywords). Text keywords are matched
# against both the title and the description. First matching rule wins.
_SUGGESTION_RULES: tuple[tuple[BookmarkAction, tuple[str, ...], tuple[str, ...]], ...] = (
    # Documentation / reference material
    (BookmarkAction.WORKING, ("doc", "manual"), ("documentation", "docs")),
    # Tutorials and learning content
    (BookmarkAction.WORKING, (), ("tutorial", "guide", "how to", "learn")),
    # News and blog posts
    (BookmarkAction.READ_LATER, ("blog", "news"), ("announce",)),
)


def suggest_action(
    domain: str | None,
    title: str | None,
    description: str | None,
) -> BookmarkAction:
    """
    Suggest a triage action from the domain, title and description.

    Advisory only; the suggestion is returned to the caller and never stored.
    """
    domain_text = (domain or "").lower()
    texts = ((title or "").lower(), (description or "").lower())

    for action, domain_keywords, text_keywords in _SUGGESTION_RULES:
        if any(keyword in domain_text for keyword in domain_keywords):
            return action
        if any(keyword in text for keyword in text_keywords for text in texts):
            return action
    return BookmarkAction.READ_LATER


def project_status(
    last_updated: datetime | str | None,
    stale_after_days: int,
    inactive_after_days: int,
    now: datetime | None = None,
) -> ProjectStatus:
    """
    Derive a project's status from the age of its most recent bookmark.

    Future-dated timestamps count as active. Missing or unparseable timestamps
    are treated as inactive.
    """
    parsed = parse_timestamp(last_updated)
    if parsed is None:
        return ProjectStatus.INACTIVE

    current = parse_timestamp(now) if now is not None else datetime.now(UTC)
    days_since = (current - parsed).total_seconds() / 86400

    if days_since <= stale_after_days:
        return ProjectStatus.ACTIVE
    if days_since <= inactive_after_days:
        return ProjectStatus.STALE
    return ProjectStatus.INACTIVE
