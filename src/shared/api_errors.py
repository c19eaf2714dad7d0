"""
API error parsing for bookmark API clients.

Turns an httpx HTTP status error into a semantic category plus a readable
message, so callers can react to "not found" or "validation" without knowing
status codes or FastAPI's error body layout.
"""

from dataclasses import dataclass
from typing import Any, Literal

import httpx

ErrorCategory = Literal[
    "not_found",   # 404 - Bookmark or project not found (or deleted)
    "validation",  # 400/422 - Rejected request
    "internal",    # 5xx or unexpected errors
]


@dataclass
class ParsedApiError:
    """Parsed API error with semantic category and message."""

    category: ErrorCategory
    message: str
    status_code: int | None = None


def parse_http_error(
    e: httpx.HTTPStatusError,
    entity_type: str = "",
    entity_name: str = "",
) -> ParsedApiError:
    """
    Parse HTTP error into semantic categories.

    Args:
        e: The HTTP status error from httpx
        entity_type: Type of entity (e.g., "bookmark", "project") for error messages
        entity_name: Name/ID of entity for error messages

    Returns:
        ParsedApiError with category, message and the original status code
    """
    status = e.response.status_code

    if status == 404:
        if entity_name:
            msg = f"{entity_type.title()} '{entity_name}' not found" if entity_type else f"'{entity_name}' not found"  # noqa: E501
        else:
            msg = f"{entity_type.title()} not found" if entity_type else "Not found"
        return ParsedApiError("not_found", msg, status)

    if status in (400, 422):
        return ParsedApiError("validation", _extract_validation_message(e), status)

    detail = _safe_get_detail(e)
    if isinstance(detail, str) and detail:
        return ParsedApiError("internal", f"API error {status}: {detail}", status)
    return ParsedApiError("internal", f"API error {status}", status)


def _safe_get_detail(e: httpx.HTTPStatusError) -> dict[str, Any] | str:
    """Safely extract detail from error response."""
    try:
        body = e.response.json()
        if isinstance(body, dict):
            return body.get("detail", {})
        # Non-dict JSON body (list, string, etc.) - return empty
        return {}
    except ValueError:
        return {}


def _extract_validation_message(e: httpx.HTTPStatusError) -> str:
    """Extract validation error message from 400/422 response."""
    try:
        body = e.response.json()
        if not isinstance(body, dict):
            return "Validation error"
        detail = body.get("detail", "Validation error")
        if isinstance(detail, list):
            # FastAPI request validation errors are a list of error objects
            messages = []
            for err in detail:
                if isinstance(err, dict):
                    loc = err.get("loc", ["unknown"])
                    field = loc[-1] if loc else "unknown"
                    msg = err.get("msg", "invalid")
                    messages.append(f"{field}: {msg}")
            return "; ".join(messages) if messages else "Validation error"
        return str(detail)
    except ValueError:
        return "Validation error"
