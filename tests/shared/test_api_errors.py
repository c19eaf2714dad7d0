"""Tests for API error parsing."""
import httpx
import pytest

from shared.api_errors import parse_http_error


def make_error(status: int, json: object | None = None, text: str | None = None) -> httpx.HTTPStatusError:  # noqa: E501
    request = httpx.Request("GET", "http://test/bookmarks/1")
    if json is not None:
        response = httpx.Response(status, json=json, request=request)
    else:
        response = httpx.Response(status, text=text or "", request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


def test__parse_http_error__not_found_with_entity() -> None:
    parsed = parse_http_error(make_error(404, {"detail": "Bookmark not found"}), "bookmark", "7")
    assert parsed.category == "not_found"
    assert parsed.message == "Bookmark '7' not found"
    assert parsed.status_code == 404


def test__parse_http_error__not_found_without_entity() -> None:
    parsed = parse_http_error(make_error(404))
    assert parsed.category == "not_found"
    assert parsed.message == "Not found"


def test__parse_http_error__service_validation_detail() -> None:
    parsed = parse_http_error(make_error(400, {"detail": "Title is required"}))
    assert parsed.category == "validation"
    assert parsed.message == "Title is required"


def test__parse_http_error__fastapi_validation_list() -> None:
    body = {
        "detail": [
            {"loc": ["body", "action"], "msg": "Input should be 'read-later'", "type": "enum"},
            {"loc": ["query", "limit"], "msg": "Input should be greater than 0"},
        ],
    }
    parsed = parse_http_error(make_error(422, body))
    assert parsed.category == "validation"
    assert parsed.message == (
        "action: Input should be 'read-later'; limit: Input should be greater than 0"
    )


def test__parse_http_error__non_json_validation_body() -> None:
    parsed = parse_http_error(make_error(400, text="<html>bad</html>"))
    assert parsed.message == "Validation error"


@pytest.mark.parametrize("status", [500, 502, 503])
def test__parse_http_error__server_errors_are_internal(status: int) -> None:
    parsed = parse_http_error(make_error(status, {"detail": "Operation failed"}))
    assert parsed.category == "internal"
    assert parsed.message == f"API error {status}: Operation failed"


def test__parse_http_error__unexpected_status_without_detail() -> None:
    parsed = parse_http_error(make_error(418, text="teapot"))
    assert parsed.category == "internal"
    assert parsed.message == "API error 418"
