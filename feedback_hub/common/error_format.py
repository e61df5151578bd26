"""Helpers that build the normalized error body.

Every error response has the shape::

    {"error": str, "statusCode": int}

and validation failures add ``"issues": {field: [message, ...]}``.
"""

from collections.abc import Iterable, Mapping
from http import HTTPStatus
from typing import Any

BAD_REQUEST = "Bad Request"
INTERNAL_SERVER_ERROR = "Internal Server Error"


def status_text(status_code: int) -> str:
    """Canonical reason phrase for a status code, ``"Error"`` if unknown."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def format_validation_issues(
    errors: Mapping[str, str | list[str]],
) -> dict[str, list[str]]:
    """Wrap bare messages so every field maps to a list of strings."""
    return {
        field: list(messages) if isinstance(messages, list) else [messages]
        for field, messages in errors.items()
    }


def validation_error_body(errors: Mapping[str, str | list[str]]) -> dict[str, Any]:
    """Build the 400 body for a set of field errors."""
    return {
        "issues": format_validation_issues(errors),
        "error": BAD_REQUEST,
        "statusCode": HTTPStatus.BAD_REQUEST.value,
    }


def internal_error_body() -> dict[str, Any]:
    """Generic 500 body that never carries internal detail."""
    return {
        "error": INTERNAL_SERVER_ERROR,
        "statusCode": HTTPStatus.INTERNAL_SERVER_ERROR.value,
    }


def is_normalized(detail: Any) -> bool:
    """True if ``detail`` already has the normalized error shape.

    A ``message`` member disqualifies it: framework errors that carry both
    ``message`` and ``error`` still need their message extracted.
    """
    return (
        isinstance(detail, Mapping)
        and isinstance(detail.get("error"), str)
        and isinstance(detail.get("statusCode"), int)
        and not isinstance(detail.get("statusCode"), bool)
        and "message" not in detail
    )


def _join_messages(messages: Iterable[Any]) -> str:
    return ", ".join(str(m) for m in messages)


def normalize_http_error(status_code: int, detail: Any) -> dict[str, Any]:
    """Flatten an HTTP error detail into ``{"error", "statusCode"}``.

    Already-normalized details are returned unchanged, so normalizing
    twice yields the same object.
    """
    if is_normalized(detail):
        return detail

    fallback = status_text(status_code)

    if isinstance(detail, str) and detail:
        message = detail
    elif isinstance(detail, Mapping):
        if "message" in detail:
            raw = detail["message"]
            if isinstance(raw, str):
                message = raw
            elif isinstance(raw, list):
                message = _join_messages(raw)
            else:
                message = fallback
        elif isinstance(detail.get("error"), str):
            message = detail["error"]
        else:
            message = fallback
    elif isinstance(detail, list) and detail:
        message = _join_messages(detail)
    else:
        message = fallback

    return {"error": message, "statusCode": status_code}
