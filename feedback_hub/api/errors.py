"""
Error normalization for every request.

All error responses share one shape::

    {"error": "...", "statusCode": 400}

plus ``"issues": {field: [messages]}`` for validation failures. Domain
errors propagate unchanged from where they are raised; these handlers
are the only place they are translated to the wire format.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from feedback_hub.common.error_format import (
    internal_error_body,
    normalize_http_error,
    validation_error_body,
)
from feedback_hub.common.exceptions import ValidationError

logger = structlog.get_logger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: tuple | list) -> str:
    """Dotted field path for a pydantic error location, without the ``body`` prefix."""
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "request"


def request_validation_issues(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group request shape errors by field."""
    issues: dict[str, list[str]] = {}
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            field = "body"
        else:
            field = _field_name(error.get("loc", ()))
        issues.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return issues


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Domain rule violations become 400 with issues."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=validation_error_body(exc.errors),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request shape errors become 400 with issues (instead of FastAPI's 422)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=validation_error_body(request_validation_issues(exc)),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework HTTP errors keep their status; the body is flattened."""
    return JSONResponse(
        status_code=exc.status_code,
        content=normalize_http_error(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is a 500 with a generic message; detail stays in the log."""
    logger.error(
        f"Request failed. Reason: {exc}",
        url=str(request.url),
        method=request.method,
        params=dict(request.path_params),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=internal_error_body(),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the normalizing handlers on ``app``."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
