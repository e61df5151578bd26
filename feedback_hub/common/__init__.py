"""Errors and wire-format helpers shared by the domain and API layers."""

from feedback_hub.common.error_format import (
    format_validation_issues,
    is_normalized,
    normalize_http_error,
)
from feedback_hub.common.exceptions import (
    AuthFailureReason,
    AuthorizationError,
    CollectionNotFoundError,
    ValidationError,
)

__all__ = [
    "AuthFailureReason",
    "AuthorizationError",
    "CollectionNotFoundError",
    "ValidationError",
    "format_validation_issues",
    "is_normalized",
    "normalize_http_error",
]
