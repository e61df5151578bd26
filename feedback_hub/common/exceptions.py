"""Domain and authorization errors shared across the service.

``ValidationError`` is raised by domain code when a request is well-formed
but violates a business rule (e.g. a taken name). ``AuthorizationError`` is
an HTTP 401 raised by the admin guard. Both travel unchanged to the error
handlers in ``feedback_hub.api.errors``, which own the wire format.
"""

import enum

from fastapi import HTTPException, status

FieldErrors = dict[str, str | list[str]]


class ValidationError(Exception):
    """Raised when input violates a domain rule.

    Args:
        errors: Mapping of field name to one message or a list of messages.
    """

    def __init__(self, errors: FieldErrors) -> None:
        self.errors = dict(errors)
        summary = "; ".join(
            f"{field}: {', '.join(messages) if isinstance(messages, list) else messages}"
            for field, messages in self.errors.items()
        )
        super().__init__(f"Validation failed: {summary}")


class CollectionNotFoundError(LookupError):
    """Raised when no feedback collection exists for a key."""

    def __init__(self, key: str) -> None:
        super().__init__(f'Feedback collection "{key}" not found')
        self.key = key


class AuthFailureReason(str, enum.Enum):
    """Why an admin request was rejected."""

    NOT_CONFIGURED = "not_configured"
    MISSING_HEADER = "missing_header"
    INVALID_FORMAT = "invalid_format"
    INVALID_TOKEN = "invalid_token"


_AUTH_MESSAGES: dict[AuthFailureReason, str] = {
    AuthFailureReason.NOT_CONFIGURED: "Admin authentication is not configured",
    AuthFailureReason.MISSING_HEADER: "Missing or invalid Authorization header",
    AuthFailureReason.INVALID_FORMAT: (
        "Invalid Authorization header format. Expected: Bearer <token>"
    ),
    AuthFailureReason.INVALID_TOKEN: "Invalid authentication token",
}


class AuthorizationError(HTTPException):
    """HTTP 401 raised by the admin guard, tagged with the failure reason."""

    def __init__(self, reason: AuthFailureReason) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_AUTH_MESSAGES[reason],
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.reason = reason
