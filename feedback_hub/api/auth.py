"""
Admin authentication using a static bearer secret.

Admin-only endpoints depend on ``require_admin`` (see
``feedback_hub.api.dependencies``), which runs ``AdminAuthGuard.authorize``
against the incoming request:

    Authorization: Bearer <ADMIN_SECRET>

The secret is passed to the guard at construction so the "not configured"
case is an ordinary, injectable state rather than a startup failure.
"""

import hmac
import re

import structlog
from fastapi import Request

from feedback_hub.common.exceptions import AuthFailureReason, AuthorizationError

logger = structlog.get_logger(__name__)

_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two secrets without leaking where they differ.

    Length is not treated as sensitive, so unequal lengths return early.
    """
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def get_client_ip(request: Request) -> str:
    """Best-effort client address for audit logs. Never used for auth decisions."""
    if request.client and request.client.host:
        return request.client.host

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return "unknown"


class AdminAuthGuard:
    """Validates the admin bearer token.

    Args:
        admin_secret: Expected token. ``None`` or empty means admin auth is
            not configured and every request is rejected.
    """

    def __init__(self, admin_secret: str | None) -> None:
        self._admin_secret = admin_secret or None

    @property
    def configured(self) -> bool:
        return self._admin_secret is not None

    def authorize(self, request: Request) -> bool:
        """
        Authorize an admin request.

        Args:
            request: Incoming request

        Returns:
            True when the bearer token matches the configured secret

        Raises:
            AuthorizationError: If the secret is unset, the header is missing
                or malformed, or the token does not match
        """
        path = request.url.path

        if self._admin_secret is None:
            logger.warning(
                "Admin authentication attempted but ADMIN_SECRET is not configured",
                path=path,
            )
            raise AuthorizationError(AuthFailureReason.NOT_CONFIGURED)

        auth_header = request.headers.get("authorization")
        if not auth_header or not isinstance(auth_header, str):
            logger.warning(
                "Admin authentication failed: missing Authorization header",
                path=path,
                ip=get_client_ip(request),
            )
            raise AuthorizationError(AuthFailureReason.MISSING_HEADER)

        match = _BEARER_RE.match(auth_header)
        token = match.group(1).strip() if match else ""
        if not token:
            logger.warning(
                "Admin authentication failed: invalid Bearer token format",
                path=path,
                ip=get_client_ip(request),
            )
            raise AuthorizationError(AuthFailureReason.INVALID_FORMAT)

        if not constant_time_compare(token, self._admin_secret):
            logger.warning(
                "Admin authentication failed: invalid token",
                path=path,
                ip=get_client_ip(request),
            )
            raise AuthorizationError(AuthFailureReason.INVALID_TOKEN)

        logger.debug(
            "Admin authentication successful",
            path=path,
            ip=get_client_ip(request),
        )
        return True
