"""
structlog setup for the API and CLI.

Production emits one JSON object per line; every other environment gets
the colored console renderer. Request-scoped fields such as ``request_id``
are carried in contextvars and merged into every event logged while a
request is in flight.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from feedback_hub.config.settings import get_settings

_QUIET_LOGGERS = ("asyncio", "asyncpg", "uvicorn.access")


def setup_logging() -> None:
    """
    Configure structlog and the stdlib root logger from settings.

    Domain modules log through ``logging.getLogger``; the API layer uses
    ``structlog.get_logger``. Both end up on stdout at ``LOG_LEVEL``.
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**fields) -> None:
    """Attach ``fields`` to every event logged in the current request."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_context() -> None:
    """Drop all request-scoped fields."""
    structlog.contextvars.clear_contextvars()
