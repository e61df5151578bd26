"""Observability layer: structlog configuration and request-scoped log context."""

from feedback_hub.observability.logging import bind_context, clear_context, setup_logging

__all__ = ["setup_logging", "bind_context", "clear_context"]
