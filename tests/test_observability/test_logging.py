"""Tests for structlog configuration."""

import structlog

from feedback_hub.observability.logging import bind_context, clear_context, setup_logging


class TestSetupLogging:
    def test_production_renders_json(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")

        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestContext:
    def test_bind_and_clear(self):
        clear_context()
        bind_context(request_id="abc")
        assert structlog.contextvars.get_contextvars() == {"request_id": "abc"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
