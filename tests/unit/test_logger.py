"""
Unit tests for logging configuration.
"""

import structlog

from sheets_api import __version__
from sheets_api.config.settings import Settings
from sheets_api.utils.logger import (
    SERVICE_NAME,
    build_processors,
    request_context,
    service_context,
)


class TestServiceContext:
    """Tests for the service_context processor."""

    def test_stamps_service_identity(self) -> None:
        processor = service_context(Settings(environment="staging"))

        event = processor(None, "info", {"event": "sheet_loaded"})

        assert event["service"] == SERVICE_NAME
        assert event["version"] == __version__
        assert event["environment"] == "staging"
        assert "base_path" not in event

    def test_includes_base_path_when_mounted(self) -> None:
        processor = service_context(Settings(base_path="/gdrive"))
        assert processor(None, "info", {"event": "x"})["base_path"] == "/gdrive"

    def test_event_values_win(self) -> None:
        processor = service_context(Settings())
        event = processor(None, "info", {"event": "x", "service": "cli"})
        assert event["service"] == "cli"


class TestBuildProcessors:
    """Tests for the renderer choice per environment."""

    def test_production_renders_json(self) -> None:
        processors = build_processors(Settings(environment="production"))
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        processors = build_processors(Settings(environment="development"))
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_request_context_binds_and_unbinds() -> None:
    with request_context("req-1", path="/api/data"):
        bound = structlog.contextvars.get_contextvars()
        assert bound["request_id"] == "req-1"
        assert bound["path"] == "/api/data"

    assert "request_id" not in structlog.contextvars.get_contextvars()
