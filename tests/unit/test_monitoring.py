"""
Unit Tests: Monitoring

Tests for structured logging: formatters, request context and presets.
"""

import json
import logging
import sys

import pytest

from monitoring.logging import (
    ContextFilter,
    JSONFormatter,
    TextFormatter,
    clear_request_context,
    configure_from_preset,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_context,
)


def make_record(message: str = "hello", **fields) -> logging.LogRecord:
    extra = {"extra_fields": fields} if fields else None
    return logging.getLogger("tests.monitoring").makeRecord(
        "tests.monitoring", logging.INFO, __file__, 10, message, None, None, extra=extra
    )


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def request_context():
    set_request_context("req-123")
    yield "req-123"
    clear_request_context()


# =============================================================================
# Logging Tests
# =============================================================================

class TestLogging:
    """Test logging configuration and usage."""

    @pytest.mark.unit
    def test_get_logger(self):
        logger = get_logger("test_module")

        assert logger.name == "test_module"

    @pytest.mark.unit
    def test_configure_json(self, restore_root_logger):
        configure_logging(level="DEBUG", format_type="json")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    @pytest.mark.unit
    def test_configure_from_preset(self, restore_root_logger):
        configure_from_preset("testing")

        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)

    @pytest.mark.unit
    def test_preset_overrides(self, restore_root_logger):
        configure_from_preset("development", level="ERROR", format_type="json")

        assert restore_root_logger.level == logging.ERROR
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    @pytest.mark.unit
    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            configure_from_preset("verbose")

    @pytest.mark.unit
    def test_keyword_arguments_become_fields(self, caplog):
        caplog.set_level(logging.INFO, logger="tests.fields")

        get_logger("tests.fields").info("Structured", user="ana", attempt=2)

        record = caplog.records[-1]
        assert record.getMessage() == "Structured"
        assert record.extra_fields == {"user": "ana", "attempt": 2}


# =============================================================================
# Formatter Tests
# =============================================================================

class TestFormatters:

    @pytest.mark.unit
    def test_json_formatter(self, request_context):
        output = json.loads(JSONFormatter().format(make_record("hello", path="/api")))

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["logger"] == "tests.monitoring"
        assert output["request_id"] == request_context
        assert output["extra"] == {"path": "/api"}
        assert output["timestamp"].endswith("Z")

    @pytest.mark.unit
    def test_json_formatter_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("tests").makeRecord(
                "tests", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "RuntimeError"
        assert output["exception"]["message"] == "boom"

    @pytest.mark.unit
    def test_text_formatter_appends_fields(self, request_context):
        record = make_record("New contact message", subject="Hi")
        ContextFilter().filter(record)

        line = TextFormatter().format(record)

        assert "[req-123]" in line
        assert line.endswith("New contact message | subject='Hi'")

    @pytest.mark.unit
    def test_text_formatter_without_context(self):
        record = make_record()
        ContextFilter().filter(record)

        assert "[-]" in TextFormatter().format(record)


# =============================================================================
# Request Context Tests
# =============================================================================

class TestRequestContext:

    @pytest.mark.unit
    def test_set_and_clear(self):
        set_request_context("abc")
        assert get_request_id() == "abc"

        clear_request_context()
        assert get_request_id() is None

    @pytest.mark.unit
    def test_empty_request_id_is_ignored(self):
        clear_request_context()
        set_request_context(None)

        assert get_request_id() is None
