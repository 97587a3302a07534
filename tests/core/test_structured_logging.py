# ABOUTME: Tests for request-scoped logging, the JSON formatter and contextual log helpers
# ABOUTME: Verifies request IDs, call-site attribution and that logging setup honours configuration

import json
import logging
import sys

import pytest

from app.core.config import Config
from app.core.structured_logging import (
    JsonLogFormatter,
    RequestIdFilter,
    bind_request_id,
    log_error_with_context,
    log_service_operation,
    request_id,
    reset_request_id,
    setup_structured_logging,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestId:
    """Test suite for per-request log IDs."""

    def test_bind_generates_id(self):
        """Test that an ID is generated when none is given."""
        token = bind_request_id()
        try:
            assert request_id.get()
        finally:
            reset_request_id(token)

        assert request_id.get() is None

    def test_bind_explicit_id_and_reset(self):
        """Test that resetting restores the previous ID."""
        outer = bind_request_id("outer")
        inner = bind_request_id("inner")
        assert request_id.get() == "inner"

        reset_request_id(inner)
        assert request_id.get() == "outer"

        reset_request_id(outer)
        assert request_id.get() is None

    def test_filter_adds_id_to_record(self):
        """Test that the filter stamps records with the current ID."""
        token = bind_request_id("abc123")
        try:
            record = make_record()
            assert RequestIdFilter().filter(record) is True
        finally:
            reset_request_id(token)

        assert record.request_id == "abc123"


class TestJsonLogFormatter:
    """Test suite for JSON log formatting."""

    def test_formats_record_as_json(self):
        """Test the base fields of a JSON log entry."""
        record = make_record(request_id="abc123", context={"error_kind": "ForbiddenRange"})
        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "app.test"
        assert entry["line"] == 10
        assert entry["request_id"] == "abc123"
        assert entry["context"] == {"error_kind": "ForbiddenRange"}
        assert "extra" not in entry

    def test_unknown_record_attributes_go_to_extra(self):
        """Test that attributes passed through ``extra`` are kept."""
        entry = json.loads(JsonLogFormatter().format(make_record(client="edge-1")))

        assert entry["extra"] == {"client": "edge-1"}

    def test_includes_exception_details(self):
        """Test that exception information is serialised."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "boom"
        assert "RuntimeError: boom" in entry["exception"]["traceback"]


class TestLogHelpers:
    """Test suite for contextual logging helpers."""

    def test_log_service_operation(self, caplog):
        """Test that service operations are logged with context."""
        logger = logging.getLogger("app.test.service")

        with caplog.at_level(logging.INFO, logger="app.test.service"):
            log_service_operation(logger, "redirect_service", "rejected", error_kind="PortOutOfRange")

        record = caplog.records[-1]
        assert record.getMessage() == "redirect_service.rejected"
        assert record.context == {
            "service": "redirect_service",
            "operation": "rejected",
            "error_kind": "PortOutOfRange",
        }

    def test_log_error_with_context(self, caplog):
        """Test that errors are logged at ERROR with traceback information."""
        logger = logging.getLogger("app.test.errors")
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="app.test.errors"):
            log_error_with_context(logger, error, "main", "connect_redirect", path="/")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.context["error_type"] == "RuntimeError"
        assert record.context["path"] == "/"
        assert record.exc_info[1] is error

    def test_helpers_attribute_records_to_caller(self, caplog):
        """Test that records point at the function calling the helper, not the helper."""
        logger = logging.getLogger("app.test.callsite")

        with caplog.at_level(logging.INFO, logger="app.test.callsite"):
            log_service_operation(logger, "redirect_service", "redirect")
            log_error_with_context(logger, RuntimeError("boom"), "main", "connect_redirect")

        assert len(caplog.records) == 2
        for record in caplog.records:
            assert record.funcName == "test_helpers_attribute_records_to_caller"
            assert record.module == "test_structured_logging"

            entry = json.loads(JsonLogFormatter().format(record))
            assert entry["function"] == "test_helpers_attribute_records_to_caller"
            assert entry["module"] == "test_structured_logging"


class TestSetupStructuredLogging:
    """Test suite for root logger configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_plain_formatter_by_default(self, monkeypatch):
        """Test that a single plain handler is installed when JSON output is off."""
        monkeypatch.setattr(Config, "ENABLE_STRUCTURED_LOGGING", False)
        monkeypatch.setattr(Config, "LOG_LEVEL", "WARNING")

        setup_structured_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JsonLogFormatter)
        assert root.level == logging.WARNING

    def test_json_formatter_when_enabled(self, monkeypatch):
        """Test that the JSON formatter and request ID filter are installed."""
        monkeypatch.setattr(Config, "ENABLE_STRUCTURED_LOGGING", True)

        setup_structured_logging()

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JsonLogFormatter)
        assert any(isinstance(f, RequestIdFilter) for f in handler.filters)
