# tests/unit/logging/test_unit_logger.py — v1
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging

from transformcache.config.settings import Settings
from transformcache.logging.context import (
    clear_context,
    set_fingerprint_context,
    set_request_context,
)
from transformcache.logging.logger import (
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("req1", "/a.js")
        set_fingerprint_context("abc123")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"]["request_path"] == "/a.js"
        assert parsed["context"]["fingerprint"] == "abc123"

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record("x", data={"hit": True})))
        assert parsed["data"] == {"hit": True}


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        set_request_context("0123456789abcdef", "/a.js")
        set_fingerprint_context("fedcba9876543210")
        output = TextFormatter().format(_record("msg"))
        assert "[01234567]" in output
        assert "(fedcba98)" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "transformcache.test_module"


class TestSetupLogging:
    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("transformcache")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("transformcache")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_setup_with_file(self, tmp_path):
        setup_logging(level="INFO", log_file=str(tmp_path / "tc.log"))
        root = logging.getLogger("transformcache")
        try:
            assert len(root.handlers) == 2
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()

    def test_from_settings_debug_flag(self):
        setup_logging_from_settings(Settings(_env_file=None, debug=True))
        assert logging.getLogger("transformcache").level == logging.DEBUG
