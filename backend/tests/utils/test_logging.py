# tests/utils/test_logging.py
"""
Tests for logging configuration.

Test Coverage:
- _get_log_level: level name mapping
- JsonFormatter: one JSON object per record, extra fields, exceptions
- setup_logging: root handler, correlation filter, noisy loggers
"""

import json
import logging
import sys

import pytest

from portfolio_performance.utils.context import clear_correlation_id, set_correlation_id
from portfolio_performance.utils.logging import (
    NOISY_LOGGERS,
    CorrelationIdFilter,
    JsonFormatter,
    _get_log_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """setup_logging replaces the root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("portfolio_performance.test", logging.WARNING, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestGetLogLevel:
    """Tests for _get_log_level."""

    @pytest.mark.parametrize("name,expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        (" Warn ", logging.WARNING),
        ("CRITICAL", logging.CRITICAL),
    ])
    def test_known_levels(self, name, expected):
        assert _get_log_level(name) == expected

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            _get_log_level("VERBOSE")


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_fields(self):
        set_correlation_id("req-1")
        try:
            record = _record("benchmark skipped")
            CorrelationIdFilter().filter(record)
            entry = json.loads(JsonFormatter().format(record))
        finally:
            clear_correlation_id()

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "portfolio_performance.test"
        assert entry["message"] == "benchmark skipped"
        assert entry["correlation_id"] == "req-1"
        assert "extra" not in entry

    def test_extra_fields(self):
        record = _record(results=["SPY-1M: Success"], period=object())

        entry = json.loads(JsonFormatter().format(record))

        assert entry["extra"]["results"] == ["SPY-1M: Success"]
        assert isinstance(entry["extra"]["period"], str)

    def test_exception_included(self):
        try:
            raise RuntimeError("store failed")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, sys.exc_info())

        entry = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: store failed" in entry["exception"]


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_installs_single_handler(self, restore_root_logger):
        setup_logging(level="DEBUG", log_format="json")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)

    def test_text_format(self, restore_root_logger):
        setup_logging(level="INFO", log_format="text")

        assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_suppresses_noisy_loggers(self, restore_root_logger):
        setup_logging(level="DEBUG")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
