"""
Tests for systour Structured Logging.

Tests logger configuration, formatters, and utility functions.
"""

from __future__ import annotations

import json
import logging
import sys

from systour.core.logging import (
    SystourFormatter,
    debug_enabled,
    get_logger,
    reset_logging,
)


def _record(name: str, level: int = logging.INFO, msg: str = "Test message", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


# =============================================================================
# SystourFormatter Tests
# =============================================================================


class TestSystourFormatter:
    """Test SystourFormatter class."""

    def test_text_format_basic(self):
        """Text format includes level and module."""
        formatter = SystourFormatter(json_output=False)

        formatted = formatter.format(_record("systour.test.module"))

        assert formatted == "[SYSTOUR INFO] [module] Test message"

    def test_text_format_with_exception(self):
        """Text format includes exception info."""
        formatter = SystourFormatter(json_output=False)

        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        formatted = formatter.format(
            _record("systour.test", logging.ERROR, "Error occurred", exc_info)
        )

        assert "ValueError" in formatted
        assert "Test error" in formatted

    def test_json_format_basic(self):
        """JSON format produces valid JSON."""
        formatter = SystourFormatter(json_output=True)

        data = json.loads(formatter.format(_record("systour.test")))

        assert data["level"] == "INFO"
        assert data["logger"] == "systour.test"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_json_format_with_extra(self):
        """JSON format includes extra fields."""
        formatter = SystourFormatter(json_output=True)
        record = _record("systour.test")
        record.systems = 12

        data = json.loads(formatter.format(record))

        assert data["systems"] == 12
        assert "lineno" not in data

    def test_module_name_extraction(self):
        """Extracts last part of dotted module name."""
        formatter = SystourFormatter(json_output=False)

        formatted = formatter.format(
            _record("systour.services.touring.planner", logging.DEBUG, "Solving")
        )

        assert "[planner]" in formatted


# =============================================================================
# get_logger Tests
# =============================================================================


class TestGetLogger:
    """Test get_logger function."""

    def test_returns_logger(self):
        logger = get_logger("test.systour.unique1")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.systour.unique1"

    def test_caches_loggers(self):
        """get_logger returns cached logger on subsequent calls."""
        assert get_logger("test.systour.unique2") is get_logger("test.systour.unique2")

    def test_logger_does_not_propagate(self):
        """Logger does not propagate to root."""
        logger = get_logger("test.systour.unique3")

        assert logger.propagate is False

    def test_level_from_settings(self, monkeypatch):
        from systour.core.config import reset_settings

        monkeypatch.setenv("SYSTOUR_LOG_LEVEL", "ERROR")
        reset_settings()

        logger = get_logger("test.systour.unique4")

        assert logger.level == logging.ERROR

    def test_json_handler_from_settings(self, monkeypatch):
        from systour.core.config import reset_settings

        monkeypatch.setenv("SYSTOUR_LOG_JSON", "1")
        reset_settings()

        logger = get_logger("test.systour.unique5")

        assert logger.handlers[0].formatter.json_output is True


# =============================================================================
# Utility Function Tests
# =============================================================================


class TestDebugEnabled:
    """Test debug_enabled function."""

    def test_default_disabled(self):
        assert debug_enabled() is False

    def test_enabled_by_legacy_flag(self, monkeypatch):
        from systour.core.config import reset_settings

        monkeypatch.setenv("SYSTOUR_DEBUG", "1")
        reset_settings()

        assert debug_enabled() is True


class TestResetLogging:
    """Test reset_logging function."""

    def test_restores_propagation(self):
        logger = get_logger("systour.test.reset")
        assert logger.propagate is False

        reset_logging()

        assert logger.propagate is True
        assert logger.level == logging.NOTSET
        assert logger.handlers == []
