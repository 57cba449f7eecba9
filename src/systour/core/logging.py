"""
systour Structured Logging

Provides consistent logging across the systour package with:
- Environment-based configuration via SYSTOUR_LOG_LEVEL
- Backward compatibility with SYSTOUR_DEBUG
- JSON-formatted output option for machine parsing
- Module-specific loggers

Usage:
    from systour.core.logging import get_logger

    logger = get_logger(__name__)
    logger.debug("Reducing %d systems", count)
    logger.info("Route solved", extra={"systems": 12})

Environment Variables:
    SYSTOUR_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
    SYSTOUR_DEBUG: Legacy - if set, enables DEBUG level
    SYSTOUR_LOG_JSON: If set, output JSON-formatted logs
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from .config import get_settings, is_json_logging

# Attributes present on every LogRecord; anything else came in through `extra`
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)


def _get_log_level() -> int:
    """
    Determine log level from centralized config.

    Priority:
    1. SYSTOUR_LOG_LEVEL (explicit level name)
    2. SYSTOUR_DEBUG (legacy, enables DEBUG)
    3. Default: WARNING
    """
    return get_settings().log_level_int


class SystourFormatter(logging.Formatter):
    """
    Custom formatter for systour logs.

    Formats logs with level, module, and message.
    Supports both human-readable and JSON output.
    """

    def __init__(self, json_output: bool = False) -> None:
        super().__init__()
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")

        if self.json_output:
            return self._format_json(record, timestamp)
        return self._format_text(record)

    def _format_text(self, record: logging.LogRecord) -> str:
        """Format as human-readable text."""
        module = record.name.split(".")[-1] if "." in record.name else record.name

        msg = f"[SYSTOUR {record.levelname}] [{module}] {record.getMessage()}"

        if record.exc_info:
            exc_text = "".join(traceback.format_exception(*record.exc_info))
            msg += f"\n{exc_text}"

        return msg

    def _format_json(self, record: logging.LogRecord, timestamp: str) -> str:
        """Format as JSON for machine parsing."""
        log_data: dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_data, default=str)


# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}
_handler: Optional[logging.Handler] = None


def _get_handler() -> logging.Handler:
    """Get or create the shared stderr handler."""
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(SystourFormatter(json_output=is_json_logging()))
    return _handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(_get_log_level())
    logger.addHandler(_get_handler())
    logger.propagate = False  # Don't bubble up to root logger

    _loggers[name] = logger
    return logger


def debug_enabled() -> bool:
    """
    Check if debug logging is enabled.

    Useful for conditional expensive operations.
    """
    return _get_log_level() <= logging.DEBUG


def reset_logging() -> None:
    """
    Reset all systour loggers to default state.

    Restores propagate=True and level=NOTSET on every systour.* logger known
    to the logging manager, detaches the shared handler and drops the handler
    cache. Used by test fixtures so caplog can capture records.
    """
    global _handler

    manager = logging.Logger.manager
    for name in list(manager.loggerDict.keys()):
        if name == "systour" or name.startswith("systour."):
            logger_or_placeholder = manager.loggerDict[name]
            # loggerDict can contain Logger objects or PlaceHolder objects
            if isinstance(logger_or_placeholder, logging.Logger):
                logger_or_placeholder.propagate = True
                logger_or_placeholder.setLevel(logging.NOTSET)

    for logger in _loggers.values():
        if _handler is not None:
            logger.removeHandler(_handler)

    _handler = None
