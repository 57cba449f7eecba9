"""
systour core - shared infrastructure.

Configuration, logging, error taxonomy and output formatting used by the
graph model, the touring service and the CLI.
"""

from .config import SystourSettings, get_settings, reset_settings
from .errors import (
    InstanceTooLargeError,
    InvalidGraphError,
    MapLoadError,
    NoCompleteRouteError,
    SolveCancelledError,
    SolveError,
    UnknownSystemError,
)
from .formatters import format_cost, format_elapsed, get_utc_timestamp
from .logging import get_logger

__all__ = [
    # Configuration
    "SystourSettings",
    "get_settings",
    "reset_settings",
    # Logging
    "get_logger",
    # Errors
    "SolveError",
    "UnknownSystemError",
    "InvalidGraphError",
    "NoCompleteRouteError",
    "InstanceTooLargeError",
    "SolveCancelledError",
    "MapLoadError",
    # Formatters
    "format_cost",
    "format_elapsed",
    "get_utc_timestamp",
]
