"""
systour Formatters

Utility functions for formatting solver output for display.
"""

from datetime import datetime, timezone

# =============================================================================
# Cost Formatting
# =============================================================================


def format_cost(value: float) -> int | float:
    """
    Normalize a route cost for JSON output.

    Integral costs are emitted as ints so uniform-jump maps read naturally.

    Examples:
        >>> format_cost(3.0)
        3
        >>> format_cost(2.5)
        2.5
    """
    if float(value).is_integer():
        return int(value)
    return round(float(value), 6)


# =============================================================================
# Duration Formatting
# =============================================================================


def format_elapsed(seconds: float) -> str:
    """
    Format a solve duration.

    Examples:
        >>> format_elapsed(0.0042)
        '4.2ms'
        >>> format_elapsed(2.5)
        '2.50s'
    """
    if seconds < 1.0:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"


# =============================================================================
# Timestamps
# =============================================================================


def format_datetime(dt: datetime) -> str:
    """
    Format datetime for display.

    Args:
        dt: datetime object

    Returns:
        ISO format string
    """
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp string.

    Returns:
        ISO format timestamp like "2026-01-15T12:30:00Z"
    """
    return format_datetime(get_utc_now())
