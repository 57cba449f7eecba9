"""
systour Errors.

Domain-specific exceptions for graph construction, map loading and route
solving. These errors are independent of the transport layer (library, CLI).
Each carries an ``error_type`` used as the ``error`` key of CLI output.
"""

from __future__ import annotations

from collections.abc import Sequence


class SolveError(Exception):
    """Base exception for route solving operations."""

    error_type = "solve_error"


class UnknownSystemError(SolveError):
    """Raised when a start system or connection endpoint is not in the graph."""

    error_type = "unknown_system"

    def __init__(self, name: str, context: str | None = None):
        self.name = name
        self.context = context
        msg = f"Unknown system: {name}"
        if context:
            msg += f" ({context})"
        super().__init__(msg)


class InvalidGraphError(SolveError):
    """Raised for malformed graphs: negative costs, self-loops, conflicting duplicates."""

    error_type = "invalid_graph"


class NoCompleteRouteError(SolveError):
    """Raised when no route can visit every system from the start system."""

    error_type = "no_complete_route"

    def __init__(
        self,
        start: str,
        unreachable: Sequence[str] = (),
        reason: str | None = None,
    ):
        self.start = start
        self.unreachable = list(unreachable)
        self.reason = reason
        msg = f"No route from {start} visits every system"
        if self.unreachable:
            msg += f": unreachable {', '.join(self.unreachable)}"
        elif reason:
            msg += f": {reason}"
        super().__init__(msg)


class InstanceTooLargeError(SolveError):
    """Raised when the system count exceeds the exact-search threshold."""

    error_type = "instance_too_large"

    def __init__(self, system_count: int, limit: int):
        self.system_count = system_count
        self.limit = limit
        super().__init__(
            f"{system_count} systems exceeds the exact search limit of {limit}; "
            "pass a higher max_systems to proceed anyway"
        )


class SolveCancelledError(SolveError):
    """Raised when a running solve observes its cancellation event."""

    error_type = "cancelled"


class MapLoadError(SolveError):
    """Raised when a map file is missing, unreadable or malformed."""

    error_type = "map_load_error"
