"""
Tour Planning Service.

Exact route solving shared between library callers and CLI commands.
Provides the distance reduction, the exact search engines and result
construction utilities.

Usage:
    from systour.services.touring import TourPlanningService

    service = TourPlanningService(graph)
    route = service.solve("Jita")
"""

from __future__ import annotations

__all__ = [
    # Core service
    "TourPlanningService",
    "solve",
    "VALID_ALGORITHMS",
    # Distance reduction
    "DistanceMatrix",
    # Algorithms
    "Tour",
    "held_karp",
    "branch_and_bound",
    "brute_force",
    "route_cost",
    # Result utilities
    "Route",
    "GraphSummary",
    "assemble_route",
    "expand_order",
]


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    # Planner service
    if name in ("TourPlanningService", "solve", "VALID_ALGORITHMS"):
        from . import planner

        return getattr(planner, name)

    # Distance reduction
    if name == "DistanceMatrix":
        from .distances import DistanceMatrix

        return DistanceMatrix

    # Algorithms
    if name in ("Tour", "held_karp", "branch_and_bound", "brute_force", "route_cost"):
        from . import algorithms

        return getattr(algorithms, name)

    # Result utilities
    if name in ("Route", "GraphSummary", "assemble_route", "expand_order"):
        from . import result_builder

        return getattr(result_builder, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
