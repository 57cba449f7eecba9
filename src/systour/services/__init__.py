"""
systour Services.

Business logic services built on the universe graph model.
"""

from __future__ import annotations

__all__ = [
    "TourPlanningService",
    "touring",
]


def __getattr__(name: str):
    """Lazy import services to avoid circular imports."""
    if name == "TourPlanningService":
        from .touring.planner import TourPlanningService

        return TourPlanningService
    if name == "touring":
        from . import touring

        return touring

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
