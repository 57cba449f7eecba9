"""
systour - exact all-systems route solver

Finds the cheapest order in which to visit every system of a jump map,
starting from a chosen system. Sparse and cyclic maps are reduced to an
all-pairs cost matrix, then solved exactly with Held-Karp dynamic
programming (or branch-and-bound).

Usage as library:
    from systour import build_system_graph, solve

    graph = build_system_graph(
        ["A", "B", "C"],
        [("A", "B", 2.0), ("B", "C", 5.0)],
    )
    route = solve(graph, "A")
    route.systems      # ["A", "B", "C"]
    route.total_cost   # 7.0

Usage as CLI:
    python -m systour solve --map data.json --system I.EXP.NJ7
    python -m systour inspect --map data.json

Package structure:
    systour/
    ├── core/           # Config, logging, errors, formatters
    ├── universe/       # Graph model, builder, map loader, DOT export
    ├── services/
    │   └── touring/    # Distance reduction, exact solvers, results
    └── commands/       # CLI command implementations
"""

__version__ = "1.0.0"

from .core import (
    InstanceTooLargeError,
    InvalidGraphError,
    MapLoadError,
    NoCompleteRouteError,
    SolveCancelledError,
    SolveError,
    UnknownSystemError,
)
from .services.touring.planner import TourPlanningService, solve
from .services.touring.result_builder import Route
from .universe import SystemGraph, build_system_graph, load_map

__all__ = [
    "__version__",
    "solve",
    "TourPlanningService",
    "Route",
    "SystemGraph",
    "build_system_graph",
    "load_map",
    "SolveError",
    "UnknownSystemError",
    "InvalidGraphError",
    "NoCompleteRouteError",
    "InstanceTooLargeError",
    "SolveCancelledError",
    "MapLoadError",
]
