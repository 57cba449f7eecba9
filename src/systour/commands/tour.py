"""
systour Tour Commands

Solve and inspect commands over a map file. Results and errors are
returned as JSON-ready dicts; the entry point prints them.
"""

import argparse
from typing import Any

from ..core import (
    InstanceTooLargeError,
    NoCompleteRouteError,
    SolveError,
    UnknownSystemError,
    get_utc_timestamp,
)
from ..core.logging import get_logger
from ..services.touring import VALID_ALGORITHMS, TourPlanningService
from ..universe import load_map, write_route_dot

logger = get_logger(__name__)


def _error_response(error: SolveError, query_ts: str) -> dict[str, Any]:
    """Convert a solve error into the CLI error document."""
    result: dict[str, Any] = {
        "error": error.error_type,
        "message": str(error),
        "query_timestamp": query_ts,
    }
    if isinstance(error, InstanceTooLargeError):
        result["system_count"] = error.system_count
        result["limit"] = error.limit
        result["hint"] = "Use --max-systems to raise the limit, or --region-only."
    elif isinstance(error, NoCompleteRouteError):
        if error.unreachable:
            result["unreachable"] = error.unreachable
            result["hint"] = "Use --region-only to solve the reachable systems only."
    elif isinstance(error, UnknownSystemError):
        result["hint"] = "System identifiers are case-sensitive."
    return result


# =============================================================================
# Solve Command
# =============================================================================


def cmd_solve(args: argparse.Namespace) -> dict[str, Any]:
    """
    Solve the optimal route over every system of a map.

    Args:
        args: Parsed arguments with map, system, closed, directed,
            max_systems, algorithm, region_only, dot

    Returns:
        Route data dict, or an error dict
    """
    query_ts = get_utc_timestamp()

    try:
        graph = load_map(args.map, directed=getattr(args, "directed", None))
        service = TourPlanningService(graph)
        route = service.solve(
            args.system,
            closed_tour=getattr(args, "closed", None),
            max_systems=getattr(args, "max_systems", None),
            algorithm=getattr(args, "algorithm", None),
            region_only=getattr(args, "region_only", False),
        )
    except SolveError as e:
        logger.debug("Solve failed: %s", e)
        return _error_response(e, query_ts)

    result: dict[str, Any] = route.to_dict()
    result["system_count"] = len(route.systems)

    dot_path = getattr(args, "dot", None)
    if dot_path:
        solved_graph = graph
        if len(route.systems) < graph.system_count:
            solved_graph = graph.subgraph(route.systems)
        result["dot_file"] = str(write_route_dot(solved_graph, route, dot_path))

    result["query_timestamp"] = query_ts
    return result


# =============================================================================
# Inspect Command
# =============================================================================


def cmd_inspect(args: argparse.Namespace) -> dict[str, Any]:
    """
    Report map size and cyclicity, optionally for the region around a system.

    Args:
        args: Parsed arguments with map, system, directed

    Returns:
        Graph summary dict, or an error dict
    """
    query_ts = get_utc_timestamp()

    try:
        graph = load_map(args.map, directed=getattr(args, "directed", None))
        summary = TourPlanningService(graph).summarize(getattr(args, "system", None))
    except SolveError as e:
        return _error_response(e, query_ts)

    result = summary.to_dict()
    result["query_timestamp"] = query_ts
    return result


# =============================================================================
# Parser Registration
# =============================================================================


def register_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register tour command parsers."""

    # Solve command
    solve_parser = subparsers.add_parser(
        "solve", help="Find the cheapest route visiting every system"
    )
    solve_parser.add_argument("--map", required=True, help="Path to the JSON map file")
    solve_parser.add_argument("--system", required=True, help="Start system identifier")
    solve_parser.add_argument(
        "--closed",
        action="store_const",
        const=True,
        default=None,
        help="Return to the start system at the end",
    )
    solve_parser.add_argument(
        "--directed",
        action="store_const",
        const=True,
        default=None,
        help="Treat explicit-map connections as one-way",
    )
    solve_parser.add_argument(
        "--max-systems",
        type=int,
        metavar="N",
        help="Override the exact search size limit",
    )
    solve_parser.add_argument(
        "--algorithm",
        choices=sorted(VALID_ALGORITHMS),
        help="Exact search engine (default: held_karp)",
    )
    solve_parser.add_argument(
        "--region-only",
        action="store_true",
        help="Only visit systems reachable from the start system",
    )
    solve_parser.add_argument(
        "--dot",
        metavar="PATH",
        help="Write the map annotated with route positions as Graphviz DOT",
    )
    solve_parser.set_defaults(func=cmd_solve)

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Describe a map file")
    inspect_parser.add_argument("--map", required=True, help="Path to the JSON map file")
    inspect_parser.add_argument(
        "--system", help="Also describe the region reachable from this system"
    )
    inspect_parser.add_argument(
        "--directed",
        action="store_const",
        const=True,
        default=None,
        help="Treat explicit-map connections as one-way",
    )
    inspect_parser.set_defaults(func=cmd_inspect)
