"""
Tour Result Builder.

Maps the solver's index-based output back to system identifiers and
computes transport-agnostic route metrics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...core.formatters import format_cost

if TYPE_CHECKING:
    from ...universe.graph import SystemGraph
    from .algorithms import Tour
    from .distances import DistanceMatrix


@dataclass(frozen=True)
class Route:
    """
    Solved visiting order over every system of a graph.

    Transport layers (library callers, CLI) build their responses from this.
    """

    systems: list[str]
    """Every system exactly once, beginning with the start system."""

    total_cost: float
    """Sum of shortest-path costs between consecutive systems."""

    closed_tour: bool
    """Whether total_cost includes the return leg to the start system."""

    path: list[str]
    """Full jump sequence including intermediate systems passed through."""

    jumps: int
    """Number of jumps along the full path."""

    backtrack_jumps: int
    """Jumps that arrive at an already visited system."""

    algorithm: str
    """Exact search engine that produced the order."""

    @property
    def start(self) -> str:
        return self.systems[0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "start": self.start,
            "systems": list(self.systems),
            "total_cost": format_cost(self.total_cost),
            "closed_tour": self.closed_tour,
            "path": list(self.path),
            "jumps": self.jumps,
            "backtrack_jumps": self.backtrack_jumps,
            "algorithm": self.algorithm,
        }


@dataclass(frozen=True)
class GraphSummary:
    """Shape of a map, and of the region reachable from a system if given."""

    system_count: int
    connection_count: int
    directed: bool
    cyclic: bool
    region_start: str | None = None
    region_system_count: int | None = None
    region_cyclic: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "systems": self.system_count,
            "connections": self.connection_count,
            "directed": self.directed,
            "cyclic": self.cyclic,
        }
        if self.region_start is not None:
            data["region"] = {
                "start": self.region_start,
                "systems": self.region_system_count,
                "cyclic": self.region_cyclic,
            }
        return data


def expand_order(order: list[int], matrix: DistanceMatrix, closed_tour: bool = False) -> list[int]:
    """
    Expand a visiting order to the full jump path.

    Connects each consecutive pair with its shortest path, plus the return
    leg for closed tours.

    Args:
        order: Canonical indices in visiting order
        matrix: DistanceMatrix that produced the order

    Returns:
        Vertex indices of every system passed through, in order
    """
    if not order:
        return []

    stops = list(order)
    if closed_tour and len(order) > 1:
        stops.append(order[0])

    full_path = [stops[0]]
    for src, dst in zip(stops, stops[1:]):
        segment = matrix.path(src, dst)
        # Segment starts at src, which is already on the path
        full_path.extend(segment[1:])
    return full_path


def assemble_route(
    graph: SystemGraph,
    tour: Tour,
    matrix: DistanceMatrix,
    closed_tour: bool,
    algorithm: str,
) -> Route:
    """
    Translate an index-based tour into an identifier-based Route.

    Args:
        graph: Graph whose canonical order the tour indexes
        tour: Solver output
        matrix: DistanceMatrix used by the solver
        closed_tour: Whether the tour returns to start
        algorithm: Name of the engine that solved it

    Returns:
        Route with identifiers and metrics
    """
    full_path = expand_order(tour.order, matrix, closed_tour)
    jumps = len(full_path) - 1 if full_path else 0
    unique = len(set(full_path))
    backtrack = jumps - (unique - 1) if unique > 0 else 0

    return Route(
        systems=[graph.system_at(i) for i in tour.order],
        total_cost=tour.cost,
        closed_tour=closed_tour,
        path=[graph.system_at(i) for i in full_path],
        jumps=jumps,
        backtrack_jumps=max(0, backtrack),
        algorithm=algorithm,
    )
