"""
Tour Planning Service.

Core route solving service shared between library callers and CLI commands.
Runs the full pipeline: start resolution, optional region restriction,
feasibility check, distance reduction, exact search and result assembly.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...core.config import get_settings, is_timing_enabled
from ...core.errors import InstanceTooLargeError, NoCompleteRouteError
from ...core.formatters import format_elapsed
from ...core.logging import get_logger
from .algorithms import Tour, branch_and_bound, held_karp
from .distances import DistanceMatrix
from .result_builder import GraphSummary, Route, assemble_route

if TYPE_CHECKING:
    import threading

    from ...core.config import Algorithm
    from ...universe.graph import SystemGraph

logger = get_logger(__name__)

Engine = Callable[["DistanceMatrix", int, bool, "threading.Event | None"], "Tour | None"]

ENGINES: dict[str, Engine] = {
    "held_karp": held_karp,
    "branch_and_bound": branch_and_bound,
}
VALID_ALGORITHMS: frozenset[str] = frozenset(ENGINES)


@dataclass
class TourPlanningService:
    """
    Unified route solving service.

    Each solve builds its own DistanceMatrix and search state; the service
    holds only the read-only graph, so independent solves may run
    concurrently.

    Example:
        service = TourPlanningService(graph)
        route = service.solve("Jita", closed_tour=False)
    """

    graph: SystemGraph

    def solve(
        self,
        start: str,
        *,
        closed_tour: bool | None = None,
        max_systems: int | None = None,
        algorithm: Algorithm | None = None,
        region_only: bool = False,
        cancel: threading.Event | None = None,
    ) -> Route:
        """
        Find the cheapest order visiting every system from start.

        Args:
            start: Start system identifier
            closed_tour: Return to start at the end (default from settings)
            max_systems: Exact-search size limit (default from settings)
            algorithm: "held_karp" or "branch_and_bound" (default from settings)
            region_only: Drop systems unreachable from start before solving
            cancel: Optional event that aborts the search when set

        Returns:
            Route visiting every system exactly once, beginning at start

        Raises:
            UnknownSystemError: start is not in the graph
            InstanceTooLargeError: more systems than max_systems
            NoCompleteRouteError: some system cannot be visited
            SolveCancelledError: cancel was set during the search
        """
        settings = get_settings()
        if closed_tour is None:
            closed_tour = settings.closed_tour
        if max_systems is None:
            max_systems = settings.max_systems
        if algorithm is None:
            algorithm = settings.algorithm
        engine = ENGINES.get(algorithm)
        if engine is None:
            raise ValueError(
                f"Unknown algorithm: {algorithm!r} (expected one of {sorted(VALID_ALGORITHMS)})"
            )

        started = time.perf_counter()
        # Unknown start fails before any reduction work
        self.graph.index_of(start)

        graph = self.graph
        if region_only:
            region = graph.reachable_from(start)
            if len(region) < graph.system_count:
                logger.info(
                    "Restricting to %d of %d systems reachable from %s",
                    len(region),
                    graph.system_count,
                    start,
                )
                graph = graph.subgraph(region)

        if graph.system_count > max_systems:
            raise InstanceTooLargeError(graph.system_count, max_systems)

        matrix = DistanceMatrix.compute(graph)
        start_idx = graph.index_of(start)

        unreachable = matrix.unreachable_from(start_idx)
        if unreachable:
            raise NoCompleteRouteError(start, [graph.system_at(i) for i in unreachable])

        tour = engine(matrix, start_idx, closed_tour, cancel)
        if tour is None:
            reason = (
                "no order returns to the start system"
                if closed_tour
                else "one-way connections admit no order through every system"
            )
            raise NoCompleteRouteError(start, reason=reason)

        route = assemble_route(graph, tour, matrix, closed_tour, algorithm)

        elapsed = time.perf_counter() - started
        logger.info(
            "Solved %d systems from %s with %s: cost %s",
            graph.system_count,
            start,
            algorithm,
            route.total_cost,
        )
        if is_timing_enabled():
            logger.debug("Solve took %s", format_elapsed(elapsed))
        return route

    def summarize(self, start: str | None = None) -> GraphSummary:
        """
        Describe the graph, and the region reachable from start if given.

        Raises:
            UnknownSystemError: start is given but not in the graph
        """
        graph = self.graph
        summary = GraphSummary(
            system_count=graph.system_count,
            connection_count=graph.connection_count,
            directed=graph.directed,
            cyclic=graph.is_cyclic(),
        )
        if start is None:
            return summary

        region = graph.subgraph(graph.reachable_from(start))
        return GraphSummary(
            system_count=summary.system_count,
            connection_count=summary.connection_count,
            directed=summary.directed,
            cyclic=summary.cyclic,
            region_start=start,
            region_system_count=region.system_count,
            region_cyclic=region.is_cyclic(),
        )


def solve(graph: SystemGraph, start: str, **kwargs) -> Route:
    """
    Solve a route over every system of a graph.

    Convenience wrapper around TourPlanningService.solve(); accepts the
    same keyword arguments.
    """
    return TourPlanningService(graph).solve(start, **kwargs)
