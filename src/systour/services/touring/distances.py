"""
Distance Reduction.

Collapses a sparse, possibly cyclic SystemGraph into a dense all-pairs
cost matrix so the exact solver can treat the problem as a complete graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from ...core.errors import InvalidGraphError
from ...core.logging import debug_enabled, get_logger
from ...universe.graph import COST_ATTR

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ...universe.graph import SystemGraph

logger = get_logger(__name__)


@dataclass
class DistanceMatrix:
    """
    Precomputed all-pairs shortest-path costs between systems.

    Rows and columns follow the graph's canonical system order. Reachability
    is recorded separately from the costs: unreachable cells hold inf in
    ``distances`` but consumers must consult ``reachable`` and never use
    those cells as finite penalties.

    Usage:
        matrix = DistanceMatrix.compute(graph)
        matrix.distance(0, 3)   # cost or None if unreachable
        matrix.path(0, 3)       # full jump path as vertex indices
    """

    distances: NDArray[np.float64]
    reachable: NDArray[np.bool_]
    _graph: SystemGraph = field(repr=False)
    _paths: dict[int, list[list[int]]] = field(default_factory=dict, repr=False)

    @classmethod
    def compute(cls, graph: SystemGraph) -> DistanceMatrix:
        """
        Compute the distance matrix for every system of the graph.

        Runs Dijkstra from every source over the jump costs in a single
        igraph call: O(V * E * log(V)).

        Args:
            graph: Validated SystemGraph

        Returns:
            DistanceMatrix with read-only distance and reachability arrays

        Raises:
            InvalidGraphError: If any connection has a negative cost
        """
        n = graph.system_count
        costs = graph.costs()
        if any(c < 0 for c in costs):
            raise InvalidGraphError("Negative connection cost; shortest paths are undefined")

        if n == 0:
            distances = np.zeros((0, 0), dtype=np.float64)
        else:
            weights = COST_ATTR if costs else None
            distances = np.array(
                graph.graph.distances(weights=weights, mode="out"),
                dtype=np.float64,
            )

        reachable = np.isfinite(distances)
        distances.flags.writeable = False
        reachable.flags.writeable = False

        if debug_enabled():
            logger.debug(
                "Reduced %d systems: %d of %d ordered pairs reachable",
                n,
                int(reachable.sum()),
                n * n,
            )
        return cls(distances=distances, reachable=reachable, _graph=graph)

    def distance(self, src_idx: int, dst_idx: int) -> float | None:
        """
        Get the shortest-path cost between two systems.

        Args:
            src_idx: Source canonical index
            dst_idx: Destination canonical index

        Returns:
            Total jump cost, or None if dst is unreachable from src
        """
        if not self.reachable[src_idx, dst_idx]:
            return None
        return float(self.distances[src_idx, dst_idx])

    def is_reachable(self, src_idx: int, dst_idx: int) -> bool:
        """Check whether dst can be reached from src."""
        return bool(self.reachable[src_idx, dst_idx])

    def unreachable_from(self, src_idx: int) -> list[int]:
        """List canonical indices that cannot be reached from src."""
        return [int(i) for i in np.flatnonzero(~self.reachable[src_idx])]

    def path(self, src_idx: int, dst_idx: int) -> list[int]:
        """
        Get a concrete shortest path between two systems.

        Paths are computed on first use, one source row at a time.

        Returns:
            Vertex indices from src to dst inclusive, empty if unreachable
        """
        row = self._paths.get(src_idx)
        if row is None:
            g = self._graph.graph
            weights = COST_ATTR if self._graph.connection_count else None
            row = g.get_shortest_paths(src_idx, weights=weights, mode="out")
            self._paths[src_idx] = row
        return list(row[dst_idx])

    def __len__(self) -> int:
        """Number of systems in matrix."""
        return int(self.distances.shape[0])
