"""
SystemGraph - Core data structure for route solving.

This module provides the SystemGraph dataclass, an in-memory representation
of a map's systems and weighted jump connections, optimized for O(1) name
lookups and C-speed graph traversal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import igraph as ig
import numpy as np

from ..core.errors import UnknownSystemError

if TYPE_CHECKING:
    from numpy.typing import NDArray

# Edge attribute holding the jump cost
COST_ATTR = "cost"

# Placeholder in system_ids for systems without an external numeric ID
NO_SYSTEM_ID = -1


@dataclass(frozen=False, slots=True)
class SystemGraph:
    """
    Validated graph of systems and jump connections.

    Design principles:
    - igraph for C-speed shortest paths and traversal
    - Vertex index == canonical system index (insertion order)
    - Dict indexes for O(1) name resolution
    - Read-only after construction; use build_system_graph() to create

    Attributes:
        graph: igraph structure; vertex "name" attribute, edge "cost" attribute
        name_to_idx: Maps system identifiers to vertex indices ("I.EXP.NJ7" -> 0)
        idx_to_name: Maps vertex indices to system identifiers (0 -> "I.EXP.NJ7")
        system_ids: External numeric IDs indexed by vertex (NO_SYSTEM_ID if absent)
        directed: Whether connections are one-way
        system_count: Total number of systems
        connection_count: Total number of (deduplicated) connections
    """

    graph: ig.Graph
    name_to_idx: dict[str, int]
    idx_to_name: dict[int, str]
    system_ids: NDArray[np.int64]
    directed: bool
    system_count: int
    connection_count: int

    # =========================================================================
    # Lookups
    # =========================================================================

    def has_system(self, name: str) -> bool:
        """Check whether a system identifier exists (case-sensitive)."""
        return name in self.name_to_idx

    def index_of(self, name: str) -> int:
        """
        Resolve a system identifier to its canonical index.

        Raises:
            UnknownSystemError: If the system is not in the graph
        """
        idx = self.name_to_idx.get(name)
        if idx is None:
            raise UnknownSystemError(name)
        return idx

    def system_at(self, idx: int) -> str:
        """Get the system identifier at a canonical index."""
        return self.idx_to_name[idx]

    def all_systems(self) -> list[str]:
        """
        Return every system in canonical (insertion) order.

        The position of a system in this list is its index in the
        distance matrix and in solver output.
        """
        return [self.idx_to_name[i] for i in range(self.system_count)]

    def get_system_id(self, idx: int) -> int | None:
        """Get the external numeric ID for a vertex, if the map supplied one."""
        value = int(self.system_ids[idx])
        return None if value == NO_SYSTEM_ID else value

    # =========================================================================
    # Connectivity
    # =========================================================================

    def neighbors(self, name: str) -> set[tuple[str, float]]:
        """
        Return directly connected systems with their jump costs.

        For directed graphs only outgoing connections are reported.

        Args:
            name: System identifier

        Returns:
            Set of (neighbor_name, cost) tuples

        Raises:
            UnknownSystemError: If the system is not in the graph
        """
        idx = self.index_of(name)
        g = self.graph
        result: set[tuple[str, float]] = set()
        for eid in g.incident(idx, mode="out"):
            edge = g.es[eid]
            other = edge.target if edge.source == idx else edge.source
            result.add((self.idx_to_name[other], float(edge[COST_ATTR])))
        return result

    def cost(self, source: str, target: str) -> float | None:
        """
        Get the direct jump cost between two systems.

        Returns:
            Cost of the connection, or None if the systems are not adjacent

        Raises:
            UnknownSystemError: If either system is not in the graph
        """
        src = self.index_of(source)
        dst = self.index_of(target)
        eid = self.graph.get_eid(src, dst, directed=True, error=False)
        if eid < 0:
            return None
        return float(self.graph.es[eid][COST_ATTR])

    def costs(self) -> list[float]:
        """Edge costs indexed by igraph edge ID."""
        if self.connection_count == 0:
            return []
        return [float(c) for c in self.graph.es[COST_ATTR]]

    def is_cyclic(self) -> bool:
        """
        Check whether the map contains a cycle.

        Undirected graphs are cyclic when they have more edges than a
        spanning forest; directed graphs when they are not a DAG.
        """
        g = self.graph
        if self.directed:
            return not g.is_dag()
        components = len(g.connected_components(mode="weak"))
        return g.ecount() > g.vcount() - components

    def reachable_from(self, name: str) -> list[str]:
        """
        List systems reachable from a system (including itself).

        Returns:
            System identifiers in canonical order

        Raises:
            UnknownSystemError: If the system is not in the graph
        """
        idx = self.index_of(name)
        reached = sorted(self.graph.subcomponent(idx, mode="out"))
        return [self.idx_to_name[i] for i in reached]

    def subgraph(self, names: list[str]) -> SystemGraph:
        """
        Restrict the graph to a subset of systems.

        Canonical order of the kept systems is preserved, and only
        connections between kept systems survive.

        Raises:
            UnknownSystemError: If any system is not in the graph
        """
        keep = sorted({self.index_of(n) for n in names})
        sub = self.graph.induced_subgraph(keep, implementation="copy_and_delete")
        sub_names = sub.vs["name"] if keep else []

        return SystemGraph(
            graph=sub,
            name_to_idx={n: i for i, n in enumerate(sub_names)},
            idx_to_name=dict(enumerate(sub_names)),
            system_ids=self.system_ids[keep] if keep else np.array([], dtype=np.int64),
            directed=self.directed,
            system_count=len(keep),
            connection_count=sub.ecount(),
        )

    def to_dict(self) -> dict:
        """
        Convert the graph to a plain dictionary (explicit map format).

        Returns:
            Dictionary with "directed", "systems" and "connections" keys
        """
        g = self.graph
        connections = [
            {
                "source": self.idx_to_name[e.source],
                "target": self.idx_to_name[e.target],
                "cost": float(e[COST_ATTR]),
            }
            for e in g.es
        ]
        return {
            "directed": self.directed,
            "systems": self.all_systems(),
            "connections": connections,
        }
