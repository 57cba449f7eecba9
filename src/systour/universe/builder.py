"""
Graph Builder - Convert systems and connections to a validated SystemGraph.

Validation is eager: the first violation raises, before any graph is
returned and before any search can run.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import igraph as ig
import numpy as np

from ..core.errors import InvalidGraphError, UnknownSystemError
from ..core.logging import get_logger
from .graph import COST_ATTR, NO_SYSTEM_ID, SystemGraph

if TYPE_CHECKING:
    from ..core.config import DuplicatePolicy

logger = get_logger(__name__)

Connection = tuple[str, str, float]


def build_system_graph(
    systems: Iterable[str],
    connections: Iterable[Connection],
    *,
    directed: bool = False,
    duplicate_policy: DuplicatePolicy = "min",
    system_ids: Mapping[str, int] | None = None,
) -> SystemGraph:
    """
    Build a SystemGraph from system identifiers and weighted connections.

    Canonical system order is the order in which systems are supplied.

    Args:
        systems: Unique, case-sensitive system identifiers
        connections: (source, target, cost) tuples
        directed: Treat connections as one-way jumps
        duplicate_policy: For repeated connections with different costs,
            "min" keeps the cheapest, "error" raises InvalidGraphError
        system_ids: Optional external numeric ID per system identifier

    Returns:
        SystemGraph instance ready for queries

    Raises:
        InvalidGraphError: Duplicate system, negative or non-finite cost,
            self-loop, or conflicting duplicate under the "error" policy
        UnknownSystemError: Connection endpoint not among the systems
    """
    if duplicate_policy not in ("min", "error"):
        raise ValueError(f"Unknown duplicate policy: {duplicate_policy!r}")

    names: list[str] = []
    name_to_idx: dict[str, int] = {}
    for name in systems:
        if name in name_to_idx:
            raise InvalidGraphError(f"Duplicate system identifier: {name}")
        name_to_idx[name] = len(names)
        names.append(name)

    edges = _build_edge_costs(connections, name_to_idx, directed, duplicate_policy)
    edge_list = list(edges)

    g = ig.Graph(n=len(names), edges=edge_list, directed=directed)
    g.vs["name"] = names
    if edge_list:
        g.es[COST_ATTR] = [edges[e] for e in edge_list]

    ids = system_ids or {}
    external_ids = np.array(
        [ids.get(name, NO_SYSTEM_ID) for name in names],
        dtype=np.int64,
    )

    graph = SystemGraph(
        graph=g,
        name_to_idx=name_to_idx,
        idx_to_name=dict(enumerate(names)),
        system_ids=external_ids,
        directed=directed,
        system_count=len(names),
        connection_count=len(edge_list),
    )
    logger.debug(
        "Built %s graph: %d systems, %d connections",
        "directed" if directed else "undirected",
        graph.system_count,
        graph.connection_count,
    )
    return graph


def _build_edge_costs(
    connections: Iterable[Connection],
    name_to_idx: dict[str, int],
    directed: bool,
    duplicate_policy: DuplicatePolicy,
) -> dict[tuple[int, int], float]:
    """
    Validate connections and reconcile duplicates.

    Args:
        connections: (source, target, cost) tuples
        name_to_idx: System identifier to vertex index mapping
        directed: Keep edge direction (otherwise normalize for deduplication)
        duplicate_policy: "min" or "error"

    Returns:
        Mapping of (src_idx, dst_idx) to cost, in first-seen order
    """
    edges: dict[tuple[int, int], float] = {}
    for source, target, raw_cost in connections:
        src_idx = name_to_idx.get(source)
        if src_idx is None:
            raise UnknownSystemError(source, context=f"connection {source} -> {target}")
        dst_idx = name_to_idx.get(target)
        if dst_idx is None:
            raise UnknownSystemError(target, context=f"connection {source} -> {target}")

        cost = float(raw_cost)
        if math.isnan(cost) or math.isinf(cost):
            raise InvalidGraphError(f"Non-finite cost {raw_cost!r} on {source} -> {target}")
        if cost < 0:
            raise InvalidGraphError(f"Negative cost {cost} on {source} -> {target}")
        if src_idx == dst_idx:
            raise InvalidGraphError(f"Self-loop on {source}")

        key = (src_idx, dst_idx)
        if not directed:
            # Normalize edge direction for deduplication
            key = (min(src_idx, dst_idx), max(src_idx, dst_idx))

        existing = edges.get(key)
        if existing is None:
            edges[key] = cost
        elif existing != cost:
            if duplicate_policy == "error":
                raise InvalidGraphError(
                    f"Conflicting duplicate connection {source} -> {target}: "
                    f"{existing} vs {cost}"
                )
            logger.debug(
                "Duplicate connection %s -> %s: keeping %s", source, target, min(existing, cost)
            )
            edges[key] = min(existing, cost)

    return edges
