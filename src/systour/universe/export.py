"""
Graphviz export of a map annotated with a solved route.

Each vertex is labelled with its name and the positions at which the
expanded jump path passes through it, e.g. ``"B [1, 5]"``. Rendering the
DOT file to an image is left to Graphviz.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..core.logging import get_logger

if TYPE_CHECKING:
    from ..services.touring.result_builder import Route
    from .graph import SystemGraph

logger = get_logger(__name__)


def route_labels(graph: SystemGraph, route: Route) -> list[str]:
    """
    Build vertex labels indexed by canonical system index.

    Args:
        graph: Graph the route was solved on
        route: Solved route; its expanded path supplies the positions

    Returns:
        One label per system, systems off the route get an empty list
    """
    positions: dict[str, list[int]] = {}
    for position, name in enumerate(route.path):
        positions.setdefault(name, []).append(position)

    return [
        f"{name} {positions.get(name, [])}"
        for name in graph.all_systems()
    ]


def write_route_dot(graph: SystemGraph, route: Route, path: Path | str) -> Path:
    """
    Write the graph as DOT with route positions on each vertex.

    Args:
        graph: Graph the route was solved on
        route: Solved route
        path: Output .dot file

    Returns:
        Path of the written file
    """
    path = Path(path)
    annotated = graph.graph.copy()
    annotated.vs["label"] = route_labels(graph, route)
    annotated.write_dot(str(path))
    logger.info("Wrote route graph to %s", path)
    return path
