"""
Universe module for route solving.

This module provides the graph model of systems and jump connections,
its validated construction, map-file loading and DOT export.
"""

from systour.universe.builder import build_system_graph
from systour.universe.export import route_labels, write_route_dot
from systour.universe.graph import SystemGraph
from systour.universe.loader import load_map, parse_map

__all__ = [
    "SystemGraph",
    "build_system_graph",
    "load_map",
    "parse_map",
    "route_labels",
    "write_route_dot",
]
