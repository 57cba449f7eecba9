"""
Map Loader - Read map files into a SystemGraph.

Two JSON layouts are accepted:

Solar-system map (object keyed by system ID, every jump costs 1)::

    {
        "30000142": {
            "solarSystemID": 30000142,
            "solarSystemName": "Jita",
            "neighbours": [30000144, 30000140]
        }
    }

Explicit map::

    {
        "directed": false,
        "systems": ["A", "B", "C"],
        "connections": [{"source": "A", "target": "B", "cost": 2.0}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.config import get_settings
from ..core.errors import MapLoadError, UnknownSystemError
from ..core.logging import get_logger
from .builder import build_system_graph

if TYPE_CHECKING:
    from ..core.config import DuplicatePolicy
    from .graph import SystemGraph

logger = get_logger(__name__)

# Jump cost used by solar-system maps, which carry no distances
UNIFORM_JUMP_COST = 1.0


# =============================================================================
# Map Models
# =============================================================================


class MapModel(BaseModel):
    """Base model for map file entries."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class SolarSystemEntry(MapModel):
    """One system of a solar-system map."""

    system_id: int = Field(alias="solarSystemID", description="Numeric system ID")
    name: str = Field(alias="solarSystemName", min_length=1, description="System name")
    neighbours: list[int] = Field(default_factory=list, description="Adjacent system IDs")


class ConnectionEntry(MapModel):
    """One connection of an explicit map."""

    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    cost: float = Field(default=UNIFORM_JUMP_COST, description="Jump cost")


class ExplicitMap(MapModel):
    """Explicit map listing systems and weighted connections."""

    directed: bool | None = Field(default=None, description="One-way connections")
    systems: list[str]
    connections: list[ConnectionEntry] = Field(default_factory=list)


_SOLAR_ADAPTER = TypeAdapter(dict[str, SolarSystemEntry])


# =============================================================================
# Loading
# =============================================================================


def load_map(
    path: Path | str,
    *,
    directed: bool | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
) -> SystemGraph:
    """
    Load a map file into a SystemGraph.

    Args:
        path: Path to the JSON map file
        directed: Override the directed flag (explicit maps only)
        duplicate_policy: Override the duplicate reconciliation policy

    Returns:
        Validated SystemGraph

    Raises:
        MapLoadError: Missing file, invalid JSON, unrecognized layout or
            repeated solar-system ID
        InvalidGraphError: Malformed connections
        UnknownSystemError: Connection to a system the map does not define
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise MapLoadError(f"Map file not found: {path}")
    except json.JSONDecodeError as e:
        raise MapLoadError(f"Invalid JSON in map file: {path}\nParse error: {e}")

    graph = parse_map(data, directed=directed, duplicate_policy=duplicate_policy)
    logger.info(
        "Loaded map %s: %d systems, %d connections",
        path.name,
        graph.system_count,
        graph.connection_count,
    )
    return graph


def parse_map(
    data: Any,
    *,
    directed: bool | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
) -> SystemGraph:
    """
    Build a SystemGraph from an already-decoded map document.

    See load_map() for arguments and errors.
    """
    if duplicate_policy is None:
        duplicate_policy = get_settings().duplicate_policy

    if not isinstance(data, dict):
        raise MapLoadError(f"Map document must be a JSON object, got {type(data).__name__}")

    if isinstance(data.get("systems"), list):
        return _parse_explicit(data, directed, duplicate_policy)
    return _parse_solar_systems(data, duplicate_policy)


def _parse_explicit(
    data: dict[str, Any],
    directed: bool | None,
    duplicate_policy: DuplicatePolicy,
) -> SystemGraph:
    try:
        doc = ExplicitMap.model_validate(data)
    except ValidationError as e:
        raise MapLoadError(f"Invalid explicit map: {e}") from e

    if directed is None:
        directed = doc.directed if doc.directed is not None else get_settings().directed

    return build_system_graph(
        doc.systems,
        [(c.source, c.target, c.cost) for c in doc.connections],
        directed=directed,
        duplicate_policy=duplicate_policy,
    )


def _parse_solar_systems(
    data: dict[str, Any],
    duplicate_policy: DuplicatePolicy,
) -> SystemGraph:
    try:
        entries = _SOLAR_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MapLoadError(f"Invalid solar-system map: {e}") from e

    id_to_name: dict[int, str] = {}
    for entry in entries.values():
        if entry.system_id in id_to_name:
            raise MapLoadError(
                f"Duplicate solarSystemID {entry.system_id}: "
                f"{id_to_name[entry.system_id]} and {entry.name}"
            )
        id_to_name[entry.system_id] = entry.name

    connections: list[tuple[str, str, float]] = []
    for entry in entries.values():
        for neighbour_id in entry.neighbours:
            neighbour = id_to_name.get(neighbour_id)
            if neighbour is None:
                raise UnknownSystemError(
                    str(neighbour_id), context=f"neighbour of {entry.name}"
                )
            connections.append((entry.name, neighbour, UNIFORM_JUMP_COST))

    return build_system_graph(
        [entry.name for entry in entries.values()],
        connections,
        directed=False,
        duplicate_policy=duplicate_policy,
        system_ids={entry.name: entry.system_id for entry in entries.values()},
    )
