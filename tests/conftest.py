"""
systour Test Suite - Shared Fixtures and Configuration

Provides small hand-built graphs, a seeded RNG for randomized
cross-checks, and singleton resets between tests.
"""

import json
import random
from pathlib import Path

import pytest

from systour.universe import SystemGraph, build_system_graph

# =============================================================================
# Singleton Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons(monkeypatch):
    """
    Reset settings and logging state around every test.

    SYSTOUR_* variables from the developer's environment are removed so
    defaults apply unless a test sets them.
    """
    import os

    for key in list(os.environ):
        if key.startswith("SYSTOUR_"):
            monkeypatch.delenv(key, raising=False)

    def do_reset():
        # Settings cache (MUST be first - other modules read from settings)
        from systour.core.config import reset_settings

        reset_settings()

        # Logging state (affects propagation for caplog)
        from systour.core.logging import reset_logging

        reset_logging()

    do_reset()
    yield
    do_reset()


# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def four_cycle() -> SystemGraph:
    """
    A -- B -- C -- D -- A, every jump costs 1.
    """
    return build_system_graph(
        ["A", "B", "C", "D"],
        [("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "A", 1)],
    )


@pytest.fixture
def three_path() -> SystemGraph:
    """
    A --2-- B --5-- C, no shortcut between A and C.
    """
    return build_system_graph(["A", "B", "C"], [("A", "B", 2), ("B", "C", 5)])


@pytest.fixture
def singleton() -> SystemGraph:
    """A single system with no connections."""
    return build_system_graph(["I.EXP.NJ7"], [])


@pytest.fixture
def star_map() -> SystemGraph:
    """
    Hub with three spokes plus one cross link.

            North
              |3
    West --1-- Hub --2-- East
                          |4
                        South

    Every route must backtrack through Hub.
    """
    return build_system_graph(
        ["Hub", "North", "East", "South", "West"],
        [
            ("Hub", "North", 3),
            ("Hub", "East", 2),
            ("East", "South", 4),
            ("Hub", "West", 1),
        ],
    )


@pytest.fixture
def disconnected() -> SystemGraph:
    """Two islands: A -- B and C -- D."""
    return build_system_graph(["A", "B", "C", "D"], [("A", "B", 1), ("C", "D", 1)])


# =============================================================================
# Map File Fixtures
# =============================================================================


@pytest.fixture
def solar_map_data() -> dict:
    """Solar-system map in the data.json layout."""
    return {
        "30000001": {
            "solarSystemID": 30000001,
            "solarSystemName": "I.EXP.NJ7",
            "neighbours": [30000002, 30000003],
        },
        "30000002": {
            "solarSystemID": 30000002,
            "solarSystemName": "Tanoo",
            "neighbours": [30000001, 30000003],
        },
        "30000003": {
            "solarSystemID": 30000003,
            "solarSystemName": "Lashesih",
            "neighbours": [30000001, 30000002, 30000004],
        },
        "30000004": {
            "solarSystemID": 30000004,
            "solarSystemName": "Akpivem",
            "neighbours": [30000003],
        },
    }


@pytest.fixture
def solar_map_file(tmp_path: Path, solar_map_data: dict) -> Path:
    """Write the solar-system map to a temporary file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(solar_map_data))
    return path


@pytest.fixture
def explicit_map_file(tmp_path: Path) -> Path:
    """Explicit weighted map: the 3-path plus an isolated system."""
    path = tmp_path / "map.json"
    path.write_text(
        json.dumps(
            {
                "systems": ["A", "B", "C", "Z"],
                "connections": [
                    {"source": "A", "target": "B", "cost": 2},
                    {"source": "B", "target": "C", "cost": 5},
                ],
            }
        )
    )
    return path


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def seeded_rng() -> random.Random:
    """
    Return a seeded Random instance for deterministic randomness in tests.

    This provides an isolated random number generator that won't affect
    global state.
    """
    return random.Random(42)


def make_random_graph(
    rng: random.Random,
    size: int,
    edge_probability: float = 0.4,
    directed: bool = False,
    integer_costs: bool = True,
) -> SystemGraph:
    """
    Build a random connected graph: a random spanning chain plus extra edges.

    Directed graphs get the chain in both directions so every system is
    mutually reachable.
    """
    names = [f"S{i}" for i in range(size)]
    shuffled = names[:]
    rng.shuffle(shuffled)

    def cost() -> float:
        return float(rng.randint(1, 9)) if integer_costs else round(rng.uniform(0.5, 9.5), 3)

    connections = []
    for a, b in zip(shuffled, shuffled[1:]):
        connections.append((a, b, cost()))
        if directed:
            connections.append((b, a, cost()))

    for a in names:
        for b in names:
            if a == b or (not directed and a > b):
                continue
            if rng.random() < edge_probability:
                connections.append((a, b, cost()))

    return build_system_graph(names, connections, directed=directed)


@pytest.fixture
def random_graph():
    """
    Fixture providing make_random_graph for tests.

    Usage:
        def test_something(random_graph, seeded_rng):
            graph = random_graph(seeded_rng, 6)
    """
    return make_random_graph
