"""
Tests for the exact tour algorithms.

Held-Karp and branch-and-bound are cross-checked against brute force on
seeded random graphs, including the lexicographic tie-break.
"""

import threading

import pytest

from systour.core.errors import SolveCancelledError
from systour.services.touring.algorithms import (
    Tour,
    branch_and_bound,
    brute_force,
    held_karp,
    route_cost,
)
from systour.services.touring.distances import DistanceMatrix
from systour.universe import SystemGraph, build_system_graph

ENGINES = [held_karp, branch_and_bound]


@pytest.fixture(params=ENGINES, ids=["held_karp", "branch_and_bound"])
def engine(request):
    """Each exact engine in turn."""
    return request.param


# =============================================================================
# Route Cost
# =============================================================================


class TestRouteCost:
    """Test route_cost helper."""

    def test_open_cost(self, three_path: SystemGraph):
        matrix = DistanceMatrix.compute(three_path)

        assert route_cost([0, 1, 2], matrix) == 7.0
        assert route_cost([0, 2, 1], matrix) == 12.0

    def test_closed_cost(self, four_cycle: SystemGraph):
        matrix = DistanceMatrix.compute(four_cycle)

        assert route_cost([0, 1, 2, 3], matrix, closed_tour=True) == 4.0

    def test_unreachable_leg(self, disconnected: SystemGraph):
        matrix = DistanceMatrix.compute(disconnected)

        assert route_cost([0, 1, 2, 3], matrix) is None

    def test_single_system(self, singleton: SystemGraph):
        matrix = DistanceMatrix.compute(singleton)

        assert route_cost([0], matrix, closed_tour=True) == 0.0


# =============================================================================
# Known Instances
# =============================================================================


class TestKnownInstances:
    """Test every engine on hand-checked graphs."""

    def test_four_cycle(self, engine, four_cycle: SystemGraph):
        tour = engine(DistanceMatrix.compute(four_cycle), 0)

        assert tour == Tour(order=[0, 1, 2, 3], cost=3.0)

    def test_three_path(self, engine, three_path: SystemGraph):
        tour = engine(DistanceMatrix.compute(three_path), 0)

        assert tour == Tour(order=[0, 1, 2], cost=7.0)

    def test_three_path_from_middle(self, engine, three_path: SystemGraph):
        """From B the cheap spoke is visited first: B, A, C costs 2 + 7."""
        tour = engine(DistanceMatrix.compute(three_path), 1)

        assert tour == Tour(order=[1, 0, 2], cost=9.0)

    def test_singleton(self, engine, singleton: SystemGraph):
        tour = engine(DistanceMatrix.compute(singleton), 0)

        assert tour == Tour(order=[0], cost=0.0)

    def test_singleton_closed(self, engine, singleton: SystemGraph):
        tour = engine(DistanceMatrix.compute(singleton), 0, True)

        assert tour == Tour(order=[0], cost=0.0)

    def test_two_systems(self, engine):
        graph = build_system_graph(["A", "B"], [("A", "B", 4)])

        tour = engine(DistanceMatrix.compute(graph), 1)

        assert tour == Tour(order=[1, 0], cost=4.0)

    def test_star_open(self, engine, star_map: SystemGraph):
        # Hub, North, East, South, West
        tour = engine(DistanceMatrix.compute(star_map), 0)

        assert tour == Tour(order=[0, 1, 4, 2, 3], cost=14.0)

    def test_star_closed(self, engine, star_map: SystemGraph):
        """Every closed tour of a tree walks each connection twice."""
        tour = engine(DistanceMatrix.compute(star_map), 0, True)

        assert tour == Tour(order=[0, 1, 2, 3, 4], cost=20.0)

    def test_four_cycle_closed(self, engine, four_cycle: SystemGraph):
        tour = engine(DistanceMatrix.compute(four_cycle), 0, True)

        assert tour == Tour(order=[0, 1, 2, 3], cost=4.0)

    def test_start_not_first_index(self, engine, four_cycle: SystemGraph):
        tour = engine(DistanceMatrix.compute(four_cycle), 2)

        assert tour == Tour(order=[2, 1, 0, 3], cost=3.0)


class TestInfeasible:
    """Test instances with no order through every system."""

    def test_directed_fork(self, engine):
        """S reaches X and Y, but neither reaches the other."""
        graph = build_system_graph(
            ["S", "X", "Y"], [("S", "X", 1), ("S", "Y", 1)], directed=True
        )

        assert engine(DistanceMatrix.compute(graph), 0) is None

    def test_directed_no_return(self, engine):
        graph = build_system_graph(["A", "B"], [("A", "B", 1)], directed=True)
        matrix = DistanceMatrix.compute(graph)

        assert engine(matrix, 0) == Tour(order=[0, 1], cost=1.0)
        assert engine(matrix, 0, True) is None

    def test_brute_force_agrees(self):
        graph = build_system_graph(
            ["S", "X", "Y"], [("S", "X", 1), ("S", "Y", 1)], directed=True
        )

        assert brute_force(DistanceMatrix.compute(graph), 0) is None


# =============================================================================
# Cross-Checks
# =============================================================================


class TestAgainstBruteForce:
    """Exact engines must match exhaustive enumeration."""

    @pytest.mark.parametrize("size", [2, 3, 4, 5, 6, 7, 8])
    @pytest.mark.parametrize("directed", [False, True])
    @pytest.mark.parametrize("closed_tour", [False, True])
    def test_matches_brute_force(
        self, engine, random_graph, seeded_rng, size, directed, closed_tour
    ):
        for _ in range(3):
            graph = random_graph(seeded_rng, size, directed=directed)
            matrix = DistanceMatrix.compute(graph)
            start = seeded_rng.randrange(size)

            expected = brute_force(matrix, start, closed_tour)
            actual = engine(matrix, start, closed_tour)

            # Integer costs make ties exact, so the orders must agree too
            assert actual == expected

    @pytest.mark.parametrize("size", [5, 7])
    def test_fractional_costs(self, engine, random_graph, seeded_rng, size):
        for _ in range(3):
            graph = random_graph(seeded_rng, size, integer_costs=False)
            matrix = DistanceMatrix.compute(graph)

            expected = brute_force(matrix, 0)
            actual = engine(matrix, 0)

            assert actual.cost == pytest.approx(expected.cost)

    def test_engines_agree_on_larger_instance(self, random_graph, seeded_rng):
        graph = random_graph(seeded_rng, 11, edge_probability=0.3)
        matrix = DistanceMatrix.compute(graph)

        assert held_karp(matrix, 3) == branch_and_bound(matrix, 3)


class TestBranchAndBoundIncumbent:
    """The first complete route becomes the incumbent."""

    def test_first_route_kept(self, three_path: SystemGraph):
        tour = branch_and_bound(DistanceMatrix.compute(three_path), 0)

        assert tour is not None
        assert tour.cost == 7.0

    def test_zero_cost_path(self):
        graph = build_system_graph(["A", "B", "C"], [("A", "B", 0), ("B", "C", 0)])
        matrix = DistanceMatrix.compute(graph)

        assert branch_and_bound(matrix, 0) == brute_force(matrix, 0) == Tour([0, 1, 2], 0.0)

    @pytest.mark.parametrize("closed_tour", [False, True])
    def test_never_misses_feasible_route(self, random_graph, seeded_rng, closed_tour):
        for _ in range(20):
            size = seeded_rng.randint(2, 6)
            matrix = DistanceMatrix.compute(random_graph(seeded_rng, size))

            assert branch_and_bound(matrix, 0, closed_tour) == brute_force(
                matrix, 0, closed_tour
            )


class TestTieBreak:
    """Test the lexicographic tie-break on fully tied instances."""

    def test_complete_uniform_graph(self, engine):
        """Every order costs the same; the identity order wins."""
        names = ["A", "B", "C", "D", "E"]
        graph = build_system_graph(
            names, [(a, b, 1) for a in names for b in names if a < b]
        )

        tour = engine(DistanceMatrix.compute(graph), 0)

        assert tour.order == [0, 1, 2, 3, 4]

    def test_zero_cost_graph(self, engine):
        graph = build_system_graph(["A", "B", "C"], [("A", "C", 0), ("C", "B", 0)])

        tour = engine(DistanceMatrix.compute(graph), 0)

        assert tour == Tour(order=[0, 1, 2], cost=0.0)

    def test_deterministic(self, engine, random_graph, seeded_rng):
        graph = random_graph(seeded_rng, 7)
        matrix = DistanceMatrix.compute(graph)

        assert engine(matrix, 0) == engine(matrix, 0)


# =============================================================================
# Cancellation
# =============================================================================


class TestCancellation:
    """Test cooperative cancellation."""

    def test_cancelled_before_start(self, engine, random_graph, seeded_rng):
        matrix = DistanceMatrix.compute(random_graph(seeded_rng, 6))
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(SolveCancelledError):
            engine(matrix, 0, False, cancel)

    def test_unset_event_completes(self, engine, four_cycle: SystemGraph):
        cancel = threading.Event()

        tour = engine(DistanceMatrix.compute(four_cycle), 0, False, cancel)

        assert tour.cost == 3.0
