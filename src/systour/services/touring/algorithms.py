"""
Exact Tour Algorithms.

Shortest Hamiltonian path (or cycle) search over a precomputed
DistanceMatrix. These are pure algorithms over canonical indices:
they know nothing about system names.

All engines share one tie-break rule: among optimal orders, the
lexicographically smallest sequence of canonical indices wins.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ...core.errors import SolveCancelledError

if TYPE_CHECKING:
    import threading

    from .distances import DistanceMatrix

# Relative tolerance under which two route costs are considered tied
TIE_TOLERANCE = 1e-9

# Search nodes expanded between cancellation checks in branch-and-bound
CANCEL_CHECK_INTERVAL = 4096


@dataclass(frozen=True)
class Tour:
    """Optimal visiting order as canonical indices plus its total cost."""

    order: list[int]
    cost: float


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise SolveCancelledError("Solve cancelled")


def _tied(value: float, target: float) -> bool:
    """Check whether value matches an optimum target within tolerance."""
    return value <= target + TIE_TOLERANCE * max(1.0, abs(target))


def route_cost(order: list[int], matrix: DistanceMatrix, closed_tour: bool = False) -> float | None:
    """
    Sum matrix distances along consecutive systems of an order.

    Args:
        order: Canonical indices in visiting order
        matrix: Precomputed DistanceMatrix
        closed_tour: Include the leg from the last system back to the first

    Returns:
        Total cost, or None if any leg is unreachable
    """
    legs = list(zip(order, order[1:]))
    if closed_tour and len(order) > 1:
        legs.append((order[-1], order[0]))

    total = 0.0
    for src, dst in legs:
        leg = matrix.distance(src, dst)
        if leg is None:
            return None
        total += leg
    return total


# =============================================================================
# Held-Karp
# =============================================================================


def held_karp(
    matrix: DistanceMatrix,
    start: int,
    closed_tour: bool = False,
    cancel: threading.Event | None = None,
) -> Tour | None:
    """
    Held-Karp subset dynamic programming.

    State: (set of visited non-start systems, current system). The table
    holds the cheapest cost to finish the route from each state, filled one
    subset-size layer at a time with NumPy operations over all subsets of
    the layer. Filling cost-to-complete rather than cost-so-far lets the
    forward reconstruction pick the smallest next index at every step while
    staying on an optimal route.

    Complexity: O(2^V * V^2) time, O(2^V * V) memory.

    Args:
        matrix: Precomputed DistanceMatrix
        start: Canonical index of the start system
        closed_tour: Require a final leg back to start
        cancel: Optional event; checked between layers

    Returns:
        Optimal Tour, or None if no order visits every system
    """
    n = len(matrix)
    others = [i for i in range(n) if i != start]
    m = len(others)
    if m == 0:
        return Tour(order=[start], cost=0.0)

    dist = matrix.distances
    reach = matrix.reachable
    sub_dist = dist[np.ix_(others, others)]
    sub_reach = reach[np.ix_(others, others)]
    out_dist = dist[start, others]
    out_reach = reach[start, others]

    full = (1 << m) - 1
    best = np.full((1 << m, m), np.inf, dtype=np.float64)

    # Final layer: every system visited
    if closed_tour:
        back = np.where(reach[others, start], dist[others, start], np.inf)
        best[full, :] = back
    else:
        best[full, :] = 0.0

    masks = np.arange(1 << m, dtype=np.int64)
    popcount = np.zeros(1 << m, dtype=np.int8)
    for bit in range(m):
        popcount += ((masks >> bit) & 1).astype(np.int8)

    for size in range(m - 1, 0, -1):
        _check_cancel(cancel)
        layer = masks[popcount == size]
        for v in range(m):
            with_v = layer[((layer >> v) & 1) == 1]
            if with_v.size == 0:
                continue
            candidate = np.full(with_v.size, np.inf, dtype=np.float64)
            for u in range(m):
                if u == v or not sub_reach[v, u]:
                    continue
                free = ((with_v >> u) & 1) == 0
                if not free.any():
                    continue
                nxt = with_v[free] | (1 << u)
                candidate[free] = np.minimum(candidate[free], sub_dist[v, u] + best[nxt, u])
            best[with_v, v] = candidate

    first = np.full(m, np.inf, dtype=np.float64)
    for u in range(m):
        if out_reach[u]:
            first[u] = out_dist[u] + best[1 << u, u]
    optimum = float(first.min())
    if math.isinf(optimum):
        return None

    # Forward reconstruction, smallest tied index first
    order = [start]
    mask = 0
    current = -1
    target = optimum
    for _ in range(m):
        chosen = -1
        for u in range(m):
            if (mask >> u) & 1:
                continue
            if current < 0:
                if not out_reach[u]:
                    continue
                value = out_dist[u] + best[mask | (1 << u), u]
            else:
                if not sub_reach[current, u]:
                    continue
                value = sub_dist[current, u] + best[mask | (1 << u), u]
            if _tied(float(value), target):
                chosen = u
                break
        # An optimal completion always exists from an optimal state
        assert chosen >= 0
        mask |= 1 << chosen
        current = chosen
        target = float(best[mask, chosen])
        order.append(others[chosen])

    cost = route_cost(order, matrix, closed_tour)
    assert cost is not None
    return Tour(order=order, cost=cost)


# =============================================================================
# Branch and Bound
# =============================================================================


def branch_and_bound(
    matrix: DistanceMatrix,
    start: int,
    closed_tour: bool = False,
    cancel: threading.Event | None = None,
) -> Tour | None:
    """
    Exact depth-first branch-and-bound search.

    Children are expanded in ascending index order and the incumbent is only
    replaced by a strictly cheaper route, so the first optimal route found
    is the lexicographically smallest one.

    Lower bound: cost so far plus, for every system still to be entered,
    its cheapest reachable incoming leg (and the return leg for closed
    tours). Every unvisited system must be entered exactly once, so the
    bound never overestimates.

    Args:
        matrix: Precomputed DistanceMatrix
        start: Canonical index of the start system
        closed_tour: Require a final leg back to start
        cancel: Optional event; checked every CANCEL_CHECK_INTERVAL nodes

    Returns:
        Optimal Tour, or None if no order visits every system
    """
    n = len(matrix)
    if n == 1:
        return Tour(order=[start], cost=0.0)

    dist = matrix.distances
    reach = matrix.reachable

    min_in = np.full(n, np.inf, dtype=np.float64)
    for u in range(n):
        incoming = [dist[w, u] for w in range(n) if w != u and reach[w, u]]
        if incoming:
            min_in[u] = min(incoming)

    if any(math.isinf(min_in[u]) for u in range(n) if u != start):
        return None
    if closed_tour and math.isinf(min_in[start]):
        return None

    return_bound = float(min_in[start]) if closed_tour else 0.0
    remaining_bound = float(sum(min_in[u] for u in range(n) if u != start))

    best_cost = math.inf
    best_order: list[int] | None = None
    visited = [False] * n
    visited[start] = True
    path = [start]
    expanded = 0

    def search(current: int, cost: float, bound_left: float) -> None:
        nonlocal best_cost, best_order, expanded

        expanded += 1
        if expanded % CANCEL_CHECK_INTERVAL == 0:
            _check_cancel(cancel)

        if len(path) == n:
            total = cost
            if closed_tour:
                if not reach[current, start]:
                    return
                total += float(dist[current, start])
            if math.isinf(best_cost) or total < best_cost - TIE_TOLERANCE * max(
                1.0, abs(best_cost)
            ):
                best_cost = total
                best_order = list(path)
            return

        for u in range(n):
            if visited[u] or not reach[current, u]:
                continue
            next_cost = cost + float(dist[current, u])
            next_bound = bound_left - float(min_in[u])
            lower = next_cost + next_bound + return_bound
            if not math.isinf(best_cost) and lower >= best_cost - TIE_TOLERANCE * max(
                1.0, abs(best_cost)
            ):
                continue
            visited[u] = True
            path.append(u)
            search(u, next_cost, next_bound)
            path.pop()
            visited[u] = False

    _check_cancel(cancel)
    search(start, 0.0, remaining_bound)

    if best_order is None:
        return None
    cost = route_cost(best_order, matrix, closed_tour)
    assert cost is not None
    return Tour(order=best_order, cost=cost)


# =============================================================================
# Brute Force
# =============================================================================


def brute_force(
    matrix: DistanceMatrix,
    start: int,
    closed_tour: bool = False,
) -> Tour | None:
    """
    Enumerate every permutation of the non-start systems.

    O(V!) - a correctness baseline for small instances only. Permutations
    are generated in lexicographic order and only strictly cheaper routes
    replace the incumbent, matching the other engines' tie-break.

    Args:
        matrix: Precomputed DistanceMatrix
        start: Canonical index of the start system
        closed_tour: Require a final leg back to start

    Returns:
        Optimal Tour, or None if no order visits every system
    """
    others = [i for i in range(len(matrix)) if i != start]

    best: Tour | None = None
    for perm in itertools.permutations(others):
        order = [start, *perm]
        cost = route_cost(order, matrix, closed_tour)
        if cost is None:
            continue
        if best is None or cost < best.cost - TIE_TOLERANCE * max(1.0, abs(best.cost)):
            best = Tour(order=order, cost=cost)
    return best
