from __future__ import annotations
from typing import List, Optional, Tuple

import numpy as np

from .base import TourStrategy
from .tsp import matrix_rows, tour_length

MAX_BRUTE_FORCE_N = 10
MAX_EXACT_N = 20   # Held-Karp table is O(2^n * n) floats

ExactSolution = Tuple[List[int], float]


def brute_force_exact(matrix, n: int) -> ExactSolution:
    """Optimal tour by enumerating all (n-1)! orders with city 0 fixed first.

    Orders are generated by Heap's algorithm (one swap per permutation);
    only a strictly shorter tour replaces the incumbent.
    """
    if n <= 1:
        return list(range(n)), 0.0
    d = matrix_rows(matrix)
    tour = list(range(n))
    best_tour, best_length = list(tour), tour_length(tour, d)

    m = n - 1  # permuted positions 1..n-1
    c = [0] * m
    i = 1
    while i < m:
        if c[i] < i:
            j = 1 if i % 2 == 0 else c[i] + 1
            tour[j], tour[i + 1] = tour[i + 1], tour[j]
            length = tour_length(tour, d)
            if length < best_length:
                best_tour, best_length = list(tour), length
            c[i] += 1
            i = 1
        else:
            c[i] = 0
            i += 1
    return best_tour, best_length


def held_karp(matrix, n: int) -> ExactSolution:
    """Optimal tour by subset dynamic programming, O(2^n * n^2).

    ``dp[mask, last]`` is the cheapest path from city 0 through exactly the
    cities in ``mask`` (city c <-> bit c-1) ending at ``last``; ``inf`` marks
    unreachable states. Masks are filled one population count at a time so
    every transition reads a finished smaller subset.
    """
    if n > MAX_EXACT_N:
        raise ValueError(f"held_karp supports n <= {MAX_EXACT_N}, got {n}.")
    if n <= 1:
        return list(range(n)), 0.0
    D = np.asarray(matrix, dtype=float)
    m = n - 1
    size = 1 << m
    dp = np.full((size, n), np.inf)
    parent = np.full((size, n), -1, dtype=np.int8)
    for city in range(1, n):
        dp[1 << (city - 1), city] = D[0, city]
        parent[1 << (city - 1), city] = 0

    masks = np.arange(size)
    popcount = np.zeros(size, dtype=np.int64)
    for b in range(m):
        popcount += (masks >> b) & 1

    for k in range(2, m + 1):
        layer = masks[popcount == k]
        for last in range(1, n):
            bit = 1 << (last - 1)
            sel = layer[(layer & bit) != 0]
            # cand[r, p] = dp[sel_r without last, p] + D[p, last]
            cand = dp[sel ^ bit] + D[:, last]
            best_prev = np.argmin(cand, axis=1)
            best = cand[np.arange(len(sel)), best_prev]
            ok = np.isfinite(best)
            dp[sel[ok], last] = best[ok]
            parent[sel[ok], last] = best_prev[ok]

    full = size - 1
    closing = dp[full, 1:] + D[1:, 0]
    last = int(np.argmin(closing)) + 1
    length = float(closing[last - 1])

    path = []
    mask = full
    while last != 0:
        path.append(last)
        prev = int(parent[mask, last])
        mask ^= 1 << (last - 1)
        last = prev
    path.reverse()
    return [0] + path, length


def find_optimal(matrix, n: int) -> Optional[ExactSolution]:
    """Exact solve by size: brute force up to 10 cities, Held-Karp up to 20.

    Returns None when no exact method is feasible.
    """
    if n > MAX_EXACT_N:
        return None
    if n <= MAX_BRUTE_FORCE_N:
        return brute_force_exact(matrix, n)
    return held_karp(matrix, n)


def max_exact_n() -> int:
    return MAX_EXACT_N


class BruteForce(TourStrategy):
    name = "BruteForce"

    def generate_tour(self, points, matrix, n):
        return brute_force_exact(matrix, n)[0]


class HeldKarp(TourStrategy):
    name = "HeldKarp"

    def generate_tour(self, points, matrix, n):
        return held_karp(matrix, n)[0]
