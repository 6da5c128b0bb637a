from __future__ import annotations
from typing import List

import numpy as np

from .base import ImprovementStrategy
from .tsp import distance

EPS = 1e-12


def two_opt(tour: List[int], matrix, max_iterations: int = 100) -> List[int]:
    """Apply improving segment reversals until a full pass finds none.

    Pairs (i, j) are scanned in the usual nested order and each improving
    reversal is applied as soon as it is found; for a fixed i the candidate
    j's are evaluated together with numpy.
    """
    D = np.asarray(matrix, dtype=float)
    t = np.array(tour, dtype=np.intp)
    n = len(t)
    improved = True
    iterations = 0
    while improved and iterations < max_iterations:
        improved = False
        iterations += 1
        for i in range(n - 2):
            # edges (0,1) and (n-1,0) are adjacent
            stop = n - 1 if i == 0 else n
            j0 = i + 2
            while j0 < stop:
                a, b = t[i], t[i + 1]
                js = np.arange(j0, stop)
                c, e = t[js], t[(js + 1) % n]
                gain = D[a, b] + D[c, e] - D[a, c] - D[b, e]
                hits = np.flatnonzero(gain > EPS)
                if len(hits) == 0:
                    break
                j = int(js[hits[0]])
                t[i + 1:j + 1] = t[i + 1:j + 1][::-1].copy()
                improved = True
                j0 = j + 1
    return t.tolist()


def should_zigzag(a, b, c, d) -> bool:
    """True when visiting a-c-b-d is shorter than a-b-c-d."""
    return distance(a, c) + distance(b, d) < distance(a, b) + distance(c, d)


def zigzag(tour: List[int], points) -> List[int]:
    by_id = {p.id: p for p in points}
    tour = list(tour)
    n = len(tour)
    i = 1
    while i + 2 < n:
        a, b, c, d = (by_id[t] for t in tour[i - 1:i + 3])
        if should_zigzag(a, b, c, d):
            tour[i], tour[i + 1] = tour[i + 1], tour[i]
            i += 2
        else:
            i += 1
    return list(dict.fromkeys(tour))


class TwoOpt(ImprovementStrategy):
    name = "TwoOpt"

    def improve(self, tour, points, matrix):
        return two_opt(tour, matrix, self.cfg.two_opt_max_iterations)


class Zigzag(ImprovementStrategy):
    """Single O(n) pass of adjacent-pair swaps, on point coordinates."""
    name = "Zigzag"
    uses_matrix = False

    def improve(self, tour, points, matrix):
        return zigzag(tour, points)
