from __future__ import annotations
import math
import random
from typing import List, Optional

import numpy as np

from .base import ImprovementStrategy
from .tsp import tour_length


def simulated_annealing(matrix, initial_tour: List[int], max_iterations: int = 5000,
                        initial_temperature: float = 1.0, cooling_rate: float = 0.9995,
                        rng: Optional[random.Random] = None) -> List[int]:
    """Random segment reversals under Metropolis acceptance; returns the best tour seen."""
    rng = rng or random.Random()
    d = np.asarray(matrix, dtype=float)
    current = list(initial_tour)
    n = len(current)
    if n < 4:
        return current
    current_length = tour_length(current, d)
    best, best_length = list(current), current_length
    temperature = initial_temperature

    for _ in range(max_iterations):
        i = rng.randrange(n - 1)
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        lo, hi = min(i, j), max(i, j)
        if lo == 0 and hi == n - 1:
            # reversing the whole cycle leaves its length unchanged
            temperature *= cooling_rate
            continue
        prev, nxt = current[(lo - 1) % n], current[(hi + 1) % n]
        delta = (d[prev, current[hi]] + d[current[lo], nxt]) - (d[prev, current[lo]] + d[current[hi], nxt])

        if delta < 0 or (temperature > 0 and rng.random() < math.exp(-delta / temperature)):
            current[lo:hi + 1] = current[lo:hi + 1][::-1]
            current_length += float(delta)
            if current_length < best_length:
                best, best_length = list(current), current_length

        temperature *= cooling_rate
    return best


class SimulatedAnnealing(ImprovementStrategy):
    name = "SimulatedAnnealing"

    def improve(self, tour, points, matrix):
        cfg = self.cfg
        return simulated_annealing(matrix, tour, cfg.sa_iterations, cfg.sa_initial_temperature,
                                   cfg.sa_cooling_rate, rng=random.Random(cfg.seed))
