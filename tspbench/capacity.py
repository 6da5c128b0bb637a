"""Largest problem size a tour strategy finishes within a wall-clock budget.

The search grows the size geometrically while runs are far below the budget,
then linearly, and finally bisects between the last size that fit and the
first one that did not. It assumes run time is non-decreasing in n; noisy or
non-monotonic timings can make it settle on a nearby size instead.
"""
from __future__ import annotations
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .base import TourStrategy
from .logs import logger
from .tsp import DEFAULT_SEED, TSPInstance, build_distance_matrix

Measure = Callable[[int], float]
ProbeObserver = Callable[["Probe"], None]


@dataclass(frozen=True)
class Probe:
    name: str
    n: int
    elapsed_sec: float
    feasible: bool
    phase: str  # "grow", "search" or "verify"


@dataclass(frozen=True)
class BenchmarkResult:
    name: str
    max_n: int
    elapsed_sec: float  # at max_n
    error: Optional[str] = None

    @property
    def time_ms(self) -> float:
        return self.elapsed_sec * 1000.0


def make_instance(n: int, seed: Optional[int] = DEFAULT_SEED) -> TSPInstance:
    return TSPInstance.random_normalized(n, seed=seed, name=f"probe{n}")


def strategy_timer(strategy: TourStrategy, seed: Optional[int] = DEFAULT_SEED) -> Measure:
    """Seconds one call of ``strategy`` takes on a fresh instance of size n.

    Instance generation and the distance matrix are not timed; the matrix is
    only built for strategies that read it.
    """
    def measure(n: int) -> float:
        instance = make_instance(n, seed)
        D = build_distance_matrix(instance.points if strategy.needs_matrix else [])
        start = time.perf_counter()
        strategy(instance.points, D, n)
        return time.perf_counter() - start
    return measure


def next_probe_size(n: int, elapsed: float, timeout: float, max_n: int) -> int:
    if elapsed < timeout / 100:
        nxt = min(n * 2, max_n)
    elif elapsed < timeout / 10:
        nxt = min(math.ceil(n * 1.5), max_n)
    else:
        nxt = n + 1
    if nxt <= n:
        nxt = n + 1
    return nxt


def find_max_n(name: str, measure: Measure, min_n: int, max_n: int, timeout: float,
               on_probe: Optional[ProbeObserver] = None) -> BenchmarkResult:
    if min_n < 1:
        raise ValueError("min_n must be at least 1.")
    if min_n > max_n:
        raise ValueError("min_n must be <= max_n.")
    if timeout < 0:
        raise ValueError("timeout must be non-negative.")

    def probe(n: int, phase: str):
        elapsed = measure(n)
        feasible = elapsed <= timeout
        logger.debug("%s n=%d %.2fms (%s)", name, n, elapsed * 1000.0, phase)
        if on_probe is not None:
            on_probe(Probe(name, n, elapsed, feasible, phase))
        return elapsed, feasible

    best_n = None
    n = min_n
    while n <= max_n:
        elapsed, feasible = probe(n, "grow")
        if not feasible:
            if best_n is None:
                return BenchmarkResult(name=name, max_n=0, elapsed_sec=elapsed)
            break
        best_n = n
        n = next_probe_size(n, elapsed, timeout, max_n)

    low, high = best_n, min(n, max_n)
    while high - low > 1:
        mid = (low + high) // 2
        _, feasible = probe(mid, "search")
        if feasible:
            low = mid
        else:
            high = mid

    elapsed, _ = probe(low, "verify")
    return BenchmarkResult(name=name, max_n=low, elapsed_sec=elapsed)
