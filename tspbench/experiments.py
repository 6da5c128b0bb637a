from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .annealing import SimulatedAnnealing
from .base import StrategyConfig, TourStrategy
from .capacity import BenchmarkResult, ProbeObserver, find_max_n, strategy_timer
from .construction import AngularSort, GreedyEdge, NearestNeighbor, SonarSweep
from .exact import BruteForce, HeldKarp
from .genetic import GeneticAlgorithm
from .local_search import TwoOpt, Zigzag
from .logs import logger
from .tsp import DEFAULT_SEED


@dataclass
class BenchmarkCase:
    name: str
    strategy: TourStrategy
    min_n: int
    max_n: int


def default_cases(cfg: Optional[StrategyConfig] = None) -> List[BenchmarkCase]:
    """Every strategy with a size range matching its known scaling."""
    cfg = cfg or StrategyConfig()
    return [
        BenchmarkCase("BruteForce (bruteForceExact)", BruteForce(cfg), 4, 11),
        BenchmarkCase("BruteForce (heldKarp)", HeldKarp(cfg), 4, 20),
        BenchmarkCase("AngularSort", AngularSort(cfg), 10, 500_000),
        BenchmarkCase("SonarVisit", SonarSweep(cfg), 10, 500_000),
        BenchmarkCase("NearestNeighbor", NearestNeighbor(cfg), 10, 5_000),
        BenchmarkCase("GreedyEdge", GreedyEdge(cfg), 10, 3_000),
        BenchmarkCase("TwoOpt (with NearestNeighbor)", TwoOpt(NearestNeighbor(cfg), cfg), 10, 3_000),
        BenchmarkCase("Zigzag (with AngularSort)", Zigzag(AngularSort(cfg), cfg), 10, 5_000),
        BenchmarkCase(f"SimulatedAnnealing (with NearestNeighbor, {cfg.sa_iterations} iterations)",
                      SimulatedAnnealing(NearestNeighbor(cfg), cfg), 10, 5_000),
        BenchmarkCase(f"GeneticAlgorithm (pop={cfg.ga_population_size}, gen={cfg.ga_generations})",
                      GeneticAlgorithm(cfg), 10, 1_000),
    ]


def select_cases(cases: Sequence[BenchmarkCase], names: Iterable[str]) -> List[BenchmarkCase]:
    """Cases whose name contains any of ``names`` (case-insensitive); all if none given."""
    wanted = [s.lower() for s in names]
    if not wanted:
        return list(cases)
    return [c for c in cases if any(w in c.name.lower() for w in wanted)]


def rank_results(results: Iterable[BenchmarkResult]) -> List[BenchmarkResult]:
    return sorted(results, key=lambda r: r.max_n, reverse=True)


def run_capacity_benchmark(cases: Sequence[BenchmarkCase], timeout: float, seed: Optional[int] = DEFAULT_SEED,
                           on_probe: Optional[ProbeObserver] = None,
                           on_result: Optional[Callable[[BenchmarkResult], None]] = None) -> List[BenchmarkResult]:
    """Run the capacity search for each case in turn and rank the results.

    A case whose strategy raises is reported with ``max_n == 0`` and the
    error message; the remaining cases still run.
    """
    results = []
    for case in cases:
        try:
            res = find_max_n(case.name, strategy_timer(case.strategy, seed), case.min_n, case.max_n,
                             timeout, on_probe=on_probe)
            logger.info("%s: max n=%d in %.2fms", res.name, res.max_n, res.time_ms)
        except Exception as e:
            logger.warning("%s failed: %s", case.name, e)
            res = BenchmarkResult(name=case.name, max_n=0, elapsed_sec=0.0,
                                  error=f"{type(e).__name__}: {e}")
        if on_result is not None:
            on_result(res)
        results.append(res)
    return rank_results(results)
