from __future__ import annotations
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .tsp import Point, TSPInstance, tour_length


@dataclass
class StrategyConfig:
    start_city: int = 0                  # nearest-neighbor start
    sonar_grid_size: int = 40            # sonar sweep uses 4 * grid buckets
    two_opt_max_iterations: int = 100    # full passes
    sa_iterations: int = 5000
    sa_initial_temperature: float = 1.0
    sa_cooling_rate: float = 0.9995      # multiplicative, per iteration
    ga_population_size: int = 50
    ga_generations: int = 100
    ga_mutation_rate: float = 0.1
    seed: Optional[int] = None           # stochastic strategies only

    def validate(self):
        if self.start_city < 0:
            raise ValueError("start_city must be non-negative.")
        if self.sonar_grid_size <= 0:
            raise ValueError("sonar_grid_size must be positive.")
        if self.two_opt_max_iterations < 0 or self.sa_iterations < 0 or self.ga_generations < 0:
            raise ValueError("iteration counts must be non-negative.")
        if self.sa_initial_temperature <= 0:
            raise ValueError("sa_initial_temperature must be positive.")
        if not 0.0 < self.sa_cooling_rate <= 1.0:
            raise ValueError("sa_cooling_rate must be in (0, 1].")
        if self.ga_population_size < 1:
            raise ValueError("ga_population_size must be at least 1.")
        if not 0.0 <= self.ga_mutation_rate <= 1.0:
            raise ValueError("ga_mutation_rate must be in [0, 1].")


@dataclass
class TourResult:
    tour: List[int]
    length: float
    config: StrategyConfig
    elapsed_sec: float


class TourStrategy:
    """A tour producer: ``strategy(points, matrix, n)`` returns a permutation of range(n).

    Subclasses set ``needs_matrix = False`` when they only read point
    coordinates/angles; those get an empty matrix from the harness.
    """
    name = "strategy"
    needs_matrix = True

    def __init__(self, cfg: Optional[StrategyConfig] = None):
        self.cfg = cfg or StrategyConfig()
        self.cfg.validate()

    def __call__(self, points: Sequence[Point], matrix, n: int) -> List[int]:
        if n < 0:
            raise ValueError("n must be non-negative.")
        if n == 0:
            return []
        if n == 1:
            return [0]
        return self.generate_tour(points, matrix, n)

    def generate_tour(self, points: Sequence[Point], matrix, n: int) -> List[int]:
        raise NotImplementedError

    def run(self, instance: TSPInstance) -> TourResult:
        n = instance.n_cities()
        D = instance.distance_matrix()
        start = time.perf_counter()
        tour = self(instance.points, D if self.needs_matrix else D[:0, :0], n)
        elapsed = time.perf_counter() - start
        return TourResult(tour=tour, length=tour_length(tour, D), config=self.cfg, elapsed_sec=elapsed)

    def __repr__(self):
        return f"{type(self).__name__}()"


class ImprovementStrategy(TourStrategy):
    """Improves the tour produced by ``initial``; never returns a longer tour."""

    def __init__(self, initial: Optional[TourStrategy] = None, cfg: Optional[StrategyConfig] = None):
        super().__init__(cfg)
        if initial is None:
            from .construction import NearestNeighbor
            initial = NearestNeighbor(self.cfg)
        self.initial = initial

    @property
    def needs_matrix(self) -> bool:
        return self.uses_matrix or self.initial.needs_matrix

    uses_matrix = True

    def generate_tour(self, points, matrix, n):
        tour = self.initial(points, matrix, n)
        return self.improve(tour, points, matrix)

    def improve(self, tour: List[int], points: Sequence[Point], matrix) -> List[int]:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(initial={self.initial!r})"
