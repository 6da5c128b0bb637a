from .tsp import Point, TSPInstance, distance, build_distance_matrix, tour_length, mst_lower_bound
from .base import StrategyConfig, TourStrategy, ImprovementStrategy
from .construction import NearestNeighbor, GreedyEdge, AngularSort, SonarSweep
from .local_search import TwoOpt, Zigzag
from .annealing import SimulatedAnnealing
from .genetic import GeneticAlgorithm
from .exact import BruteForce, HeldKarp, brute_force_exact, held_karp, find_optimal
from .capacity import BenchmarkResult, find_max_n
from .experiments import BenchmarkCase, default_cases, run_capacity_benchmark
