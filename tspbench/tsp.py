from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

CENTER = (0.5, 0.5)
MAX_RADIUS = 0.45
DEFAULT_SEED = 12345


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    angle: float  # polar angle about CENTER, in [0, 2*pi)
    id: int


def distance(p: Point, q: Point) -> float:
    return math.hypot(q.x - p.x, q.y - p.y)


def polar_angle(x: float, y: float, center=CENTER) -> float:
    angle = math.atan2(y - center[1], x - center[0])
    return angle + 2 * math.pi if angle < 0 else angle


def grid_size_for(n: int) -> int:
    """Sampling grid that keeps point density roughly constant as n grows."""
    return max(40, math.ceil(2 * math.sqrt(n)))


def generate_normalized_points(n: int, grid_size: int = 40, seed: Optional[int] = DEFAULT_SEED) -> List[Point]:
    """Pick n distinct grid-cell centres inside the circle of radius 0.45
    around (0.5, 0.5), in a shuffled order fixed by ``seed``."""
    if n < 0:
        raise ValueError("n must be non-negative.")
    if grid_size <= 0:
        raise ValueError("grid_size must be positive.")
    step = 1.0 / grid_size
    cells = (np.arange(grid_size) + 0.5) * step
    gx, gy = np.meshgrid(cells, cells, indexing="ij")
    xs, ys = gx.ravel(), gy.ravel()
    dx, dy = xs - CENTER[0], ys - CENTER[1]
    inside = np.hypot(dx, dy) <= MAX_RADIUS
    xs, ys, dx, dy = xs[inside], ys[inside], dx[inside], dy[inside]
    if n > len(xs):
        raise ValueError(f"grid_size={grid_size} holds only {len(xs)} positions, {n} requested.")

    angles = np.mod(np.arctan2(dy, dx), 2 * np.pi)
    order = np.random.default_rng(seed).permutation(len(xs))[:n]
    return [Point(x=float(xs[k]), y=float(ys[k]), angle=float(angles[k]), id=idx)
            for idx, k in enumerate(order)]


def build_distance_matrix(points: Sequence[Point]) -> np.ndarray:
    n = len(points)
    if n == 0:
        return np.empty((0, 0))
    xs = np.fromiter((p.x for p in points), dtype=float, count=n)
    ys = np.fromiter((p.y for p in points), dtype=float, count=n)
    if not (np.isfinite(xs).all() and np.isfinite(ys).all()):
        raise ValueError("point coordinates must be finite numbers.")
    D = np.subtract.outer(xs, xs)
    np.hypot(D, np.subtract.outer(ys, ys), out=D)
    np.fill_diagonal(D, 0.0)
    return D


def matrix_rows(matrix) -> List[List[float]]:
    """Nested-list view of a distance matrix for tight pure-Python loops."""
    return np.asarray(matrix, dtype=float).tolist()


def tour_length(tour: Sequence[int], matrix) -> float:
    n = len(tour)
    if isinstance(matrix, np.ndarray):
        if n == 0:
            return 0.0
        t = np.asarray(tour, dtype=np.intp)
        return float(matrix[t, np.roll(t, -1)].sum())
    dist = 0.0
    for k in range(n):
        dist += matrix[tour[k]][tour[(k + 1) % n]]
    return float(dist)


def mst_lower_bound(matrix) -> float:
    """Weight of a minimum spanning tree (Prim, rooted at city 0)."""
    D = np.asarray(matrix, dtype=float)
    n = len(D)
    if n <= 1:
        return 0.0
    in_tree = np.zeros(n, dtype=bool)
    in_tree[0] = True
    best = D[0].copy()
    best[0] = np.inf
    weight = 0.0
    for _ in range(n - 1):
        j = int(np.argmin(best))
        weight += best[j]
        in_tree[j] = True
        best = np.minimum(best, D[j])
        best[in_tree] = np.inf
    return float(weight)


def efficiency(solution_length: float, optimal_length: float) -> float:
    """Percentage of optimal achieved; 100 means the solution is optimal."""
    if solution_length <= 0:
        return 0.0
    return optimal_length / solution_length * 100.0


def is_valid_tour(tour: Sequence[int], n: int) -> bool:
    return len(tour) == n and sorted(tour) == list(range(n))


@dataclass
class TSPInstance:
    points: List[Point]
    name: str = "normalized_tsp"

    @staticmethod
    def random_normalized(n: int, grid_size: Optional[int] = None, seed: Optional[int] = DEFAULT_SEED,
                          name: str = "random_normalized"):
        grid = grid_size if grid_size is not None else grid_size_for(n)
        return TSPInstance(points=generate_normalized_points(n, grid, seed), name=name)

    @staticmethod
    def from_coords(coords: Sequence[Sequence[float]], name: str = "euclidean_tsp"):
        points = [Point(x=float(x), y=float(y), angle=polar_angle(x, y), id=i)
                  for i, (x, y) in enumerate(coords)]
        return TSPInstance(points=points, name=name)

    def n_cities(self) -> int:
        return len(self.points)

    def distance(self, i: int, j: int) -> float:
        return distance(self.points[i], self.points[j])

    def distance_matrix(self) -> np.ndarray:
        return build_distance_matrix(self.points)

    def tour_length(self, tour: List[int]) -> float:
        n = len(tour)
        dist = 0.0
        for k in range(n):
            dist += self.distance(tour[k], tour[(k + 1) % n])
        return dist
