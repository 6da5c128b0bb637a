from __future__ import annotations
import math
from operator import attrgetter
from typing import Dict, List

import numpy as np

from .base import TourStrategy
from .tsp import CENTER


class NearestNeighbor(TourStrategy):
    """Greedy walk to the closest unvisited city, O(n^2)."""
    name = "NearestNeighbor"

    def generate_tour(self, points, matrix, n):
        D = np.asarray(matrix, dtype=float)
        current = self.cfg.start_city % n
        visited = np.zeros(n, dtype=bool)
        visited[current] = True
        tour = [current]
        for _ in range(n - 1):
            row = D[current].copy()
            row[visited] = np.inf
            current = int(np.argmin(row))  # first index wins on ties
            visited[current] = True
            tour.append(current)
        return tour


class GreedyEdge(TourStrategy):
    """Shortest edges first, subject to degree <= 2 and no premature cycle."""
    name = "GreedyEdge"

    def generate_tour(self, points, matrix, n):
        D = np.asarray(matrix, dtype=float)
        rows, cols = np.triu_indices(n, k=1)
        order = np.argsort(D[rows, cols], kind="stable")

        parent = list(range(n))

        def find(x):
            while parent[x] != x:
                parent[x] = parent[parent[x]]
                x = parent[x]
            return x

        degree = [0] * n
        adj: List[List[int]] = [[] for _ in range(n)]
        edges = 0
        for k in order:
            if edges >= n:
                break
            a, b = int(rows[k]), int(cols[k])
            if degree[a] >= 2 or degree[b] >= 2:
                continue
            ra, rb = find(a), find(b)
            # the closing edge is the only one allowed to join a component to itself
            if ra == rb and edges < n - 1:
                continue
            parent[ra] = rb
            adj[a].append(b)
            adj[b].append(a)
            degree[a] += 1
            degree[b] += 1
            edges += 1

        # the closing edge may already have been passed over, leaving a path;
        # walk it from one of its ends
        current = next((v for v in range(n) if degree[v] < 2), 0)
        tour = [current]
        visited = [False] * n
        visited[current] = True
        while len(tour) < n:
            nxt = next((j for j in adj[current] if not visited[j]), None)
            if nxt is None:
                break
            visited[nxt] = True
            tour.append(nxt)
            current = nxt
        return tour


class AngularSort(TourStrategy):
    """Visit points in order of polar angle; O(n log n) baseline."""
    name = "AngularSort"
    needs_matrix = False

    def generate_tour(self, points, matrix, n):
        return [p.id for p in sorted(points, key=attrgetter("angle"))]


def sonar_buckets(points, grid_size: int = 40, center=CENTER) -> Dict[int, list]:
    """Assign points to 4 * grid_size equal angular buckets, each sorted by radius."""
    steps = 4 * grid_size
    width = 2 * math.pi / steps
    buckets: Dict[int, list] = {}
    for p in points:
        angle = p.angle % (2 * math.pi)
        buckets.setdefault(min(int(angle / width), steps - 1), []).append(p)
    cx, cy = center
    for bucket in buckets.values():
        bucket.sort(key=lambda p: (math.hypot(p.x - cx, p.y - cy), p.angle))
    return buckets


class SonarSweep(TourStrategy):
    """Sweep a ray around the centre in fixed angle steps, outwards within a step."""
    name = "SonarVisit"
    needs_matrix = False

    def generate_tour(self, points, matrix, n):
        grid = self.cfg.sonar_grid_size
        buckets = sonar_buckets(points, grid)
        tour = []
        for b in range(4 * grid):
            if b in buckets:
                tour.extend(p.id for p in buckets[b])
        return tour
