from __future__ import annotations
import itertools
import random
from typing import List, Optional, Sequence

import numpy as np

from .base import TourStrategy
from .tsp import tour_length


def random_tour(n: int, rng: random.Random) -> List[int]:
    tour = list(range(n))
    rng.shuffle(tour)
    return tour


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], rng: random.Random) -> List[int]:
    """OX: keep a random slice of parent1, fill the rest in parent2 order."""
    n = len(parent1)
    start = rng.randrange(n)
    end = start + rng.randrange(n - start)
    child = [-1] * n
    child[start:end + 1] = parent1[start:end + 1]
    used = set(child[start:end + 1])
    idx = (end + 1) % n
    for k in range(n):
        city = parent2[(end + 1 + k) % n]
        if city not in used:
            child[idx] = city
            idx = (idx + 1) % n
    return child


def swap_mutation(tour: Sequence[int], rng: random.Random) -> List[int]:
    mutated = list(tour)
    i, j = rng.randrange(len(tour)), rng.randrange(len(tour))
    mutated[i], mutated[j] = mutated[j], mutated[i]
    return mutated


def roulette_select(population, cum_fitness: List[float], rng: random.Random):
    return rng.choices(population, cum_weights=cum_fitness, k=1)[0]


def genetic_algorithm(matrix, n: int, population_size: int = 50, generations: int = 100,
                      mutation_rate: float = 0.1, rng: Optional[random.Random] = None) -> List[int]:
    rng = rng or random.Random()
    d = np.asarray(matrix, dtype=float)
    if n < 2:
        return list(range(n))
    population = [random_tour(n, rng) for _ in range(population_size)]

    for _ in range(generations):
        lengths = [tour_length(t, d) for t in population]
        fitness = [1.0 / max(L, 1e-12) for L in lengths]
        cum_fitness = list(itertools.accumulate(fitness))
        elite = population[min(range(population_size), key=lambda k: lengths[k])]

        next_population = [elite]
        while len(next_population) < population_size:
            p1 = roulette_select(population, cum_fitness, rng)
            p2 = roulette_select(population, cum_fitness, rng)
            child = order_crossover(p1, p2, rng)
            if rng.random() < mutation_rate:
                child = swap_mutation(child, rng)
            next_population.append(child)
        population = next_population

    return min(population, key=lambda t: tour_length(t, d))


class GeneticAlgorithm(TourStrategy):
    """Roulette selection, order crossover, swap mutation, one elite."""
    name = "GeneticAlgorithm"

    def generate_tour(self, points, matrix, n):
        cfg = self.cfg
        return genetic_algorithm(matrix, n, cfg.ga_population_size, cfg.ga_generations,
                                 cfg.ga_mutation_rate, rng=random.Random(cfg.seed))
