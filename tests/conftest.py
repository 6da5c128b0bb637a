import pytest

from tspbench.tsp import TSPInstance

SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def square():
    return TSPInstance.from_coords(SQUARE, name="square")


@pytest.fixture
def small_instance():
    return TSPInstance.random_normalized(9, grid_size=20, seed=42)


@pytest.fixture
def medium_instance():
    return TSPInstance.random_normalized(60, seed=7)
