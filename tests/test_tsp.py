import math

import numpy as np
import pytest

from tspbench.tsp import (Point, TSPInstance, build_distance_matrix, distance, efficiency,
                          generate_normalized_points, grid_size_for, is_valid_tour,
                          mst_lower_bound, tour_length)


class TestGeometry:
    def test_distance(self):
        assert distance(Point(0, 0, 0, 0), Point(3, 4, 0, 1)) == 5
        assert distance(Point(0, 0, 0, 0), Point(0, 0, 0, 1)) == 0
        assert distance(Point(0, 0, 0, 0), Point(1, 1, 0, 1)) == pytest.approx(math.sqrt(2))

    def test_distance_matrix_is_symmetric_with_zero_diagonal(self, medium_instance):
        D = medium_instance.distance_matrix()
        assert D.shape == (60, 60)
        assert np.array_equal(D, D.T)
        assert np.all(np.diag(D) == 0)
        assert np.all(D >= 0)
        assert D[3, 17] == pytest.approx(medium_instance.distance(3, 17))

    def test_empty_matrix(self):
        assert build_distance_matrix([]).shape == (0, 0)

    def test_non_finite_coordinates_rejected(self):
        inst = TSPInstance.from_coords([(0.0, 0.0), (float("nan"), 1.0)])
        with pytest.raises(ValueError):
            inst.distance_matrix()

    def test_tour_length_closes_cycle(self, square):
        D = square.distance_matrix()
        assert tour_length([0, 1, 2, 3], D) == pytest.approx(4.0)
        assert tour_length([0, 2, 1, 3], D) == pytest.approx(2 + 2 * math.sqrt(2))
        assert square.tour_length([0, 1, 2, 3]) == pytest.approx(4.0)

    def test_mst_lower_bound(self, square, medium_instance):
        assert mst_lower_bound(square.distance_matrix()) == pytest.approx(3.0)
        assert mst_lower_bound(np.zeros((1, 1))) == 0.0
        D = medium_instance.distance_matrix()
        assert mst_lower_bound(D) <= tour_length(list(range(60)), D)

    def test_efficiency(self):
        assert efficiency(4, 4) == 100
        assert efficiency(5, 4) == 80
        assert efficiency(0, 4) == 0

    def test_is_valid_tour(self):
        assert is_valid_tour([2, 0, 1], 3)
        assert not is_valid_tour([0, 0, 1], 3)
        assert not is_valid_tour([0, 1], 3)


class TestPointGeneration:
    def test_points_in_range(self):
        points = generate_normalized_points(10, 20, 12345)
        assert len(points) == 10
        assert [p.id for p in points] == list(range(10))
        for p in points:
            assert 0 <= p.x <= 1 and 0 <= p.y <= 1
            assert 0 <= p.angle < 2 * math.pi
            assert math.hypot(p.x - 0.5, p.y - 0.5) <= 0.45 + 1e-12

    def test_same_seed_same_points(self):
        assert generate_normalized_points(50, 40, 12345) == generate_normalized_points(50, 40, 12345)

    def test_positions_are_distinct(self):
        points = generate_normalized_points(500, 40, 1)
        assert len({(p.x, p.y) for p in points}) == 500

    def test_grid_too_small(self):
        with pytest.raises(ValueError):
            generate_normalized_points(1000, 10)

    @pytest.mark.parametrize("n, grid", [(1, 40), (400, 40), (1600, 80), (250_000, 1000)])
    def test_grid_size_for(self, n, grid):
        assert grid_size_for(n) == grid

    def test_point_is_immutable(self):
        p = generate_normalized_points(1)[0]
        with pytest.raises(AttributeError):
            p.angle = 0.0
