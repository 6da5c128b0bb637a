import pytest

from tspbench.base import TourStrategy
from tspbench.capacity import (BenchmarkResult, find_max_n, make_instance, next_probe_size,
                               strategy_timer)
from tspbench.construction import AngularSort, NearestNeighbor
from tspbench.experiments import (BenchmarkCase, default_cases, rank_results, run_capacity_benchmark,
                                  select_cases)


def linear_cost(per_item):
    calls = []

    def measure(n):
        calls.append(n)
        return n * per_item
    measure.calls = calls
    return measure


class TestProbeSizing:
    @pytest.mark.parametrize("n, elapsed, expected", [
        (10, 0.05, 20),     # < 1% of budget: double
        (10, 0.5, 15),      # < 10%: grow by half
        (11, 0.5, 17),      # rounds up
        (10, 5.0, 11),      # otherwise: one more
    ])
    def test_tiers(self, n, elapsed, expected):
        assert next_probe_size(n, elapsed, 10.0, 1000) == expected

    def test_clamped_to_max(self):
        assert next_probe_size(600, 0.0, 10.0, 1000) == 1000

    def test_forces_progress(self):
        assert next_probe_size(1000, 0.0, 10.0, 1000) == 1001
        assert next_probe_size(1, 0.5, 10.0, 1000) == 2


class TestFindMaxN:
    @pytest.mark.parametrize("per_item, timeout, expected", [
        (0.001, 1.0005, 1000),
        (0.003, 1.0, 333),
        (0.01, 0.505, 50),
        (0.1, 1.05, 10),
    ])
    def test_boundary_for_monotone_cost(self, per_item, timeout, expected):
        measure = linear_cost(per_item)
        res = find_max_n("linear", measure, 4, 100_000, timeout)
        assert res.max_n == expected
        assert measure(res.max_n) <= timeout
        assert measure(res.max_n + 1) > timeout

    def test_reports_verification_time(self):
        res = find_max_n("linear", linear_cost(0.001), 4, 100_000, 1.0005)
        assert res.elapsed_sec == pytest.approx(1.0)
        assert res.time_ms == pytest.approx(1000.0)
        assert res.error is None

    def test_stops_at_max(self):
        measure = linear_cost(1e-6)
        res = find_max_n("fast", measure, 10, 500, 1.0)
        assert res.max_n == 500
        assert max(measure.calls) == 500

    def test_superlinear_cost(self):
        res = find_max_n("cubic", lambda n: (n / 100) ** 3, 4, 10_000, 8.0)
        assert res.max_n == 200

    def test_first_probe_too_slow(self):
        res = find_max_n("slow", lambda n: 5.0, 4, 100, 1.0)
        assert res.max_n == 0
        assert res.elapsed_sec == 5.0

    def test_bisects_after_overshoot(self):
        probes = []
        res = find_max_n("step", lambda n: 0.0 if n <= 300 else 2.0, 4, 100_000, 1.0,
                         on_probe=probes.append)
        assert res.max_n == 300
        phases = [p.phase for p in probes]
        assert phases[0] == "grow"
        assert phases[-1] == "verify"
        assert "search" in phases
        assert [p.n for p in probes if p.phase == "grow"] == [4, 8, 16, 32, 64, 128, 256, 512]
        assert all(p.feasible == (p.elapsed_sec <= 1.0) for p in probes)
        assert all(256 < p.n < 512 for p in probes if p.phase == "search")

    def test_growth_doubles_while_cheap(self):
        measure = linear_cost(1e-5)
        find_max_n("linear", measure, 4, 100_000, 1.0)
        assert measure.calls[:4] == [4, 8, 16, 32]

    @pytest.mark.parametrize("min_n, max_n, timeout", [(0, 10, 1.0), (20, 10, 1.0), (1, 10, -1.0)])
    def test_invalid_arguments(self, min_n, max_n, timeout):
        with pytest.raises(ValueError):
            find_max_n("bad", linear_cost(0.1), min_n, max_n, timeout)


class CountingStrategy(TourStrategy):
    name = "Counting"
    needs_matrix = False

    def __init__(self):
        super().__init__()
        self.seen = []

    def generate_tour(self, points, matrix, n):
        self.seen.append((len(points), matrix.shape))
        return list(range(n))


class Exploding(TourStrategy):
    name = "Exploding"

    def generate_tour(self, points, matrix, n):
        raise RuntimeError("boom")


class TestStrategyTimer:
    def test_skips_matrix_when_not_needed(self):
        strategy = CountingStrategy()
        elapsed = strategy_timer(strategy)(25)
        assert elapsed >= 0
        assert strategy.seen == [(25, (0, 0))]

    def test_instances_are_reproducible(self):
        assert make_instance(30).points == make_instance(30).points


class TestRunCapacityBenchmark:
    def test_ranks_and_captures_errors(self):
        cases = [
            BenchmarkCase("small", CountingStrategy(), 2, 8),
            BenchmarkCase("broken", Exploding(), 4, 8),
            BenchmarkCase("large", AngularSort(), 10, 40),
        ]
        seen = []
        results = run_capacity_benchmark(cases, timeout=5, on_result=seen.append)
        assert [r.name for r in results] == ["large", "small", "broken"]
        assert [r.max_n for r in results] == [40, 8, 0]
        assert results[2].error == "RuntimeError: boom"
        assert [r.name for r in seen] == ["small", "broken", "large"]

    def test_rank_is_stable(self):
        results = [BenchmarkResult("a", 5, 0.1), BenchmarkResult("b", 9, 0.1), BenchmarkResult("c", 5, 0.2)]
        assert [r.name for r in rank_results(results)] == ["b", "a", "c"]

    def test_real_strategy_within_budget(self):
        cases = [BenchmarkCase("NearestNeighbor", NearestNeighbor(), 10, 80)]
        (res,) = run_capacity_benchmark(cases, timeout=5)
        assert res.max_n == 80
        assert res.error is None


class TestDefaultCases:
    def test_suite(self):
        cases = default_cases()
        assert len(cases) == 10
        assert all(1 <= c.min_n <= c.max_n for c in cases)
        by_name = {c.name: c for c in cases}
        assert by_name["BruteForce (bruteForceExact)"].max_n == 11
        assert by_name["BruteForce (heldKarp)"].max_n == 20
        assert not by_name["SonarVisit"].strategy.needs_matrix
        assert not by_name["Zigzag (with AngularSort)"].strategy.needs_matrix

    def test_select(self):
        cases = default_cases()
        assert [c.name for c in select_cases(cases, ["sonar"])] == ["SonarVisit"]
        assert len(select_cases(cases, ["bruteforce"])) == 2
        assert len(select_cases(cases, [])) == 10
