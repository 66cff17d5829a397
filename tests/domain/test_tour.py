"""Tests for antgen.domain.tour module."""

from __future__ import annotations

from random import Random

import pytest

from antgen.config.types import TwoOptMode
from antgen.domain.metric import Point, ToroidalMetric
from antgen.domain.tour import (
    construct_greedy_tour,
    expand_moves,
    plan_tour,
    two_opt,
)

ORIGIN = Point(0, 0)
CORNERS = [Point(1, 1), Point(1, 8), Point(8, 1)]


def _random_points(rng: Random, n: int, size: int) -> list[Point]:
    return [Point(rng.randrange(size), rng.randrange(size)) for _ in range(n)]


class TestConstructGreedyTour:
    def test_scenario_visits_nearest_first(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        tour = construct_greedy_tour(CORNERS, ORIGIN, ORIGIN, metric)
        # (1,8) and (8,1) tie at distance 3 from (1,1); first encountered wins
        assert tour == [ORIGIN, Point(1, 1), Point(1, 8), Point(8, 1), ORIGIN]

    def test_endpoints_excluded_from_interior(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        start, end = Point(2, 2), Point(5, 5)
        tour = construct_greedy_tour([start, Point(3, 3), end], start, end, metric)
        assert tour == [start, Point(3, 3), end]

    def test_duplicates_visited_once(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        tour = construct_greedy_tour([Point(3, 3), Point(3, 3)], ORIGIN, ORIGIN, metric)
        assert tour == [ORIGIN, Point(3, 3), ORIGIN]

    def test_empty_points_gives_direct_path(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        assert construct_greedy_tour([], ORIGIN, Point(4, 4), metric) == [ORIGIN, Point(4, 4)]

    def test_tour_invariants_on_random_input(self) -> None:
        rng = Random(3)
        metric = ToroidalMetric(cols=30, rows=20)
        points = _random_points(rng, 60, 20)
        start, end = Point(0, 0), Point(29, 19)
        tour = construct_greedy_tour(points, start, end, metric)
        interior = tour[1:-1]
        assert tour[0] == start and tour[-1] == end
        assert len(interior) == len(set(interior))
        assert set(interior) == set(points) - {start, end}


class TestTwoOpt:
    def test_scenario_improves_greedy_tour(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        tour = construct_greedy_tour(CORNERS, ORIGIN, ORIGIN, metric)
        assert metric.path_length(tour) == 14
        stats = two_opt(tour, metric)
        assert stats.swaps == 1
        assert tour == [ORIGIN, Point(1, 8), Point(1, 1), Point(8, 1), ORIGIN]
        assert metric.path_length(tour) == 12

    def test_endpoints_pinned(self) -> None:
        rng = Random(11)
        metric = ToroidalMetric(cols=25, rows=25)
        start, end = Point(3, 4), Point(20, 7)
        tour = construct_greedy_tour(_random_points(rng, 40, 25), start, end, metric)
        two_opt(tour, metric)
        assert tour[0] == start and tour[-1] == end

    @pytest.mark.parametrize("mode", list(TwoOptMode))
    def test_never_worse_than_greedy(self, mode: TwoOptMode) -> None:
        rng = Random(5)
        for looping in (True, False):
            metric = ToroidalMetric(cols=20, rows=20, looping=looping)
            greedy = construct_greedy_tour(_random_points(rng, 25, 20), ORIGIN, ORIGIN, metric)
            tour = list(greedy)
            two_opt(tour, metric, mode)
            assert metric.path_length(tour) <= metric.path_length(greedy)
            assert sorted(tour, key=lambda p: (p.x, p.y)) == sorted(
                greedy, key=lambda p: (p.x, p.y)
            )

    @pytest.mark.parametrize("mode", list(TwoOptMode))
    def test_idempotent_on_own_output(self, mode: TwoOptMode) -> None:
        rng = Random(8)
        metric = ToroidalMetric(cols=16, rows=16)
        tour = construct_greedy_tour(_random_points(rng, 30, 16), ORIGIN, Point(8, 8), metric)
        two_opt(tour, metric, mode)
        again = list(tour)
        stats = two_opt(again, metric, mode)
        assert stats.swaps == 0
        assert again == tour

    def test_detailed_mode_keeps_accepted_swaps(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        tour = construct_greedy_tour(CORNERS, ORIGIN, ORIGIN, metric)
        stats = two_opt(tour, metric, TwoOptMode.DETAILED)
        assert stats.swaps >= 1
        assert len(expand_moves(tour, metric)) == 12

    def test_short_tours_untouched(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        tour = [ORIGIN, Point(5, 5), ORIGIN]
        stats = two_opt(tour, metric)
        assert stats.swaps == 0 and stats.passes == 0
        assert tour == [ORIGIN, Point(5, 5), ORIGIN]


class TestExpandMoves:
    def test_length_matches_path_length(self) -> None:
        rng = Random(2)
        metric = ToroidalMetric(cols=13, rows=9)
        tour = construct_greedy_tour(_random_points(rng, 20, 9), ORIGIN, Point(12, 8), metric)
        assert len(expand_moves(tour, metric)) == metric.path_length(tour)


class TestPlanTour:
    def test_reports_lengths_and_timings(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        plan = plan_tour(CORNERS, ORIGIN, ORIGIN, metric)
        assert plan.greedy_length == 14
        assert plan.length == 12
        assert plan.optimized
        assert plan.greedy_ms >= 0.0 and plan.two_opt_ms >= 0.0

    def test_optimize_false_keeps_greedy(self) -> None:
        metric = ToroidalMetric(cols=10, rows=10)
        plan = plan_tour(CORNERS, ORIGIN, ORIGIN, metric, optimize=False)
        assert plan.length == plan.greedy_length == 14
        assert not plan.optimized
        assert plan.two_opt_ms == 0.0

    def test_falls_back_to_greedy_when_optimizer_fails(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import antgen.domain.tour as tour_module

        def _boom(*_args: object, **_kwargs: object) -> None:
            raise RuntimeError("optimizer exploded")

        monkeypatch.setattr(tour_module, "two_opt", _boom)
        metric = ToroidalMetric(cols=10, rows=10)
        plan = plan_tour(CORNERS, ORIGIN, ORIGIN, metric)
        assert not plan.optimized
        assert plan.tour == [ORIGIN, Point(1, 1), Point(1, 8), Point(8, 1), ORIGIN]
