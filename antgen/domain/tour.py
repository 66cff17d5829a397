"""Visiting-order construction: nearest-neighbor greedy plus 2-opt.

Tours are open paths pinned at both ends: ``tour[0]`` is the start cell and
``tour[-1]`` the end cell. Neither endpoint ever moves during optimization.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from antgen.config.types import TwoOptMode
from antgen.domain.metric import Move, Point, ToroidalMetric, axis_moves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwoOptStats:
    """Work done by one 2-opt run."""

    swaps: int
    passes: int


@dataclass(frozen=True)
class TourPlan:
    """Constructed and optimized tour with per-phase timings in milliseconds."""

    tour: list[Point]
    greedy_length: int
    length: int
    swaps: int
    passes: int
    greedy_ms: float
    two_opt_ms: float
    optimized: bool

    @property
    def total_ms(self) -> float:
        return self.greedy_ms + self.two_opt_ms


def construct_greedy_tour(
    points: Iterable[Point], start: Point, end: Point, metric: ToroidalMetric
) -> list[Point]:
    """Nearest-neighbor path from *start* through every point to *end*.

    Points equal to *start* or *end* are not visited separately. Distance ties
    go to the point encountered first in *points* order.
    """
    remaining: list[Point] = []
    seen: set[Point] = {start, end}
    for point in points:
        if point not in seen:
            seen.add(point)
            remaining.append(point)

    tour = [start]
    current = start
    while remaining:
        best_index = 0
        best_dist = metric.distance(current, remaining[0])
        for index in range(1, len(remaining)):
            dist = metric.distance(current, remaining[index])
            if dist < best_dist:
                best_dist = dist
                best_index = index
        current = remaining.pop(best_index)
        tour.append(current)
    tour.append(end)
    return tour


def expand_moves(tour: list[Point], metric: ToroidalMetric) -> list[Move]:
    """Full unit-move sequence for *tour*, x moves before y moves on each leg."""
    moves: list[Move] = []
    for i in range(len(tour) - 1):
        moves.extend(axis_moves(metric.distance_and_delta(tour[i], tour[i + 1])))
    return moves


def _two_opt_raw(tour: list[Point], metric: ToroidalMetric) -> TwoOptStats:
    dist = metric.distance
    last = len(tour) - 2
    swaps = 0
    passes = 0
    improved = True
    while improved:
        improved = False
        passes += 1
        for i in range(1, last):
            for k in range(i + 1, last + 1):
                a, b, c, d = tour[i - 1], tour[i], tour[k], tour[k + 1]
                if dist(a, c) + dist(b, d) < dist(a, b) + dist(c, d):
                    tour[i : k + 1] = tour[i : k + 1][::-1]
                    swaps += 1
                    improved = True
                    break
            if improved:
                break
    return TwoOptStats(swaps=swaps, passes=passes)


def _two_opt_detailed(tour: list[Point], metric: ToroidalMetric) -> TwoOptStats:
    """Judge each candidate by the length of its fully expanded move sequence.

    The accepted tour and its length are replaced together, so a swap that
    was accepted can never be undone by a later rejected candidate.
    """
    last = len(tour) - 2
    best_len = len(expand_moves(tour, metric))
    swaps = 0
    passes = 0
    improved = True
    while improved:
        improved = False
        passes += 1
        for i in range(1, last):
            for k in range(i + 1, last + 1):
                candidate = tour[:i] + tour[i : k + 1][::-1] + tour[k + 1 :]
                candidate_len = len(expand_moves(candidate, metric))
                if candidate_len < best_len:
                    tour[:] = candidate
                    best_len = candidate_len
                    swaps += 1
                    improved = True
                    break
            if improved:
                break
    return TwoOptStats(swaps=swaps, passes=passes)


def two_opt(
    tour: list[Point], metric: ToroidalMetric, mode: TwoOptMode = TwoOptMode.RAW
) -> TwoOptStats:
    """Improve *tour* in place with first-improvement 2-opt until no swap helps."""
    if len(tour) < 4:
        return TwoOptStats(swaps=0, passes=0)
    if mode == TwoOptMode.DETAILED:
        return _two_opt_detailed(tour, metric)
    return _two_opt_raw(tour, metric)


def plan_tour(
    points: Iterable[Point],
    start: Point,
    end: Point,
    metric: ToroidalMetric,
    mode: TwoOptMode = TwoOptMode.RAW,
    optimize: bool = True,
) -> TourPlan:
    """Build the greedy tour, then 2-opt it, timing both phases."""
    t0 = time.perf_counter()
    greedy = construct_greedy_tour(points, start, end, metric)
    greedy_ms = (time.perf_counter() - t0) * 1000
    greedy_length = metric.path_length(greedy)

    tour = list(greedy)
    stats = TwoOptStats(swaps=0, passes=0)
    optimized = False
    two_opt_ms = 0.0
    if optimize:
        t0 = time.perf_counter()
        try:
            stats = two_opt(tour, metric, mode)
            optimized = True
        except Exception:
            logger.warning(
                "2-opt failed on %d points; using greedy tour", len(greedy) - 2, exc_info=True
            )
            tour = list(greedy)
        two_opt_ms = (time.perf_counter() - t0) * 1000

    length = metric.path_length(tour)
    logger.debug(
        "planned %d points: greedy=%d (%.2fms) 2-opt=%d (%.2fms, %d swaps, %d passes)",
        len(tour) - 2,
        greedy_length,
        greedy_ms,
        length,
        two_opt_ms,
        stats.swaps,
        stats.passes,
    )
    return TourPlan(
        tour=tour,
        greedy_length=greedy_length,
        length=length,
        swaps=stats.swaps,
        passes=stats.passes,
        greedy_ms=greedy_ms,
        two_opt_ms=two_opt_ms,
        optimized=optimized,
    )
