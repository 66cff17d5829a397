"""Toroidal (or clamped) Manhattan geometry on a cols x rows grid.

Moves are axis-aligned unit steps only, so the cost of travelling between two
cells is the L1 norm of the shortest signed displacement on each axis.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from antgen.errors import InvalidArgumentError


@dataclass(frozen=True)
class Point:
    """Grid coordinate."""

    x: int
    y: int

    def __post_init__(self) -> None:
        for value in (self.x, self.y):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"point coordinates must be integers, got {value!r}")

    def offset(self, dx: int, dy: int) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Displacement:
    """Signed per-axis travel and its Manhattan length."""

    dist: int
    dx: int
    dy: int


class Move(Enum):
    """Axis-aligned unit step; values are the wire symbols."""

    POSITIVE_X = ">"
    NEGATIVE_X = "<"
    POSITIVE_Y = "v"
    NEGATIVE_Y = "^"

    @property
    def step(self) -> tuple[int, int]:
        return _MOVE_STEPS[self]


_MOVE_STEPS: dict[Move, tuple[int, int]] = {
    Move.POSITIVE_X: (1, 0),
    Move.NEGATIVE_X: (-1, 0),
    Move.POSITIVE_Y: (0, 1),
    Move.NEGATIVE_Y: (0, -1),
}


def axis_moves(displacement: Displacement) -> list[Move]:
    """Unit moves covering *displacement*, all x moves before any y move."""
    x_move = Move.POSITIVE_X if displacement.dx > 0 else Move.NEGATIVE_X
    y_move = Move.POSITIVE_Y if displacement.dy > 0 else Move.NEGATIVE_Y
    return [x_move] * abs(displacement.dx) + [y_move] * abs(displacement.dy)


def delta(p1: int, p2: int, size: int) -> int:
    """Shortest signed displacement from *p1* to *p2* on an axis of *size* cells.

    Ties at exactly half the axis resolve to the positive direction.
    """
    d = (p2 - p1 + size) % size
    if d > size / 2:
        d -= size
    return d


def parse_point(raw: str) -> Point:
    """Parse ``"X,Y"`` into a Point."""
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2:
        raise InvalidArgumentError(f"point must use X,Y format, got {raw!r}")
    try:
        return Point(int(parts[0]), int(parts[1]))
    except ValueError as exc:
        raise InvalidArgumentError(f"point must use integer X,Y values, got {raw!r}") from exc


@dataclass(frozen=True)
class ToroidalMetric:
    """Distance model for one grid; ``looping`` is fixed for its lifetime."""

    cols: int
    rows: int
    looping: bool = True

    def __post_init__(self) -> None:
        if self.cols < 1 or self.rows < 1:
            raise InvalidArgumentError("grid dimensions must be >= 1")

    def check_cords(self, point: Point) -> Point:
        """Wrap (toroidal) or clamp (bounded) *point* into the grid."""
        if self.looping:
            return Point(point.x % self.cols, point.y % self.rows)
        return Point(
            min(max(point.x, 0), self.cols - 1),
            min(max(point.y, 0), self.rows - 1),
        )

    def distance_and_delta(self, p1: Point, p2: Point) -> Displacement:
        if self.looping:
            dx = delta(p1.x, p2.x, self.cols)
            dy = delta(p1.y, p2.y, self.rows)
        else:
            dx = p2.x - p1.x
            dy = p2.y - p1.y
        return Displacement(dist=abs(dx) + abs(dy), dx=dx, dy=dy)

    def step(self, point: Point, move: Move) -> Point:
        """Cell reached from *point* after one *move*."""
        dx, dy = move.step
        return self.check_cords(point.offset(dx, dy))

    def distance(self, p1: Point, p2: Point) -> int:
        return self.distance_and_delta(p1, p2).dist

    def path_length(self, tour: Sequence[Point]) -> int:
        """Total distance along consecutive tour points (open path)."""
        return sum(self.distance(tour[i], tour[i + 1]) for i in range(len(tour) - 1))
