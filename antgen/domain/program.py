"""Compile a tour into a turmite rule program.

Each unit move becomes one state whose single rule writes back the color of
the cell the ant is standing on (read before the ant moves), steps one cell
and hands over to the next state. A two-rule epilogue then steps away from
the end cell and back so the ant finishes on it facing the requested heading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from antgen.config.constants import HALT_STATE
from antgen.config.types import CompileConfig, Heading
from antgen.domain.grid import GridContext
from antgen.domain.metric import Move, Point, ToroidalMetric, axis_moves
from antgen.domain.tour import TourPlan, plan_tour
from antgen.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

# heading -> ((move, dx, dy), (move, dx, dy)); offsets are relative to the end cell
EPILOGUE_TABLE: dict[Heading, tuple[tuple[Move, int, int], tuple[Move, int, int]]] = {
    Heading.RIGHT: ((Move.NEGATIVE_X, 0, 0), (Move.POSITIVE_X, -1, 0)),
    Heading.LEFT: ((Move.POSITIVE_X, 0, 0), (Move.NEGATIVE_X, 1, 0)),
    Heading.UP: ((Move.POSITIVE_Y, 0, 0), (Move.NEGATIVE_Y, 0, 1)),
    Heading.DOWN: ((Move.NEGATIVE_Y, 0, 0), (Move.POSITIVE_Y, 0, -1)),
}


@dataclass(frozen=True)
class Rule:
    """One turmite transition."""

    write_color: int
    move: Move
    next_state: int


@dataclass
class RuleProgram:
    """Mapping from state to its rules, in insertion order."""

    rules: dict[int, list[Rule]] = field(default_factory=dict)

    def add_move_rule(self, state: int, write_color: int, move: Move, next_state: int) -> None:
        self.rules.setdefault(state, []).append(
            Rule(write_color=write_color, move=move, next_state=next_state)
        )

    def last_state(self) -> int | None:
        return next(reversed(self.rules), None)

    def halt_after_last(self) -> None:
        """Point the final emitted rule at the halt sentinel."""
        state = self.last_state()
        if state is None:
            return
        last_rule = self.rules[state][-1]
        self.rules[state][-1] = Rule(
            write_color=last_rule.write_color, move=last_rule.move, next_state=HALT_STATE
        )

    def rule_count(self) -> int:
        return sum(len(rules) for rules in self.rules.values())

    def __len__(self) -> int:
        return len(self.rules)

    def __getitem__(self, state: int) -> list[Rule]:
        return self.rules[state]

    def __contains__(self, state: object) -> bool:
        return state in self.rules


@dataclass(frozen=True)
class CompileResult:
    """Program plus bookkeeping from one compilation."""

    program: RuleProgram
    next_state: int
    tour: list[Point]
    path_moves: int
    epilogue_moves: int
    empty: bool = False
    plan: TourPlan | None = None


def parse_heading(raw: Heading | str) -> Heading:
    """Parse a heading name into a Heading enum."""
    if isinstance(raw, Heading):
        return raw
    try:
        return Heading(raw)
    except ValueError as exc:
        valid = ", ".join(heading.value for heading in Heading)
        raise InvalidArgumentError(f"heading must be one of {valid}, got {raw!r}") from exc


def _require_point(value: object, name: str) -> Point:
    if not isinstance(value, Point):
        raise InvalidArgumentError(f"{name} must be a Point, got {value!r}")
    return value


def _check_epilogue_reachable(end: Point, heading: Heading, grid: GridContext) -> None:
    """On a bounded grid the epilogue must be able to step off *end* and back."""
    if grid.config.looping:
        return
    _move, dx, dy = EPILOGUE_TABLE[heading][1]
    if grid.check_cords(end.offset(dx, dy)) == end:
        raise InvalidArgumentError(
            f"heading {heading.value} cannot be reached at edge cell ({end.x}, {end.y}) "
            "of a non-looping grid"
        )


def _emit_path(
    program: RuleProgram,
    tour: list[Point],
    grid: GridContext,
    metric: ToroidalMetric,
    state: int,
) -> int:
    for i in range(len(tour) - 1):
        position = tour[i]
        for move in axis_moves(metric.distance_and_delta(tour[i], tour[i + 1])):
            color = grid.get(position)
            program.add_move_rule(state, color, move, state + 1)
            position = metric.step(position, move)
            state += 1
    return state


def _emit_epilogue(
    program: RuleProgram, end: Point, heading: Heading, grid: GridContext, state: int
) -> int:
    for move, dx, dy in EPILOGUE_TABLE[heading]:
        color = grid.get(grid.check_cords(end.offset(dx, dy)))
        program.add_move_rule(state, color, move, state + 1)
        state += 1
    return state


def compile_tour(
    tour: list[Point],
    grid: GridContext,
    heading: Heading | str = Heading.RIGHT,
    state_offset: int = 0,
    stop_after_done: bool = False,
) -> CompileResult:
    """Emit one rule per unit move along *tour*, then the heading epilogue."""
    heading = parse_heading(heading)
    if not tour:
        raise InvalidArgumentError("tour must contain at least the end point")
    if state_offset < 0:
        raise InvalidArgumentError("state_offset must be >= 0")
    metric = grid.metric
    tour = [grid.check_cords(_require_point(point, "tour point")) for point in tour]
    _check_epilogue_reachable(tour[-1], heading, grid)

    program = RuleProgram()
    state = _emit_path(program, tour, grid, metric, state_offset)
    path_moves = state - state_offset
    state = _emit_epilogue(program, tour[-1], heading, grid, state)
    if stop_after_done:
        program.halt_after_last()
    return CompileResult(
        program=program,
        next_state=state,
        tour=tour,
        path_moves=path_moves,
        epilogue_moves=state - state_offset - path_moves,
    )


def compile_grid(
    grid: GridContext,
    start: Point | None = None,
    end: Point | None = None,
    heading: Heading | str = Heading.RIGHT,
    config: CompileConfig | None = None,
) -> CompileResult:
    """Full pipeline: painted cells -> greedy tour -> 2-opt -> rule program.

    *start* and *end* default to the grid centre. A grid with no painted cells
    compiles to the epilogue alone.
    """
    config = config or CompileConfig()
    heading = parse_heading(heading)
    start = grid.check_cords(
        _require_point(start, "start") if start is not None else grid.default_start()
    )
    end = grid.check_cords(_require_point(end, "end") if end is not None else grid.default_start())
    _check_epilogue_reachable(end, heading, grid)

    points = grid.dirty_points()
    if not points:
        logger.info("no painted cells; emitting epilogue only")
        result = compile_tour(
            [end],
            grid,
            heading=heading,
            state_offset=config.state_offset,
            stop_after_done=config.stop_after_done,
        )
        return CompileResult(
            program=result.program,
            next_state=result.next_state,
            tour=[],
            path_moves=0,
            epilogue_moves=result.epilogue_moves,
            empty=True,
        )

    plan = plan_tour(
        points, start, end, grid.metric, mode=config.two_opt_mode, optimize=config.optimize
    )
    result = compile_tour(
        plan.tour,
        grid,
        heading=heading,
        state_offset=config.state_offset,
        stop_after_done=config.stop_after_done,
    )
    logger.info(
        "compiled %d painted cells into %d rules (tour length %d, greedy %d)",
        len(points),
        result.program.rule_count(),
        plan.length,
        plan.greedy_length,
    )
    return CompileResult(
        program=result.program,
        next_state=result.next_state,
        tour=result.tour,
        path_moves=result.path_moves,
        epilogue_moves=result.epilogue_moves,
        plan=plan,
    )
