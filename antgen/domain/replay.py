"""Reference turmite executor for compiled programs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from antgen.config.constants import HALT_STATE
from antgen.domain.grid import GridContext
from antgen.domain.metric import Point
from antgen.domain.program import RuleProgram


class HaltReason(Enum):
    """Why a replay stopped."""

    HALT_STATE = "halt_state"
    MISSING_STATE = "missing_state"
    MAX_STEPS = "max_steps"


@dataclass(frozen=True)
class ReplayResult:
    position: Point
    steps: int
    state: int
    halted_by: HaltReason
    trail: tuple[Point, ...]


def replay_program(
    program: RuleProgram,
    grid: GridContext,
    start: Point,
    start_state: int = 0,
    max_steps: int = 1_000_000,
) -> ReplayResult:
    """Run *program* on *grid* from *start*, painting as it goes.

    Only the first rule of each state is used. Replaying a compiled program on
    a blank copy of its source grid repaints every cell the tour visits.
    """
    if max_steps < 0:
        raise ValueError("max_steps must be >= 0")
    position = grid.check_cords(start)
    state = start_state
    trail = [position]
    steps = 0
    while True:
        if state == HALT_STATE:
            reason = HaltReason.HALT_STATE
            break
        if state not in program:
            reason = HaltReason.MISSING_STATE
            break
        if steps >= max_steps:
            reason = HaltReason.MAX_STEPS
            break
        rule = program[state][0]
        grid.set(position, rule.write_color)
        position = grid.metric.step(position, rule.move)
        trail.append(position)
        state = rule.next_state
        steps += 1
    return ReplayResult(
        position=position, steps=steps, state=state, halted_by=reason, trail=tuple(trail)
    )
