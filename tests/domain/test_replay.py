"""Tests for antgen.domain.replay module."""

from __future__ import annotations

from random import Random

import numpy as np
import pytest

from antgen.config.types import CompileConfig, GridConfig, Heading
from antgen.domain.grid import GridContext
from antgen.domain.metric import Move, Point
from antgen.domain.program import RuleProgram, compile_grid
from antgen.domain.replay import HaltReason, replay_program

ORIGIN = Point(0, 0)


def _painted_grid(seed: int, looping: bool = True) -> GridContext:
    rng = Random(seed)
    grid = GridContext.create(GridConfig(cols=14, rows=11, looping=looping))
    for _ in range(25):
        grid.color_point(rng.randrange(14), rng.randrange(11), rng.randint(1, 11))
    return grid


class TestReplayProgram:
    @pytest.mark.parametrize("looping", [True, False])
    def test_blank_replay_reproduces_grid(self, looping: bool) -> None:
        grid = _painted_grid(21, looping=looping)
        end = Point(7, 5)
        result = compile_grid(grid, start=ORIGIN, end=end, heading=Heading.DOWN)
        canvas = grid.blank_copy()
        replay = replay_program(result.program, canvas, ORIGIN)
        assert np.array_equal(canvas.snapshot(), grid.snapshot())
        assert replay.position == end
        assert replay.halted_by is HaltReason.MISSING_STATE
        assert replay.steps == result.program.rule_count()

    def test_halts_on_sentinel(self) -> None:
        grid = _painted_grid(2)
        config = CompileConfig(stop_after_done=True, state_offset=10)
        result = compile_grid(grid, start=ORIGIN, end=ORIGIN, config=config)
        replay = replay_program(result.program, grid.blank_copy(), ORIGIN, start_state=10)
        assert replay.halted_by is HaltReason.HALT_STATE
        assert replay.position == ORIGIN

    def test_max_steps_stops_cycle(self) -> None:
        program = RuleProgram()
        program.add_move_rule(0, 1, Move.POSITIVE_X, 0)
        grid = GridContext.create(GridConfig(cols=4, rows=4))
        replay = replay_program(program, grid, ORIGIN, max_steps=9)
        assert replay.halted_by is HaltReason.MAX_STEPS
        assert replay.steps == 9
        assert replay.position == Point(1, 0)
        assert len(replay.trail) == 10

    def test_rejects_negative_max_steps(self) -> None:
        grid = GridContext.create(GridConfig(cols=4, rows=4))
        with pytest.raises(ValueError):
            replay_program(RuleProgram(), grid, ORIGIN, max_steps=-1)
