"""Tests for antgen.io persistence helpers."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pyarrow.parquet as pq
import pytest

from antgen.config.types import CalibrationConstants, GridConfig
from antgen.domain.grid import GridContext
from antgen.domain.metric import Move, Point
from antgen.domain.program import RuleProgram, compile_grid
from antgen.errors import InvalidArgumentError
from antgen.io.persistence import (
    load_calibration_constants,
    load_grid,
    program_from_payload,
    program_to_payload,
    read_program_json,
    save_calibration_constants,
    save_grid,
    write_program_json,
    write_rule_table,
)
from antgen.io.schemas import PROGRAM_SCHEMA_VERSION, RULE_TABLE_SCHEMA


def _small_program() -> RuleProgram:
    grid = GridContext.create(GridConfig(cols=6, rows=6))
    grid.color_point(2, 3, 4)
    return compile_grid(grid, start=Point(0, 0), end=Point(0, 0)).program


class TestProgramPayload:
    def test_payload_shape(self) -> None:
        program = RuleProgram()
        program.add_move_rule(5, 2, Move.NEGATIVE_Y, 6)
        assert program_to_payload(program) == {
            "5": [{"writeColor": 2, "move": "^", "nextState": 6}]
        }

    def test_payload_round_trip(self) -> None:
        program = _small_program()
        assert program_from_payload(program_to_payload(program)) == program

    def test_rejects_unknown_move(self) -> None:
        with pytest.raises(InvalidArgumentError):
            program_from_payload({"0": [{"writeColor": 0, "move": "x", "nextState": 1}]})

    def test_rejects_non_integer_state(self) -> None:
        with pytest.raises(InvalidArgumentError):
            program_from_payload({"s0": []})

    def test_json_document(self, tmp_path: Path) -> None:
        program = _small_program()
        path = write_program_json(program, tmp_path / "out" / "p.json", {"heading": "right"})
        document = json.loads(path.read_text())
        assert document["schema_version"] == PROGRAM_SCHEMA_VERSION
        assert document["metadata"] == {"heading": "right"}
        assert read_program_json(path) == program


class TestRuleTable:
    def test_one_row_per_rule(self, tmp_path: Path) -> None:
        program = _small_program()
        table = pq.read_table(write_rule_table(program, tmp_path / "rules.parquet"))
        assert table.schema.names == RULE_TABLE_SCHEMA.names
        assert table.num_rows == program.rule_count()
        assert table.column("state").to_pylist() == sorted(program.rules)


class TestGridFiles:
    def test_json_round_trip(self, tmp_path: Path) -> None:
        grid = GridContext.create(GridConfig(cols=4, rows=3, looping=False))
        grid.color_point(3, 2, 7)
        loaded = load_grid(save_grid(grid, tmp_path / "grid.json"))
        assert not loaded.config.looping
        assert np.array_equal(loaded.snapshot(), grid.snapshot())

    def test_npy_round_trip(self, tmp_path: Path) -> None:
        grid = GridContext.create(GridConfig(cols=5, rows=2))
        grid.color_point(4, 1, 3)
        loaded = load_grid(save_grid(grid, tmp_path / "grid.npy"))
        assert loaded.get(Point(4, 1)) == 3

    def test_bare_list_and_override(self, tmp_path: Path) -> None:
        path = tmp_path / "bare.json"
        path.write_text(json.dumps([[0, 1], [2, 0]]))
        loaded = load_grid(path, looping=False)
        assert loaded.cols == 2 and loaded.rows == 2
        assert loaded.get(Point(1, 0)) == 2
        assert not loaded.config.looping

    def test_missing_cells_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"looping": True}))
        with pytest.raises(InvalidArgumentError):
            load_grid(path)


class TestCalibrationConstants:
    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        assert load_calibration_constants(tmp_path / "none.json") == CalibrationConstants()
        assert load_calibration_constants(None) == CalibrationConstants()

    def test_round_trip(self, tmp_path: Path) -> None:
        constants = CalibrationConstants(greedy_constant=2e-4, two_opt_constant=3e-6)
        path = save_calibration_constants(constants, tmp_path / "calibration.json")
        assert load_calibration_constants(path) == constants

    def test_version_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "calibration.json"
        path.write_text(
            json.dumps({"schema_version": 99, "greedy_constant": 1.0, "two_opt_constant": 1.0})
        )
        with pytest.raises(ValueError, match="schema_version"):
            load_calibration_constants(path)
