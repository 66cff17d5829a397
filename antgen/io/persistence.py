"""JSON and Parquet persistence for grids, rule programs and calibration."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from antgen.config.types import CalibrationConstants
from antgen.domain.grid import GridContext
from antgen.domain.metric import Move
from antgen.domain.program import RuleProgram
from antgen.errors import InvalidArgumentError
from antgen.io.schemas import (
    CALIBRATION_SCHEMA_VERSION,
    PROGRAM_SCHEMA_VERSION,
    RULE_TABLE_SCHEMA,
)

# ---------------------------------------------------------------------------
# Rule programs
# ---------------------------------------------------------------------------


def program_to_payload(program: RuleProgram) -> dict[str, list[dict[str, int | str]]]:
    """Simulator-facing mapping: string state -> list of rule objects."""
    return {
        str(state): [
            {"writeColor": rule.write_color, "move": rule.move.value, "nextState": rule.next_state}
            for rule in rules
        ]
        for state, rules in program.rules.items()
    }


def program_from_payload(payload: dict[str, Any]) -> RuleProgram:
    """Inverse of :func:`program_to_payload`; also accepts a full program document."""
    rules_payload = payload.get("rules", payload) if "schema_version" in payload else payload
    program = RuleProgram()
    for raw_state, raw_rules in rules_payload.items():
        try:
            state = int(raw_state)
        except ValueError as exc:
            raise InvalidArgumentError(f"state key must be an integer, got {raw_state!r}") from exc
        for raw_rule in raw_rules:
            try:
                move = Move(raw_rule["move"])
            except ValueError as exc:
                valid = ", ".join(m.value for m in Move)
                raise InvalidArgumentError(f"move must be one of {valid}") from exc
            program.add_move_rule(
                state, int(raw_rule["writeColor"]), move, int(raw_rule["nextState"])
            )
    return program


def write_program_json(
    program: RuleProgram,
    path: Path,
    metadata: dict[str, object] | None = None,
) -> Path:
    """Write a versioned program document with optional metadata."""
    document: dict[str, object] = {
        "schema_version": PROGRAM_SCHEMA_VERSION,
        "metadata": metadata or {},
        "rules": program_to_payload(program),
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, ensure_ascii=False, indent=2))
    return path


def read_program_json(path: Path) -> RuleProgram:
    return program_from_payload(json.loads(Path(path).read_text()))


def write_rule_table(program: RuleProgram, path: Path) -> Path:
    """Write one row per rule to Parquet."""
    columns: dict[str, list[int | str]] = {name: [] for name in RULE_TABLE_SCHEMA.names}
    for state, rules in program.rules.items():
        for index, rule in enumerate(rules):
            columns["state"].append(state)
            columns["rule_index"].append(index)
            columns["write_color"].append(rule.write_color)
            columns["move"].append(rule.move.value)
            columns["next_state"].append(rule.next_state)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(pa.Table.from_pydict(columns, schema=RULE_TABLE_SCHEMA), path)
    return path


# ---------------------------------------------------------------------------
# Grids
# ---------------------------------------------------------------------------


def load_grid(path: Path, looping: bool | None = None) -> GridContext:
    """Load a column-major grid from ``.npy`` or JSON.

    JSON may be a bare ``[[...], ...]`` array or ``{"cells": ..., "looping": ...}``.
    An explicit *looping* argument overrides the file.
    """
    path = Path(path)
    file_looping = True
    if path.suffix == ".npy":
        cells = np.load(path)
    else:
        raw = json.loads(path.read_text())
        if isinstance(raw, dict):
            if "cells" not in raw:
                raise InvalidArgumentError(f"grid file has no 'cells' entry: {path}")
            cells = raw["cells"]
            file_looping = bool(raw.get("looping", True))
        else:
            cells = raw
    return GridContext.from_cells(cells, looping=file_looping if looping is None else looping)


def save_grid(grid: GridContext, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".npy":
        np.save(path, grid.snapshot())
    else:
        document = {"looping": grid.config.looping, "cells": grid.snapshot().tolist()}
        path.write_text(json.dumps(document))
    return path


# ---------------------------------------------------------------------------
# Calibration constants
# ---------------------------------------------------------------------------


def save_calibration_constants(constants: CalibrationConstants, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(constants), indent=2))
    return path


def load_calibration_constants(path: Path | None) -> CalibrationConstants:
    """Load constants from *path*; built-in defaults when it is None or missing."""
    if path is None or not Path(path).exists():
        return CalibrationConstants()
    raw = json.loads(Path(path).read_text())
    version = int(raw.get("schema_version", CALIBRATION_SCHEMA_VERSION))
    if version != CALIBRATION_SCHEMA_VERSION:
        raise ValueError(
            f"unsupported calibration schema_version {version}; "
            f"expected {CALIBRATION_SCHEMA_VERSION}"
        )
    return CalibrationConstants(
        greedy_constant=float(raw["greedy_constant"]),
        two_opt_constant=float(raw["two_opt_constant"]),
        schema_version=version,
    )
