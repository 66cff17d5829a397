"""CLI entrypoint for compiling a painted grid into a turmite program.

This module owns argument parsing and output layout. The pipeline itself
lives in :mod:`antgen.domain.program`.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from antgen.config.constants import MAX_DIRTY_POINTS
from antgen.config.types import CompileConfig, Heading, TwoOptMode
from antgen.domain.metric import Point, parse_point
from antgen.domain.program import compile_grid
from antgen.errors import InvalidArgumentError
from antgen.experiments.calibration import estimate_runtime
from antgen.io.paths import program_json_path, rule_table_path, tour_render_path
from antgen.io.persistence import (
    load_calibration_constants,
    load_grid,
    write_program_json,
    write_rule_table,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_two_opt_mode(raw_mode: str) -> TwoOptMode:
    try:
        return TwoOptMode(raw_mode)
    except ValueError as exc:
        valid = ", ".join(mode.value for mode in TwoOptMode)
        raise InvalidArgumentError(f"two-opt-mode must be one of {valid}") from exc


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_point(raw: object, key: str) -> Point | None:
    """Accept ``"X,Y"``, ``[x, y]`` or None."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return parse_point(raw)
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return Point(_coerce_int(raw[0], key), _coerce_int(raw[1], key))
    raise ValueError(f"{key} must be X,Y or a two-element list")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Compile a painted grid into a turmite program")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--grid", type=Path, default=None, help="Grid file (.json or .npy)")
    parser.add_argument("--start", type=str, default=None, help="Start cell as X,Y")
    parser.add_argument("--end", type=str, default=None, help="End cell as X,Y")
    parser.add_argument(
        "--heading",
        type=str,
        choices=[heading.value for heading in Heading],
        default=None,
    )
    parser.add_argument("--looping", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--stop-after-done", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--optimize", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument(
        "--two-opt-mode",
        type=str,
        choices=[mode.value for mode in TwoOptMode],
        default=None,
    )
    parser.add_argument("--state-offset", type=int, default=None)
    parser.add_argument("--name", type=str, default=None, help="Output file stem")
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--calibration",
        type=Path,
        default=None,
        help="calibration.json used for the runtime estimate",
    )
    parser.add_argument("--render", action=argparse.BooleanOptionalAction, default=None)
    return parser


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for grid compilation.

    Supports ``--config path/to/config.json``. CLI arguments override
    config-file values; config-file values override built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    try:
        grid_raw = _get_val(args.grid, "grid", file_cfg, None)
        if grid_raw is None:
            raise ValueError("a grid file is required (--grid or 'grid' in config)")
        looping_raw = _get_val(args.looping, "looping", file_cfg, None)
        looping = None if looping_raw is None else _coerce_bool(looping_raw, "looping")
        start = _coerce_point(_get_val(args.start, "start", file_cfg, None), "start")
        end = _coerce_point(_get_val(args.end, "end", file_cfg, None), "end")
        heading = Heading(str(_get_val(args.heading, "heading", file_cfg, Heading.RIGHT.value)))
        config = CompileConfig(
            state_offset=_coerce_int(
                _get_val(args.state_offset, "state_offset", file_cfg, 0), "state_offset"
            ),
            stop_after_done=_coerce_bool(
                _get_val(args.stop_after_done, "stop_after_done", file_cfg, False),
                "stop_after_done",
            ),
            optimize=_coerce_bool(_get_val(args.optimize, "optimize", file_cfg, True), "optimize"),
            two_opt_mode=_parse_two_opt_mode(
                str(_get_val(args.two_opt_mode, "two_opt_mode", file_cfg, TwoOptMode.RAW.value))
            ),
        )
        render = _coerce_bool(_get_val(args.render, "render", file_cfg, False), "render")
        out_dir = Path(str(_get_val(args.out_dir, "out_dir", file_cfg, "data")))
        grid_path = Path(str(grid_raw))
        name = str(_get_val(args.name, "name", file_cfg, grid_path.stem))
        calibration_raw = _get_val(args.calibration, "calibration", file_cfg, None)
        constants = load_calibration_constants(
            Path(str(calibration_raw)) if calibration_raw is not None else None
        )
        grid = load_grid(grid_path, looping=looping)
    except FileNotFoundError as exc:
        parser.error(f"File not found: {exc.filename}")
    except (ValueError, json.JSONDecodeError) as exc:
        parser.error(str(exc))

    num_points = len(grid.dirty_points())
    if num_points > MAX_DIRTY_POINTS:
        parser.error(f"grid has {num_points} painted cells; the limit is {MAX_DIRTY_POINTS}")
    estimate = estimate_runtime(num_points, constants)
    logger.info(
        "%d painted cells; estimated planning time %.2fms (%s)",
        num_points,
        estimate.estimated_ms,
        estimate.complexity,
    )

    try:
        result = compile_grid(grid, start=start, end=end, heading=heading, config=config)
    except InvalidArgumentError as exc:
        parser.error(str(exc))

    metadata: dict[str, object] = {
        "cols": grid.cols,
        "rows": grid.rows,
        "looping": grid.config.looping,
        "heading": heading.value,
        "start_state": config.state_offset,
        "next_state": result.next_state,
        "stop_after_done": config.stop_after_done,
        "two_opt_mode": config.two_opt_mode.value,
    }
    json_path = write_program_json(result.program, program_json_path(out_dir, name), metadata)
    table_path = write_rule_table(result.program, rule_table_path(out_dir, name))

    summary: dict[str, object] = {
        "name": name,
        "painted_cells": num_points,
        "rules": result.program.rule_count(),
        "path_moves": result.path_moves,
        "epilogue_moves": result.epilogue_moves,
        "next_state": result.next_state,
        "empty": result.empty,
        "program_path": str(json_path),
        "rule_table_path": str(table_path),
    }
    if result.plan is not None:
        summary["greedy_length"] = result.plan.greedy_length
        summary["tour_length"] = result.plan.length
        summary["two_opt_swaps"] = result.plan.swaps
        summary["planning_ms"] = round(result.plan.total_ms, 2)
    summary["estimated_ms"] = estimate.estimated_ms

    if render:
        from antgen.viz.render import render_tour

        figure = render_tour(grid, result.tour, tour_render_path(out_dir, name), title=name)
        summary["render_path"] = str(figure)

    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
