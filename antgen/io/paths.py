"""Path construction helpers for compiler and calibration outputs.

Centralises the directory/file naming conventions used by the CLIs.
"""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def programs_dir(out_dir: Path) -> Path:
    """Return path to the programs subdirectory within an output directory."""
    return out_dir / "programs"


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def program_json_path(out_dir: Path, name: str) -> Path:
    """Return path to a compiled program's JSON payload."""
    return programs_dir(out_dir) / f"{name}.json"


def rule_table_path(out_dir: Path, name: str) -> Path:
    """Return path to a compiled program's Parquet rule table."""
    return logs_dir(out_dir) / f"{name}_rules.parquet"


def tour_render_path(out_dir: Path, name: str) -> Path:
    """Return path to a compiled program's tour rendering."""
    return out_dir / "figures" / f"{name}_tour.png"


def calibration_results_path(out_dir: Path) -> Path:
    """Return path to the calibration results Parquet file."""
    return logs_dir(out_dir) / "calibration_results.parquet"


def calibration_constants_path(out_dir: Path) -> Path:
    """Return path to the calibrated constants JSON file."""
    return out_dir / "calibration.json"
