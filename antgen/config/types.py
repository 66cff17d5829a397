"""Configuration dataclasses and enums for grid compilation runs.

All frozen dataclasses that parameterise the grid, the compiler and the
calibration harness live here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from antgen.config.constants import (
    CALIBRATION_DELAY_SECONDS,
    CALIBRATION_GRID_SIZE,
    CALIBRATION_ITERATIONS,
    CALIBRATION_TEST_SIZES,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    CELL_SCALE,
    GREEDY_CONSTANT,
    GRID_COLS,
    GRID_ROWS,
    TWO_OPT_CONSTANT,
)
from antgen.errors import InvalidArgumentError

__all__ = [
    "CalibrationConfig",
    "CalibrationConstants",
    "CompileConfig",
    "GridConfig",
    "Heading",
    "PixelLayout",
    "TwoOptMode",
]

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Heading(Enum):
    """Direction the ant faces once the program has finished."""

    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"


class TwoOptMode(Enum):
    """How a candidate 2-opt swap is judged."""

    RAW = "raw"
    """Compare the four edge distances directly."""
    DETAILED = "detailed"
    """Expand the whole candidate tour into unit moves and compare lengths."""


class PixelLayout(Enum):
    """Channel order of raw image buffers."""

    RGBA = "RGBA"
    RGB = "RGB"
    ABGR = "ABGR"


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GridConfig:
    """Grid dimensions and boundary behaviour."""

    cols: int = GRID_COLS
    rows: int = GRID_ROWS
    looping: bool = True
    """Wrap coordinates around both axes; when false, clamp them."""
    lazy_init: bool = False
    """Zero-fill an uninitialized grid on first use instead of raising."""

    def __post_init__(self) -> None:
        if isinstance(self.cols, bool) or isinstance(self.rows, bool):
            raise InvalidArgumentError("grid dimensions must be integers")
        if self.cols < 1 or self.rows < 1:
            raise InvalidArgumentError("grid dimensions must be >= 1")

    @classmethod
    def from_canvas(
        cls,
        width: int = CANVAS_WIDTH,
        height: int = CANVAS_HEIGHT,
        scale: int = CELL_SCALE,
        looping: bool = True,
    ) -> GridConfig:
        """Size the grid to cover a pixel canvas at *scale* pixels per cell."""
        if scale < 1:
            raise InvalidArgumentError("scale must be >= 1")
        if width < 1 or height < 1:
            raise InvalidArgumentError("canvas dimensions must be >= 1")
        return cls(
            cols=math.ceil(width / scale),
            rows=math.ceil(height / scale),
            looping=looping,
        )


@dataclass(frozen=True)
class CompileConfig:
    """Compiler knobs for one grid-to-program run."""

    state_offset: int = 0
    stop_after_done: bool = False
    optimize: bool = True
    two_opt_mode: TwoOptMode = TwoOptMode.RAW

    def __post_init__(self) -> None:
        if self.state_offset < 0:
            raise InvalidArgumentError("state_offset must be >= 0")


@dataclass(frozen=True)
class CalibrationConstants:
    """Tunable constants of the runtime estimate, persisted as JSON."""

    greedy_constant: float = GREEDY_CONSTANT
    two_opt_constant: float = TWO_OPT_CONSTANT
    schema_version: int = 1

    def __post_init__(self) -> None:
        if self.greedy_constant <= 0.0:
            raise ValueError("greedy_constant must be > 0")
        if self.two_opt_constant <= 0.0:
            raise ValueError("two_opt_constant must be > 0")


@dataclass(frozen=True)
class CalibrationConfig:
    """Settings for a wall-clock calibration run."""

    test_sizes: tuple[int, ...] = CALIBRATION_TEST_SIZES
    iterations: int = CALIBRATION_ITERATIONS
    grid_size: int = CALIBRATION_GRID_SIZE
    delay_seconds: float = CALIBRATION_DELAY_SECONDS
    seed: int = 0
    out_dir: Path = Path("data/calibration")

    def __post_init__(self) -> None:
        if not self.test_sizes:
            raise ValueError("test_sizes must not be empty")
        if any(size < 1 for size in self.test_sizes):
            raise ValueError("test_sizes values must be >= 1")
        if self.iterations < 1:
            raise ValueError("iterations must be >= 1")
        if self.grid_size < 2:
            raise ValueError("grid_size must be >= 2")
        if self.delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
