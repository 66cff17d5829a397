"""Configuration layer: constants and typed config dataclasses."""

from antgen.config.constants import (
    BACKGROUND_COLOR,
    CELL_SCALE,
    DEFAULT_PALETTE,
    GRID_COLS,
    GRID_ROWS,
    HALT_STATE,
    MAX_DIRTY_POINTS,
    TWO_OPT_ITERATION_CAP,
)
from antgen.config.types import (
    CalibrationConfig,
    CalibrationConstants,
    CompileConfig,
    GridConfig,
    Heading,
    PixelLayout,
    TwoOptMode,
)

__all__ = [
    "BACKGROUND_COLOR",
    "CELL_SCALE",
    "CalibrationConfig",
    "CalibrationConstants",
    "CompileConfig",
    "DEFAULT_PALETTE",
    "GRID_COLS",
    "GRID_ROWS",
    "GridConfig",
    "HALT_STATE",
    "Heading",
    "MAX_DIRTY_POINTS",
    "PixelLayout",
    "TWO_OPT_ITERATION_CAP",
    "TwoOptMode",
]
