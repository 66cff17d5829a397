"""Centralized constants for grid compilation and calibration.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

CANVAS_WIDTH = 1366
"""Default canvas width in pixels."""

CANVAS_HEIGHT = 768
"""Default canvas height in pixels."""

CELL_SCALE = 8
"""Default number of pixels per grid cell."""

GRID_COLS = 171
"""Default grid width in cells (ceil(CANVAS_WIDTH / CELL_SCALE))."""

GRID_ROWS = 96
"""Default grid height in cells (ceil(CANVAS_HEIGHT / CELL_SCALE))."""

BACKGROUND_COLOR = 0
"""Color index treated as unpainted background."""

HALT_STATE = -1
"""Reserved next-state value that tells the simulator to stop."""

MAX_DIRTY_POINTS = 500
"""Cap on painted cells accepted by the compile CLI."""

GREEDY_CONSTANT = 1e-4
"""Baseline milliseconds per n^2 unit of greedy construction."""

TWO_OPT_CONSTANT = 1e-5
"""Baseline milliseconds per n^2 * iterations unit of 2-opt search."""

TWO_OPT_ITERATION_CAP = 50
"""Upper bound on the assumed number of 2-opt passes in runtime estimates."""

CALIBRATION_GRID_SIZE = 100
"""Side length of the square torus used for calibration trials."""

CALIBRATION_TEST_SIZES: tuple[int, ...] = (10, 25, 50, 75, 100, 150, 200, 300)
"""Point counts sampled by a default calibration run."""

QUICK_CALIBRATION_TEST_SIZES: tuple[int, ...] = (5, 10, 20, 40)
"""Point counts sampled by a quick calibration run."""

CALIBRATION_ITERATIONS = 3
"""Trials averaged per point count."""

CALIBRATION_DELAY_SECONDS = 0.1
"""Pause between calibration sizes to reduce scheduler skew."""

DEFAULT_PALETTE: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),
    (255, 255, 255),
    (255, 0, 255),
    (255, 255, 0),
    (0, 255, 0),
    (0, 255, 255),
    (255, 0, 0),
    (255, 165, 0),
    (0, 0, 255),
    (255, 105, 180),
    (218, 112, 214),
    (138, 43, 226),
)
"""RGB palette; the index of each entry is its color index on the grid."""
