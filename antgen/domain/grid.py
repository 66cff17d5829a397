"""Caller-owned grid of palette color indices.

The grid is a ``(cols, rows)`` integer array indexed ``[x, y]``. Every
coordinate passed in is normalized first: wrapped on a torus, clamped when
the grid does not loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from antgen.config.constants import BACKGROUND_COLOR
from antgen.config.types import GridConfig
from antgen.domain.metric import Point, ToroidalMetric
from antgen.errors import InvalidArgumentError, UninitializedStateError


@dataclass
class GridContext:
    """Grid state for one compilation; nothing else mutates it."""

    config: GridConfig
    cells: np.ndarray | None = None
    metric: ToroidalMetric = field(init=False)

    def __post_init__(self) -> None:
        self.metric = ToroidalMetric(
            cols=self.config.cols, rows=self.config.rows, looping=self.config.looping
        )
        if self.cells is not None and self.cells.shape != (self.config.cols, self.config.rows):
            raise InvalidArgumentError(
                f"cells shape {self.cells.shape} does not match "
                f"({self.config.cols}, {self.config.rows})"
            )

    @classmethod
    def create(cls, config: GridConfig) -> GridContext:
        """Allocate a blank grid."""
        grid = cls(config=config)
        grid.init()
        return grid

    @classmethod
    def from_cells(cls, cells: np.ndarray | list[list[int]], looping: bool = True) -> GridContext:
        """Wrap an existing column-major ``cells[x][y]`` array."""
        array = np.array(cells, dtype=np.int64)
        if array.ndim != 2:
            raise InvalidArgumentError("cells must be a 2D array")
        if array.size and array.min() < 0:
            raise InvalidArgumentError("color indices must be >= 0")
        cols, rows = array.shape
        return cls(config=GridConfig(cols=cols, rows=rows, looping=looping), cells=array)

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def initialized(self) -> bool:
        return self.cells is not None

    def init(self) -> np.ndarray:
        """Reset every cell to the background color and return the new array."""
        cells = np.full((self.cols, self.rows), BACKGROUND_COLOR, dtype=np.int64)
        self.cells = cells
        return cells

    def _require_cells(self) -> np.ndarray:
        if self.cells is not None:
            return self.cells
        if not self.config.lazy_init:
            raise UninitializedStateError("grid used before init()")
        return self.init()

    def default_start(self) -> Point:
        """Grid centre, the conventional start and end cell."""
        return Point(self.cols // 2, self.rows // 2)

    def check_cords(self, point: Point) -> Point:
        return self.metric.check_cords(point)

    def get(self, point: Point) -> int:
        cells = self._require_cells()
        p = self.check_cords(point)
        return int(cells[p.x, p.y])

    def set(self, point: Point, color: int) -> int:
        if color < 0:
            raise InvalidArgumentError("color index must be >= 0")
        cells = self._require_cells()
        p = self.check_cords(point)
        cells[p.x, p.y] = color
        return color

    def color_point(self, x: int, y: int, color: int) -> None:
        self.set(Point(x, y), color)

    def fill_area(self, x1: int, y1: int, x2: int, y2: int, color: int) -> None:
        """Fill the inclusive rectangle spanned by two corners.

        Corners are normalized before sorting, so a rectangle never wraps
        across the seam.
        """
        if color < 0:
            raise InvalidArgumentError("color index must be >= 0")
        cells = self._require_cells()
        a = self.check_cords(Point(x1, y1))
        b = self.check_cords(Point(x2, y2))
        lo_x, hi_x = sorted((a.x, b.x))
        lo_y, hi_y = sorted((a.y, b.y))
        cells[lo_x : hi_x + 1, lo_y : hi_y + 1] = color

    def dirty_points(self) -> list[Point]:
        """Painted cells in x-major, then y order."""
        cells = self._require_cells()
        return [Point(int(x), int(y)) for x, y in np.argwhere(cells > BACKGROUND_COLOR)]

    def snapshot(self) -> np.ndarray:
        return self._require_cells().copy()

    def blank_copy(self) -> GridContext:
        """A same-sized, same-topology grid with every cell cleared."""
        return GridContext.create(self.config)
