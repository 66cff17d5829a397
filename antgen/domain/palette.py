"""Palette matching and image rasterization onto a GridContext."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from antgen.config.constants import BACKGROUND_COLOR, DEFAULT_PALETTE
from antgen.config.types import PixelLayout
from antgen.domain.grid import GridContext
from antgen.errors import InvalidArgumentError

RGB = tuple[float, float, float]

# (stride, r, g, b) channel offsets per pixel layout
_LAYOUT_CHANNELS: dict[PixelLayout, tuple[int, int, int, int]] = {
    PixelLayout.RGBA: (4, 0, 1, 2),
    PixelLayout.RGB: (3, 0, 1, 2),
    PixelLayout.ABGR: (4, 2, 1, 0),
}


def _nearest_indices(colors: np.ndarray, palette: Sequence[tuple[int, int, int]]) -> np.ndarray:
    """Index of the nearest palette entry for each RGB row; first entry wins ties."""
    reference = np.asarray(palette, dtype=np.float64)
    distances = np.linalg.norm(colors[..., np.newaxis, :] - reference, axis=-1)
    return np.argmin(distances, axis=-1)


def convert_rgb(rgb: RGB, palette: Sequence[tuple[int, int, int]] = DEFAULT_PALETTE) -> int:
    """Palette index closest to *rgb* by Euclidean distance."""
    if not palette:
        raise InvalidArgumentError("palette must not be empty")
    return int(_nearest_indices(np.asarray(rgb, dtype=np.float64), palette))


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse ``#rrggbb`` (leading ``#`` optional)."""
    raw = hex_color[1:] if hex_color.startswith("#") else hex_color
    if len(raw) != 6:
        raise InvalidArgumentError(f"hex color must have six digits, got {hex_color!r}")
    try:
        return (float(int(raw[0:2], 16)), float(int(raw[2:4], 16)), float(int(raw[4:6], 16)))
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid hex color {hex_color!r}") from exc


def convert_hex(hex_color: str, palette: Sequence[tuple[int, int, int]] = DEFAULT_PALETTE) -> int:
    return convert_rgb(hex_to_rgb(hex_color), palette)


def convert_image(
    grid: GridContext,
    image_data: Sequence[int] | np.ndarray,
    width: int,
    height: int,
    color_type: PixelLayout | str = PixelLayout.RGBA,
    palette: Sequence[tuple[int, int, int]] = DEFAULT_PALETTE,
) -> None:
    """Rasterize a flat pixel buffer into *grid*.

    Each grid cell takes the palette color nearest to the mean of the pixel
    block it covers. Cells that cover no pixel become background.
    """
    try:
        layout = PixelLayout(color_type)
    except ValueError as exc:
        valid = ", ".join(layout.value for layout in PixelLayout)
        raise InvalidArgumentError(f"color_type must be one of {valid}") from exc
    if width < 1 or height < 1:
        raise InvalidArgumentError("image dimensions must be >= 1")
    stride, r_off, g_off, b_off = _LAYOUT_CHANNELS[layout]
    pixels = np.asarray(image_data, dtype=np.float64)
    if pixels.size < width * height * stride:
        raise InvalidArgumentError(
            f"image_data holds {pixels.size} values, expected {width * height * stride}"
        )
    pixels = pixels[: width * height * stride].reshape(height, width, stride)
    rgb = pixels[..., [r_off, g_off, b_off]]

    cells = grid.cells if grid.cells is not None else grid.init()

    px_per_cell_x = width / grid.cols
    px_per_cell_y = height / grid.rows
    for gx in range(grid.cols):
        start_x = int(gx * px_per_cell_x)
        end_x = min(int((gx + 1) * px_per_cell_x), width)
        for gy in range(grid.rows):
            start_y = int(gy * px_per_cell_y)
            end_y = min(int((gy + 1) * px_per_cell_y), height)
            block = rgb[start_y:end_y, start_x:end_x]
            if block.size == 0:
                cells[gx, gy] = BACKGROUND_COLOR
                continue
            mean = block.reshape(-1, 3).mean(axis=0)
            cells[gx, gy] = int(_nearest_indices(mean, palette))
