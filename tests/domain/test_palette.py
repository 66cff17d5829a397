"""Tests for antgen.domain.palette module."""

from __future__ import annotations

import pytest

from antgen.config.types import GridConfig, PixelLayout
from antgen.domain.grid import GridContext
from antgen.domain.metric import Point
from antgen.domain.palette import convert_hex, convert_image, convert_rgb, hex_to_rgb
from antgen.errors import InvalidArgumentError

RED = (255, 0, 0)
BLUE = (0, 0, 255)


class TestConvertRgb:
    def test_exact_match(self) -> None:
        assert convert_rgb((255, 165, 0)) == 7

    def test_nearest_match(self) -> None:
        assert convert_rgb((250, 250, 250)) == 1
        assert convert_rgb((10, 5, 0)) == 0

    def test_custom_palette(self) -> None:
        assert convert_rgb((200, 10, 10), palette=[(0, 0, 0), RED]) == 1

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            convert_rgb((0, 0, 0), palette=[])


class TestConvertHex:
    def test_with_and_without_hash(self) -> None:
        assert convert_hex("#ff0000") == 6
        assert convert_hex("00ff00") == 4

    def test_hex_to_rgb(self) -> None:
        assert hex_to_rgb("#8a2be2") == (138.0, 43.0, 226.0)

    @pytest.mark.parametrize("raw", ["#fff", "zzzzzz", ""])
    def test_rejects_malformed(self, raw: str) -> None:
        with pytest.raises(InvalidArgumentError):
            convert_hex(raw)


def _rgba_halves(width: int, height: int, left: tuple, right: tuple) -> list[int]:
    data: list[int] = []
    for _y in range(height):
        for x in range(width):
            data.extend((*(left if x < width // 2 else right), 255))
    return data


class TestConvertImage:
    def test_block_average_rgba(self) -> None:
        grid = GridContext.create(GridConfig(cols=2, rows=1))
        convert_image(grid, _rgba_halves(4, 2, RED, BLUE), 4, 2)
        assert grid.get(Point(0, 0)) == 6
        assert grid.get(Point(1, 0)) == 8

    def test_rgb_layout(self) -> None:
        grid = GridContext.create(GridConfig(cols=1, rows=1))
        convert_image(grid, [0, 255, 255] * 4, 2, 2, color_type="RGB")
        assert grid.get(Point(0, 0)) == 5

    def test_abgr_layout(self) -> None:
        grid = GridContext.create(GridConfig(cols=1, rows=1))
        convert_image(grid, [0, 0, 255, 255], 1, 1, color_type=PixelLayout.ABGR)
        assert grid.get(Point(0, 0)) == 6

    def test_uninitialized_grid_is_initialized(self) -> None:
        grid = GridContext(config=GridConfig(cols=1, rows=1))
        convert_image(grid, [0, 0, 255, 255], 1, 1)
        assert grid.get(Point(0, 0)) == 8

    def test_cells_without_pixels_are_background(self) -> None:
        grid = GridContext.create(GridConfig(cols=2, rows=1))
        grid.color_point(0, 0, 4)
        convert_image(grid, [255, 255, 255, 255], 1, 1)
        assert grid.get(Point(0, 0)) == 0
        assert grid.get(Point(1, 0)) == 1

    def test_short_buffer_rejected(self) -> None:
        grid = GridContext.create(GridConfig(cols=1, rows=1))
        with pytest.raises(InvalidArgumentError):
            convert_image(grid, [0, 0, 0], 1, 1)

    def test_unknown_layout_rejected(self) -> None:
        grid = GridContext.create(GridConfig(cols=1, rows=1))
        with pytest.raises(InvalidArgumentError):
            convert_image(grid, [0, 0, 0, 0], 1, 1, color_type="BGR")
