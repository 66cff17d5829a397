"""Visualization theme presets for tour renderings.

Themes are frozen dataclasses that group all styling constants together so a
renderer can swap palettes without touching drawing code.
"""

from __future__ import annotations

from dataclasses import dataclass

from antgen.config.constants import DEFAULT_PALETTE


def _rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    cell_colors: tuple[str, ...] = tuple(_rgb_to_hex(rgb) for rgb in DEFAULT_PALETTE)
    grid_line_color: str = "#333333"
    tour_color: str = "#E53935"
    start_color: str = "#43A047"
    end_color: str = "#1E88E5"
    tour_linewidth: float = 1.2


DEFAULT_THEME = Theme()

PAPER_THEME = Theme(
    cell_colors=("#FFFFFF",) + DEFAULT_THEME.cell_colors[1:],
    grid_line_color="#CCCCCC",
    tour_color="#000000",
)

REGISTERED_THEMES: dict[str, Theme] = {"default": DEFAULT_THEME, "paper": PAPER_THEME}


def get_theme(name: str) -> Theme:
    try:
        return REGISTERED_THEMES[name]
    except KeyError as exc:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"theme must be one of {valid}") from exc
