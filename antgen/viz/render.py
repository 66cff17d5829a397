"""Matplotlib rendering of a painted grid with its compiled tour."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap

from antgen.domain.grid import GridContext
from antgen.domain.metric import Point
from antgen.domain.tour import expand_moves
from antgen.io.paths import resolve_within_base
from antgen.viz.theme import DEFAULT_THEME, Theme


def _cell_cmap(theme: Theme) -> tuple[ListedColormap, BoundaryNorm]:
    """Discrete colormap, one bin per palette index."""
    cmap = ListedColormap(list(theme.cell_colors))
    bounds = [i - 0.5 for i in range(len(theme.cell_colors) + 1)]
    return cmap, BoundaryNorm(bounds, cmap.N)


def tour_segments(tour: list[Point], grid: GridContext) -> list[list[Point]]:
    """Cell-by-cell walk of *tour*, split wherever it wraps across an edge."""
    if not tour:
        return []
    position = grid.check_cords(tour[0])
    segments = [[position]]
    for move in expand_moves(tour, grid.metric):
        nxt = grid.metric.step(position, move)
        if abs(nxt.x - position.x) + abs(nxt.y - position.y) > 1:
            segments.append([nxt])
        else:
            segments[-1].append(nxt)
        position = nxt
    return segments


def render_tour(
    grid: GridContext,
    tour: list[Point],
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
    base_dir: Path | None = None,
    title: str | None = None,
) -> Path:
    """Draw the grid cells and overlay the tour; save as an image."""
    output_path = Path(output_path)
    if base_dir is not None:
        output_path = resolve_within_base(output_path, Path(base_dir))

    cells = np.clip(grid.snapshot(), 0, len(theme.cell_colors) - 1)
    cmap, norm = _cell_cmap(theme)
    fig, ax = plt.subplots(figsize=(max(4.0, grid.cols / 10), max(3.0, grid.rows / 10)))
    ax.imshow(cells.T, cmap=cmap, norm=norm, origin="upper", aspect="equal")
    if grid.cols <= 64 and grid.rows <= 64:
        for x in range(grid.cols + 1):
            ax.axvline(x - 0.5, color=theme.grid_line_color, linewidth=0.3)
        for y in range(grid.rows + 1):
            ax.axhline(y - 0.5, color=theme.grid_line_color, linewidth=0.3)

    for segment in tour_segments(tour, grid):
        ax.plot(
            [p.x for p in segment],
            [p.y for p in segment],
            color=theme.tour_color,
            linewidth=theme.tour_linewidth,
        )
    if tour:
        ax.scatter([tour[0].x], [tour[0].y], color=theme.start_color, s=30, zorder=3)
        ax.scatter([tour[-1].x], [tour[-1].y], color=theme.end_color, s=30, marker="s", zorder=3)

    ax.set_xticks([])
    ax.set_yticks([])
    if title:
        ax.set_title(title, fontsize=10)
    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
