"""Visualization: tour renderings and themes."""

from antgen.viz.render import render_tour, tour_segments
from antgen.viz.theme import DEFAULT_THEME, PAPER_THEME, Theme, get_theme

__all__ = ["DEFAULT_THEME", "PAPER_THEME", "Theme", "get_theme", "render_tour", "tour_segments"]
