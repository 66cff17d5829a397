"""Compile painted toroidal grids into turmite rule programs."""

__version__ = "0.1.0"
