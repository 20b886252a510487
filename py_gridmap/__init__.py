"""
py_gridmap - deterministic terrain grids for grid-based strategy games.
"""

__version__ = "0.1.0"
