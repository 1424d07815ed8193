"""
Grid helpers shared by the input and drawing layers.

Nodes live on integer grid cells and are keyed ``"x,y"``. Edge weights
drawn in the editor are the floored straight-line distance between cells.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def cell_key(x: int, y: int) -> str:
    """Node key for the cell at column ``x``, row ``y``."""
    return f"{x},{y}"


def cell_from_point(px: float, py: float, grid_size: int) -> tuple[int, int]:
    """Convert a pixel position to the grid cell containing it."""
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")
    return math.floor(px / grid_size), math.floor(py / grid_size)


def grid_weight(start: Mapping[str, Any], end: Mapping[str, Any]) -> int:
    """Floored Euclidean distance between two nodes' ``x``/``y`` cells."""
    dx = abs(start["x"] - end["x"])
    dy = abs(start["y"] - end["y"])
    return math.floor(math.sqrt(dx * dx + dy * dy))
