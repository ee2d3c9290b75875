"""Core shared helpers for the heatmap grid and overlay palettes."""

from .grid import (
    DEFAULT_CELL_SIZE_DEG,
    NSW_DOMAIN,
    DomainBounds,
    GridSpec,
    cell_bounds,
    index_to_origin,
    latlon_to_index,
)
from .theme import Palettes

__all__ = [
    "DEFAULT_CELL_SIZE_DEG",
    "NSW_DOMAIN",
    "DomainBounds",
    "GridSpec",
    "Palettes",
    "cell_bounds",
    "index_to_origin",
    "latlon_to_index",
]
