"""Heatmap grid helpers.

Conventions
- **Coordinates**: plain WGS84 degrees.
- **Indexing**: cell indices are `(i, j) = (lat_index, lon_index)`.
- **Order**: `i` increases south → north, `j` increases west → east.
- **Origin**: the grid starts exactly at the domain's southwest corner (no snapping).
- **Index rule**: `floor((coord - origin) / cell)`.
- **Boundary rule**: cells are half-open `[lat, lat+g) × [lon, lon+g)`; a point on
  a shared edge belongs to the cell whose lower bound matches it, and points on the
  domain's north/east edge are out of bounds.
- A cell is identified by its southwest corner (`index_to_origin`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

DEFAULT_CELL_SIZE_DEG = 0.5
# Cell indices stay exactly representable as floats up to here.
MAX_CELLS_PER_AXIS = 2**53

# New South Wales, the default overlay extent.
NSW_SOUTH, NSW_NORTH = -37.5, -28.1
NSW_WEST, NSW_EAST = 140.9, 153.6


@dataclass(frozen=True, slots=True)
class DomainBounds:
    """Rectangular spatial domain, half-open on the north and east edges."""

    south: float
    north: float
    west: float
    east: float

    def __post_init__(self) -> None:
        values = (self.south, self.north, self.west, self.east)
        if not all(math.isfinite(v) for v in values):
            raise ValueError("Domain bounds must be finite numbers.")
        if not self.south < self.north:
            raise ValueError(f"Domain south ({self.south}) must be below north ({self.north}).")
        if not self.west < self.east:
            raise ValueError(f"Domain west ({self.west}) must be below east ({self.east}).")

    @classmethod
    def from_bbox_string(cls, value: str) -> "DomainBounds":
        """Parse a ``"west,south,east,north"`` string."""
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 4:
            raise ValueError("Domain must be 'west,south,east,north'")
        west, south, east, north = (float(p) for p in parts)
        return cls(south=south, north=north, west=west, east=east)

    def contains(self, lat: np.ndarray | float, lon: np.ndarray | float) -> np.ndarray | bool:
        """Half-open containment test; vectorized over arrays."""
        lat_arr = np.asarray(lat, dtype=float)
        lon_arr = np.asarray(lon, dtype=float)
        mask = (
            (lat_arr >= self.south)
            & (lat_arr < self.north)
            & (lon_arr >= self.west)
            & (lon_arr < self.east)
        )
        if mask.ndim == 0:
            return bool(mask)
        return mask


NSW_DOMAIN = DomainBounds(south=NSW_SOUTH, north=NSW_NORTH, west=NSW_WEST, east=NSW_EAST)


@dataclass(frozen=True, slots=True)
class GridSpec:
    """Regular lat/lon grid laid over a domain."""

    domain: DomainBounds = NSW_DOMAIN
    cell_size_deg: float = DEFAULT_CELL_SIZE_DEG

    def __post_init__(self) -> None:
        if not (math.isfinite(self.cell_size_deg) and self.cell_size_deg > 0):
            raise ValueError(f"cell_size_deg must be a positive number, got {self.cell_size_deg}.")
        d = self.domain
        widest = max(d.north - d.south, d.east - d.west) / self.cell_size_deg
        if not widest <= MAX_CELLS_PER_AXIS:
            raise ValueError(
                f"cell_size_deg {self.cell_size_deg} is too fine for the domain "
                f"(more than {MAX_CELLS_PER_AXIS} cells per axis)."
            )

    @classmethod
    def from_bounds(
        cls,
        south: float,
        north: float,
        west: float,
        east: float,
        *,
        cell_size_deg: float = DEFAULT_CELL_SIZE_DEG,
    ) -> "GridSpec":
        return cls(
            domain=DomainBounds(south=south, north=north, west=west, east=east),
            cell_size_deg=float(cell_size_deg),
        )

    @property
    def origin_lat(self) -> float:
        return self.domain.south

    @property
    def origin_lon(self) -> float:
        return self.domain.west

    @property
    def n_lat(self) -> int:
        return int(math.ceil((self.domain.north - self.domain.south) / self.cell_size_deg))

    @property
    def n_lon(self) -> int:
        return int(math.ceil((self.domain.east - self.domain.west) / self.cell_size_deg))


def latlon_to_index(
    grid: GridSpec, lat: np.ndarray | float, lon: np.ndarray | float
) -> Tuple[np.ndarray, np.ndarray]:
    """Map lat/lon coordinates to integer grid indices (i=lat, j=lon)."""
    cell = grid.cell_size_deg
    i = np.floor((np.asarray(lat, dtype=float) - grid.origin_lat) / cell).astype(int)
    j = np.floor((np.asarray(lon, dtype=float) - grid.origin_lon) / cell).astype(int)
    return i, j


def index_to_origin(grid: GridSpec, i: np.ndarray | int, j: np.ndarray | int) -> Tuple[np.ndarray, np.ndarray]:
    """Map grid indices to the southwest corner of their cells."""
    cell = grid.cell_size_deg
    lat = grid.origin_lat + np.asarray(i) * cell
    lon = grid.origin_lon + np.asarray(j) * cell
    return lat, lon


def cell_bounds(grid: GridSpec, i: int, j: int) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Return `((lat, lon), (lat + g, lon + g))` for cell `(i, j)`."""
    lat, lon = index_to_origin(grid, i, j)
    lat_f, lon_f = float(lat), float(lon)
    cell = grid.cell_size_deg
    return (lat_f, lon_f), (lat_f + cell, lon_f + cell)
