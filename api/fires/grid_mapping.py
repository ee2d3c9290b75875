"""Bin hotspot points onto the heatmap grid and compute per-cell density.

This module follows `api.core.grid` conventions:
- Indices: `(i, j) = (lat_index, lon_index)`, `i` south → north, `j` west → east
- Index rule: `floor((coord - origin) / cell)`
- Boundary rule: half-open cells; points outside the declared domain are dropped

Aggregation is a single pass over the points: each point's cell key is computed
directly and counts/totals are reduced per distinct key, so cost grows with the
number of points, never with the number of grid cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from api.core.grid import GridSpec, cell_bounds, latlon_to_index
from ingest.models import PointRecord

Bounds = Tuple[Tuple[float, float], Tuple[float, float]]


@dataclass(frozen=True, slots=True)
class GridCell:
    """One occupied heatmap cell, identified by its southwest corner."""

    i: int
    j: int
    lat: float
    lng: float
    count: int
    total_value: float
    bounds: Bounds

    @property
    def density(self) -> float:
        return self.total_value / self.count

    def to_dict(self) -> Dict[str, Any]:
        (south, west), (north, east) = self.bounds
        return {
            "lat": self.lat,
            "lng": self.lng,
            "count": self.count,
            "total_value": self.total_value,
            "density": self.density,
            "bounds": [[south, west], [north, east]],
        }


def points_to_indices(
    points: Sequence[PointRecord],
    grid: GridSpec,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return `(i, j, values)` arrays for the points inside the grid's domain."""
    if len(points) == 0:
        empty = np.asarray([], dtype=int)
        return empty, empty, np.asarray([], dtype=float)

    lat = np.asarray([p.latitude for p in points], dtype=float)
    lon = np.asarray([p.longitude for p in points], dtype=float)
    values = np.asarray([p.value for p in points], dtype=float)

    inside = grid.domain.contains(lat, lon)
    i, j = latlon_to_index(grid, lat[inside], lon[inside])
    # Float division can land a point just under the north/east edge on index n.
    i = np.minimum(i, grid.n_lat - 1)
    j = np.minimum(j, grid.n_lon - 1)
    return i, j, values[inside]


def aggregate_indices_to_cells(
    i: np.ndarray,
    j: np.ndarray,
    values: np.ndarray,
    grid: GridSpec,
) -> list[GridCell]:
    """Reduce `(i, j)` hits into occupied cells, ordered by ascending `(i, j)`."""
    i = np.asarray(i, dtype=np.int64)
    j = np.asarray(j, dtype=np.int64)
    values = np.asarray(values, dtype=float)
    if values.shape[0] != i.shape[0] or j.shape[0] != i.shape[0]:
        raise ValueError("values must have the same length as i/j.")
    if i.size == 0:
        return []

    # Rows of (i, j) rather than a flattened i * n_lon + j, which overflows on fine grids.
    keys, inverse = np.unique(np.stack([i, j], axis=1), axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)
    n_keys = keys.shape[0]
    counts = np.bincount(inverse, minlength=n_keys)
    totals = np.bincount(inverse, weights=values, minlength=n_keys)

    cells: list[GridCell] = []
    for (ci, cj), count, total in zip(keys.tolist(), counts.tolist(), totals.tolist()):
        bounds = cell_bounds(grid, ci, cj)
        cells.append(
            GridCell(
                i=ci,
                j=cj,
                lat=bounds[0][0],
                lng=bounds[0][1],
                count=int(count),
                total_value=float(total),
                bounds=bounds,
            )
        )
    return cells


def aggregate_density_cells(points: Sequence[PointRecord], grid: GridSpec) -> list[GridCell]:
    """Bin points into grid cells; only cells with at least one point are returned."""
    i, j, values = points_to_indices(points, grid)
    return aggregate_indices_to_cells(i, j, values, grid)
