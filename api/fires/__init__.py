"""Hotspot overlay engine (aggregation, grid density, quantization, classification)."""

from .aggregation import sum_by_category
from .classification import (
    Bucket,
    EmptyDistribution,
    color_for_value,
    legend_entries,
    make_classifier,
    marker_radius,
    quantize_ranges,
)
from .grid_mapping import GridCell, aggregate_density_cells, aggregate_indices_to_cells, points_to_indices
from .overlay import OVERLAY_MODES, Overlay, OverlayConfig, build_overlay

__all__ = [
    "Bucket",
    "EmptyDistribution",
    "GridCell",
    "OVERLAY_MODES",
    "Overlay",
    "OverlayConfig",
    "aggregate_density_cells",
    "aggregate_indices_to_cells",
    "build_overlay",
    "color_for_value",
    "legend_entries",
    "make_classifier",
    "marker_radius",
    "points_to_indices",
    "quantize_ranges",
    "sum_by_category",
]
