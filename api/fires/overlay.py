"""Build renderable map overlays from normalized hotspot points.

One engine serves every overlay mode; the mode only decides which numeric
series feeds the quantizer:

- `dot`: each point's value
- `choropleth`: per-category sums
- `heatmap`: per-cell densities on the configured grid
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Literal, Mapping, Optional, Sequence, get_args

from api.core.grid import GridSpec
from api.core.theme import BucketCounts, Palettes
from api.fires.aggregation import sum_by_category
from api.fires.classification import (
    Bucket,
    Classifier,
    bucket_colors,
    legend_entries,
    make_classifier,
    marker_radius,
    quantize_ranges,
)
from api.fires.grid_mapping import GridCell, aggregate_density_cells
from ingest.logging_utils import log_event
from ingest.models import PointRecord, RowSchema

if TYPE_CHECKING:
    from api.config import AppSettings

LOGGER = logging.getLogger(__name__)

Mode = Literal["dot", "choropleth", "heatmap"]
OVERLAY_MODES: tuple[str, ...] = get_args(Mode)


@dataclass(frozen=True, slots=True)
class OverlayConfig:
    """Everything the engine needs besides the points themselves.

    `schema=None` means the row schema is detected from the CSV header at load time.
    """

    bucket_count: int = BucketCounts.GENERIC
    palette: tuple[str, ...] = Palettes.DOT
    grid: GridSpec = field(default_factory=GridSpec)
    schema: Optional[RowSchema] = None

    def __post_init__(self) -> None:
        if self.bucket_count < 1:
            raise ValueError(f"bucket_count must be >= 1, got {self.bucket_count}.")
        palette = tuple(self.palette)
        if not palette:
            raise ValueError("palette must contain at least one color.")
        object.__setattr__(self, "palette", palette)

    @classmethod
    def from_settings(
        cls,
        app_settings: "AppSettings",
        mode: Mode,
        *,
        bucket_count: int | None = None,
        cell_size_deg: float | None = None,
    ) -> "OverlayConfig":
        """Settings-backed config: 5-bucket palette for dot/choropleth, 6 for heatmap."""
        if mode == "heatmap":
            default_count = app_settings.overlay_heatmap_bucket_count
            palette = app_settings.overlay_heatmap_palette
        else:
            default_count = app_settings.overlay_bucket_count
            palette = app_settings.overlay_palette
        grid = GridSpec(
            domain=app_settings.resolved_domain,
            cell_size_deg=cell_size_deg if cell_size_deg is not None else app_settings.overlay_cell_size_deg,
        )
        return cls(
            bucket_count=bucket_count if bucket_count is not None else default_count,
            palette=tuple(palette),
            grid=grid,
        )


@dataclass(frozen=True)
class Overlay:
    """Classified, renderable result for one mode."""

    mode: Mode
    points: tuple[PointRecord, ...]
    buckets: tuple[Bucket, ...]
    colors: tuple[str, ...]
    palette: tuple[str, ...]
    classify: Classifier
    categories: Optional[Mapping[str, float]] = None
    cells: Optional[tuple[GridCell, ...]] = None

    @property
    def value_range(self) -> tuple[float, float] | None:
        if not self.buckets:
            return None
        return self.buckets[0].lo, self.buckets[-1].hi

    @property
    def legend(self) -> list[Dict[str, Any]]:
        return legend_entries(self.buckets, self.palette)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload for the map renderer."""
        payload: Dict[str, Any] = {
            "mode": self.mode,
            "count": len(self.points),
            "buckets": [b.to_dict() for b in self.buckets],
            "colors": list(self.colors),
            "legend": self.legend,
        }

        if self.mode == "dot":
            lo, hi = self.value_range or (None, None)
            payload["points"] = [
                {
                    **p.to_dict(),
                    "color": self.classify(p.value),
                    "radius": marker_radius(p.value, lo, hi),
                }
                for p in self.points
            ]
        else:
            payload["points"] = [p.to_dict() for p in self.points]

        if self.categories is not None:
            payload["categories"] = [
                {"category": name, "total": total, "color": self.classify(total)}
                for name, total in sorted(self.categories.items())
            ]
        if self.cells is not None:
            payload["cells"] = [
                {**cell.to_dict(), "color": self.classify(cell.density)} for cell in self.cells
            ]
        return payload


def _series_for_mode(
    points: Sequence[PointRecord],
    mode: Mode,
    config: OverlayConfig,
) -> tuple[list[float], Optional[Dict[str, float]], Optional[tuple[GridCell, ...]]]:
    if mode == "dot":
        return [p.value for p in points], None, None
    if mode == "choropleth":
        categories = sum_by_category(points)
        return list(categories.values()), categories, None
    if mode == "heatmap":
        cells = tuple(aggregate_density_cells(points, config.grid))
        return [c.density for c in cells], None, cells
    raise ValueError(f"Unsupported overlay mode: {mode}")


def build_overlay(
    points: Sequence[PointRecord],
    mode: Mode,
    config: OverlayConfig | None = None,
) -> Overlay:
    """Aggregate, quantize and classify `points` for one overlay mode.

    With nothing to quantize (no points, or no point inside the heatmap domain)
    the overlay carries no buckets and its classifier returns the first palette
    color.
    """
    config = config or OverlayConfig()
    point_tuple = tuple(points)
    series, categories, cells = _series_for_mode(point_tuple, mode, config)

    buckets: tuple[Bucket, ...] = ()
    if series:
        buckets = tuple(quantize_ranges(series, config.bucket_count))

    log_event(
        LOGGER,
        "overlay.build",
        "Built overlay",
        level="debug",
        mode=mode,
        points=len(point_tuple),
        series=len(series),
        buckets=len(buckets),
    )
    return Overlay(
        mode=mode,
        points=point_tuple,
        buckets=buckets,
        colors=tuple(bucket_colors(buckets, config.palette)),
        palette=config.palette,
        classify=make_classifier(buckets, config.palette),
        categories=categories,
        cells=cells,
    )
