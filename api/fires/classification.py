"""Value-range quantization and color classification for overlay legends.

Buckets are equal-width, closed intervals `[lo, hi]` ranked `0..N-1`. The first
bucket starts exactly at the series minimum and the last ends exactly at the
maximum, so the union always covers `[min, max]`. Integer-rounded bounds
(`display_lo`, `display_hi`) are carried for legends only.

Classification scans buckets in ascending order and the first closed interval
containing the value wins, so a value on a shared boundary lands in the lower
bucket. Values matching no bucket fall back to the first palette color.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Sequence

from api.core.theme import MarkerSizing

Classifier = Callable[[float], str]


class EmptyDistribution(ValueError):
    """Raised when buckets are requested for an empty series."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (``2.5 -> 3``, ``-2.5 -> -2``)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Bucket:
    rank: int
    lo: float
    hi: float

    @property
    def display_lo(self) -> int:
        return round_half_up(self.lo)

    @property
    def display_hi(self) -> int:
        return round_half_up(self.hi)

    @property
    def label(self) -> str:
        return f"{self.display_lo} - {self.display_hi}"

    def contains(self, value: float) -> bool:
        return self.lo <= value <= self.hi

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "lo": self.lo,
            "hi": self.hi,
            "label": self.label,
        }


def quantize_ranges(values: Iterable[float], bucket_count: int) -> list[Bucket]:
    """Split `[min(values), max(values)]` into `bucket_count` equal-width buckets.

    Raises:
        EmptyDistribution: `values` is empty.
        ValueError: `bucket_count` is below 1.

    When every value is equal, all buckets collapse to `[v, v]`.

    Example:
        >>> [(b.lo, b.hi) for b in quantize_ranges([20, 80], 2)]
        [(20.0, 50.0), (50.0, 80.0)]
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}.")
    series = [float(v) for v in values]
    if not series:
        raise EmptyDistribution("Cannot quantize an empty distribution.")

    low = min(series)
    high = max(series)
    step = (high - low) / bucket_count
    if math.isfinite(step):
        inner = [min(low + k * step, high) for k in range(1, bucket_count)]
    else:
        # high - low overflows; interpolate without forming the difference.
        inner = [
            low * (1 - k / bucket_count) + high * (k / bucket_count)
            for k in range(1, bucket_count)
        ]
    edges = [low, *inner, high]
    return [Bucket(rank=k, lo=edges[k], hi=edges[k + 1]) for k in range(bucket_count)]


def _palette_color(palette: Sequence[str], rank: int) -> str:
    return palette[min(rank, len(palette) - 1)]


def color_for_value(value: float, buckets: Sequence[Bucket], palette: Sequence[str]) -> str:
    """Return the palette color of the first bucket whose closed interval holds `value`.

    A palette shorter than the bucket list is clamped to its last color; a value
    outside every bucket (or NaN) gets `palette[0]`.
    """
    if not palette:
        raise ValueError("palette must contain at least one color.")
    for bucket in buckets:
        if bucket.contains(value):
            return _palette_color(palette, bucket.rank)
    return palette[0]


def make_classifier(buckets: Sequence[Bucket], palette: Sequence[str]) -> Classifier:
    """Bind buckets and palette into a `value -> color` function."""
    if not palette:
        raise ValueError("palette must contain at least one color.")
    frozen_buckets = tuple(buckets)
    frozen_palette = tuple(palette)

    def classify(value: float) -> str:
        return color_for_value(value, frozen_buckets, frozen_palette)

    return classify


def bucket_colors(buckets: Sequence[Bucket], palette: Sequence[str]) -> list[str]:
    """Color list parallel to `buckets`, clamped to the palette length."""
    if not palette:
        raise ValueError("palette must contain at least one color.")
    return [_palette_color(palette, bucket.rank) for bucket in buckets]


def legend_entries(buckets: Sequence[Bucket], palette: Sequence[str]) -> list[Dict[str, Any]]:
    """One legend row per bucket: rank, color, exact bounds and display label."""
    colors = bucket_colors(buckets, palette)
    return [{**bucket.to_dict(), "color": color} for bucket, color in zip(buckets, colors)]


def marker_radius(value: float, lo: float | None, hi: float | None) -> float:
    """Dot-mode marker radius, 6 at `lo` growing linearly to 18 at `hi`."""
    if lo is None or hi is None or not hi > lo:
        return MarkerSizing.DEFAULT_RADIUS
    normalized = (value - lo) / (hi - lo)
    return MarkerSizing.MIN_RADIUS + normalized * MarkerSizing.RADIUS_SPAN
