"""Per-category sums of the point measure (choropleth mode)."""

from __future__ import annotations

import math
import sys
from collections import defaultdict
from typing import Dict, Iterable, List

from ingest.models import PointRecord

# Power of two, so scaling by it is exact for all but subnormal values.
_OVERFLOW_SCALE = 2.0 ** -64


def _total(values: List[float]) -> float:
    try:
        return math.fsum(values)
    except OverflowError:
        # A partial sum left the float range; sum scaled down, clamp on the way back.
        total = math.fsum(v * _OVERFLOW_SCALE for v in values) / _OVERFLOW_SCALE
        if math.isinf(total):
            return math.copysign(sys.float_info.max, total)
        return total


def sum_by_category(points: Iterable[PointRecord]) -> Dict[str, float]:
    """Sum `value` per `category` label.

    Labels are matched exactly (no case or whitespace folding). Sums use
    `math.fsum`, so the result does not depend on the order of `points`.
    A sum beyond the float range is clamped to `±sys.float_info.max`.
    Empty input yields an empty dict.
    """
    grouped: Dict[str, List[float]] = defaultdict(list)
    for point in points:
        grouped[point.category].append(point.value)
    return {category: _total(values) for category, values in grouped.items()}
