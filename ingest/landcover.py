"""Land-cover class lookup for hotspot rows carrying a `LandCover` index."""

from __future__ import annotations

import math

UNKNOWN_CATEGORY = "unknown"

# IGBP land-cover classification, zero-based (MODIS MCD12Q1 type 1 shifted by one).
LANDCOVER_CLASSES: tuple[str, ...] = (
    "Evergreen Needleleaf Forests",  # 0
    "Evergreen Broadleaf Forests",  # 1
    "Deciduous Needleleaf Forests",  # 2
    "Deciduous Broadleaf Forests",  # 3
    "Mixed Forests",  # 4
    "Closed Shrublands",  # 5
    "Open Shrublands",  # 6
    "Woody Savannas",  # 7
    "Savannas",  # 8
    "Grasslands",  # 9
    "Permanent Wetlands",  # 10
    "Croplands",  # 11
    "Urban and Built-up Lands",  # 12
    "Cropland/Natural Vegetation Mosaics",  # 13
    "Permanent Snow and Ice",  # 14
    "Barren",  # 15
    "Water Bodies",  # 16
)


def resolve_landcover(raw: str | None) -> str:
    """Resolve a raw `LandCover` cell to its class label.

    Accepts integer text (``"7"``) and integral floats (``"7.0"``). Anything
    else, including indices outside ``0..16`` and missing cells, resolves to
    ``"unknown"``.

    Example:
        >>> resolve_landcover("9")
        'Grasslands'
        >>> resolve_landcover("17")
        'unknown'
    """
    if raw is None:
        return UNKNOWN_CATEGORY
    cleaned = raw.strip()
    if not cleaned:
        return UNKNOWN_CATEGORY

    try:
        number = float(cleaned)
    except ValueError:
        return UNKNOWN_CATEGORY
    if not math.isfinite(number) or not number.is_integer():
        return UNKNOWN_CATEGORY

    index = int(number)
    if 0 <= index < len(LANDCOVER_CLASSES):
        return LANDCOVER_CLASSES[index]
    return UNKNOWN_CATEGORY
