"""Overlay design tokens: palettes, bucket counts and marker sizing.

Single source of truth for the colors handed to the map renderer. Palettes are
ordered light → dark and are index-aligned with value buckets (rank 0 gets the
first color).

Usage Examples:
    From settings defaults:
        overlay_palette: list[str] = list(Palettes.DOT)

    From the classifier:
        color_for_value(value, buckets, Palettes.HEATMAP)
"""


class Palettes:
    """Hex color scales for the three overlay modes.

    - DOT / CHOROPLETH: 5-tier pink-to-purple scale (generic/category variant)
    - HEATMAP: 6-tier yellow-to-red scale (land-cover/heatmap variant)
    """
    DOT = (
        "#feebe2",
        "#fbb4b9",
        "#f768a1",
        "#c51b8a",
        "#7a0177",
    )
    CHOROPLETH = DOT
    HEATMAP = (
        "#ffffb2",
        "#fed976",
        "#feb24c",
        "#fd8d3c",
        "#f03b20",
        "#bd0026",
    )


class BucketCounts:
    """Legend sizes per overlay variant."""
    GENERIC = 5   # dot and choropleth
    HEATMAP = 6   # land-cover / heatmap


class MarkerSizing:
    """Dot-mode marker radius, linear in the value's position within [min, max].

    radius = MIN_RADIUS + normalized * RADIUS_SPAN, i.e. between 6 and 18.
    DEFAULT_RADIUS applies when the value range is empty or degenerate.
    """
    MIN_RADIUS = 6.0
    RADIUS_SPAN = 12.0
    DEFAULT_RADIUS = 8.0
