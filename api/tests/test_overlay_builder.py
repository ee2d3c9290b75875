import math

import pytest

from api.config import AppSettings
from api.core.grid import GridSpec
from api.core.theme import Palettes
from api.fires.overlay import OVERLAY_MODES, OverlayConfig, build_overlay

TWO_COLORS = ("#aaaaaa", "#bbbbbb")


def test_end_to_end_two_points_two_buckets(sample_points):
    config = OverlayConfig(bucket_count=2, palette=TWO_COLORS)
    overlay = build_overlay(sample_points, "dot", config)

    assert [(b.lo, b.hi) for b in overlay.buckets] == [(20.0, 50.0), (50.0, 80.0)]
    assert overlay.colors == TWO_COLORS
    assert overlay.classify(80.0) == "#bbbbbb"
    assert overlay.classify(20.0) == "#aaaaaa"


def test_modes_are_fixed():
    assert OVERLAY_MODES == ("dot", "choropleth", "heatmap")


def test_dot_payload_carries_color_and_radius(sample_points):
    config = OverlayConfig(bucket_count=2, palette=TWO_COLORS)
    payload = build_overlay(sample_points, "dot", config).to_dict()

    assert payload["mode"] == "dot"
    assert payload["count"] == 2
    first, second = payload["points"]
    assert first["color"] == "#bbbbbb"
    assert first["radius"] == pytest.approx(18.0)
    assert second["color"] == "#aaaaaa"
    assert second["radius"] == pytest.approx(6.0)
    assert "cells" not in payload
    assert "categories" not in payload


def test_choropleth_quantizes_category_sums(make_point):
    points = [
        make_point(value=10.0, category="A"),
        make_point(value=30.0, category="A"),
        make_point(value=5.0, category="B"),
        make_point(value=100.0, category="C"),
    ]
    config = OverlayConfig(bucket_count=5, palette=Palettes.CHOROPLETH)
    overlay = build_overlay(points, "choropleth", config)

    assert overlay.categories == {"A": 40.0, "B": 5.0, "C": 100.0}
    assert overlay.buckets[0].lo == 5.0
    assert overlay.buckets[-1].hi == 100.0

    categories = {row["category"]: row for row in overlay.to_dict()["categories"]}
    assert categories["B"]["color"] == Palettes.CHOROPLETH[0]
    assert categories["C"]["color"] == Palettes.CHOROPLETH[-1]
    assert categories["A"]["total"] == 40.0


def test_choropleth_with_huge_category_sums_still_classifies(make_point):
    points = [
        make_point(value=1.7e308, category="A"),
        make_point(value=1.7e308, category="A"),
        make_point(value=1.0, category="B"),
    ]
    config = OverlayConfig(bucket_count=5, palette=Palettes.CHOROPLETH)
    payload = build_overlay(points, "choropleth", config).to_dict()

    categories = {row["category"]: row for row in payload["categories"]}
    assert math.isfinite(categories["A"]["total"])
    assert categories["A"]["color"] == Palettes.CHOROPLETH[-1]
    assert categories["B"]["color"] == Palettes.CHOROPLETH[0]
    assert payload["buckets"][-1]["hi"] == categories["A"]["total"]


def test_heatmap_quantizes_cell_densities(make_point):
    grid = GridSpec.from_bounds(south=0.0, north=2.0, west=0.0, east=2.0, cell_size_deg=1.0)
    points = [
        make_point(lat=0.5, lon=0.5, value=10.0),
        make_point(lat=0.6, lon=0.6, value=30.0),
        make_point(lat=1.5, lon=1.5, value=80.0),
        make_point(lat=5.0, lon=5.0, value=999.0),  # outside the domain
    ]
    config = OverlayConfig(bucket_count=6, palette=Palettes.HEATMAP, grid=grid)
    overlay = build_overlay(points, "heatmap", config)

    assert [c.density for c in overlay.cells] == [pytest.approx(20.0), pytest.approx(80.0)]
    assert overlay.buckets[0].lo == pytest.approx(20.0)
    assert overlay.buckets[-1].hi == pytest.approx(80.0)

    cells = overlay.to_dict()["cells"]
    assert cells[0]["color"] == Palettes.HEATMAP[0]
    assert cells[1]["color"] == Palettes.HEATMAP[-1]
    assert cells[1]["bounds"] == [[1.0, 1.0], [2.0, 2.0]]
    # the filtered point list is always handed over, domain or not
    assert overlay.to_dict()["count"] == 4


@pytest.mark.parametrize("mode", ["dot", "choropleth", "heatmap"])
def test_empty_dataset_has_no_buckets(mode):
    overlay = build_overlay([], mode, OverlayConfig())

    assert overlay.buckets == ()
    assert overlay.colors == ()
    assert overlay.legend == []
    assert overlay.classify(12.0) == Palettes.DOT[0]


def test_heatmap_with_every_point_outside_domain_has_no_buckets(make_point):
    grid = GridSpec.from_bounds(south=0.0, north=1.0, west=0.0, east=1.0, cell_size_deg=1.0)
    overlay = build_overlay([make_point(lat=50.0, lon=50.0, value=3.0)], "heatmap", OverlayConfig(grid=grid))
    assert overlay.cells == ()
    assert overlay.buckets == ()


def test_unknown_mode_is_rejected(sample_points):
    with pytest.raises(ValueError, match="Unsupported overlay mode"):
        build_overlay(sample_points, "contour", OverlayConfig())  # type: ignore[arg-type]


def test_config_validates_bucket_count_and_palette():
    with pytest.raises(ValueError):
        OverlayConfig(bucket_count=0)
    with pytest.raises(ValueError):
        OverlayConfig(palette=())

    config = OverlayConfig(palette=["#000000"])  # type: ignore[arg-type]
    assert config.palette == ("#000000",)


def test_config_from_settings_picks_variant_per_mode(monkeypatch):
    monkeypatch.setenv("OVERLAY_DOMAIN", "0,0,10,5")
    monkeypatch.setenv("OVERLAY_CELL_SIZE_DEG", "0.25")
    app_settings = AppSettings()

    dot = OverlayConfig.from_settings(app_settings, "dot")
    assert dot.bucket_count == 5
    assert dot.palette == Palettes.DOT

    heat = OverlayConfig.from_settings(app_settings, "heatmap")
    assert heat.bucket_count == 6
    assert heat.palette == Palettes.HEATMAP
    assert heat.grid.cell_size_deg == 0.25
    assert (heat.grid.domain.west, heat.grid.domain.south) == (0.0, 0.0)
    assert (heat.grid.domain.east, heat.grid.domain.north) == (10.0, 5.0)

    override = OverlayConfig.from_settings(app_settings, "heatmap", bucket_count=3, cell_size_deg=1.0)
    assert override.bucket_count == 3
    assert override.grid.cell_size_deg == 1.0
