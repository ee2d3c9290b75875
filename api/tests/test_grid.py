import numpy as np
import pytest

from api.core.grid import (
    DEFAULT_CELL_SIZE_DEG,
    NSW_DOMAIN,
    DomainBounds,
    GridSpec,
    cell_bounds,
    index_to_origin,
    latlon_to_index,
)


def test_grid_defaults_cover_nsw():
    grid = GridSpec()
    assert grid.domain == NSW_DOMAIN
    assert grid.cell_size_deg == DEFAULT_CELL_SIZE_DEG
    assert (grid.origin_lon, grid.origin_lat) == (140.9, -37.5)
    # 9.4 / 0.5 -> 19 rows, 12.7 / 0.5 -> 26 columns (ceil)
    assert grid.n_lat == 19
    assert grid.n_lon == 26


def test_grid_origin_is_domain_southwest_corner_without_snapping():
    grid = GridSpec.from_bounds(south=-37.3, north=-30.0, west=141.2, east=150.0, cell_size_deg=1.0)
    assert grid.origin_lat == -37.3
    assert grid.origin_lon == 141.2

    lat, lon = index_to_origin(grid, 0, 0)
    assert float(lat) == -37.3
    assert float(lon) == 141.2


def test_latlon_to_index_uses_floor_and_lower_bound_wins_on_edges():
    grid = GridSpec.from_bounds(south=0.0, north=3.0, west=0.0, east=3.0, cell_size_deg=1.0)

    i, j = latlon_to_index(grid, np.array([0.5, 1.0, 2.999]), np.array([2.5, 2.0, 0.0]))
    assert i.tolist() == [0, 1, 2]
    assert j.tolist() == [2, 2, 0]


def test_cell_bounds_are_origin_plus_cell_size():
    grid = GridSpec.from_bounds(south=-37.5, north=-28.1, west=140.9, east=153.6, cell_size_deg=0.5)
    (south, west), (north, east) = cell_bounds(grid, 9, 20)
    assert south == pytest.approx(-33.0)
    assert west == pytest.approx(150.9)
    assert north == pytest.approx(-32.5)
    assert east == pytest.approx(151.4)


def test_partial_last_row_is_counted():
    grid = GridSpec.from_bounds(south=0.0, north=2.5, west=0.0, east=1.0, cell_size_deg=1.0)
    assert grid.n_lat == 3
    assert grid.n_lon == 1


def test_domain_contains_is_half_open():
    domain = DomainBounds(south=0.0, north=1.0, west=10.0, east=11.0)
    assert domain.contains(0.0, 10.0) is True
    assert domain.contains(0.999, 10.999) is True
    assert domain.contains(1.0, 10.5) is False
    assert domain.contains(0.5, 11.0) is False
    assert domain.contains(-0.001, 10.5) is False

    mask = domain.contains(np.array([0.5, 2.0]), np.array([10.5, 10.5]))
    assert mask.tolist() == [True, False]


def test_domain_from_bbox_string_is_west_south_east_north():
    domain = DomainBounds.from_bbox_string("140.9, -37.5, 153.6, -28.1")
    assert domain == NSW_DOMAIN


@pytest.mark.parametrize(
    "kwargs",
    [
        {"south": 1.0, "north": 0.0, "west": 0.0, "east": 1.0},
        {"south": 0.0, "north": 1.0, "west": 2.0, "east": 2.0},
        {"south": float("nan"), "north": 1.0, "west": 0.0, "east": 1.0},
    ],
)
def test_domain_rejects_inverted_or_non_finite_bounds(kwargs):
    with pytest.raises(ValueError):
        DomainBounds(**kwargs)


@pytest.mark.parametrize("cell", [0.0, -0.5, float("inf")])
def test_grid_rejects_bad_cell_size(cell):
    with pytest.raises(ValueError):
        GridSpec(cell_size_deg=cell)


@pytest.mark.parametrize("cell", [1e-300, 5e-324])
def test_grid_rejects_cells_too_fine_to_index(cell):
    with pytest.raises(ValueError, match="too fine"):
        GridSpec(cell_size_deg=cell)


def test_grid_accepts_fine_but_indexable_cells():
    grid = GridSpec(cell_size_deg=1e-9)
    assert grid.n_lat == pytest.approx(9.4e9, rel=1e-9)
    assert grid.n_lon == pytest.approx(1.27e10, rel=1e-9)
