"""Pytest configuration for api tests.

This configuration file:
1. Adds the workspace root to sys.path so api tests can import from `ingest`
2. Registers custom pytest marks to eliminate warnings
3. Provides point and CSV fixtures shared by the overlay tests
"""
import sys
from pathlib import Path

import pytest

# Add workspace root to Python path for cross-package imports
workspace_root = Path(__file__).parent.parent.parent
if str(workspace_root) not in sys.path:
    sys.path.insert(0, str(workspace_root))

from ingest.models import PointRecord  # noqa: E402


def pytest_configure(config):
    """Register custom pytest marks."""
    config.addinivalue_line(
        "markers",
        "integration: end-to-end tests that read CSV files from disk",
    )


@pytest.fixture
def make_point():
    """Factory for `PointRecord`s with sensible defaults."""

    def _make(lat=-33.0, lon=151.0, value=0.0, category="unknown", name=""):
        return PointRecord(name=name, latitude=lat, longitude=lon, value=value, category=category)

    return _make


@pytest.fixture
def sample_points(make_point):
    """Two hotspots at the same location, values 80 (A) and 20 (B)."""
    return [
        make_point(value=80.0, category="A", name="first"),
        make_point(value=20.0, category="B", name="second"),
    ]


@pytest.fixture
def hotspot_csv(tmp_path):
    """Write a small daily export and return its path."""
    path = tmp_path / "hotspots20250630.csv"
    path.write_text(
        "name,latitude,longitude,value,category\n"
        "Dubbo,-32.25,148.60,80,Grasslands\n"
        "Orange,-33.28,149.10,20,Croplands\n"
        "Broken,not-a-number,150.00,55,Croplands\n"
        "Bathurst,-33.42,149.58,,Croplands\n",
        encoding="utf-8",
    )
    return path
