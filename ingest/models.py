"""Common data structures for hotspot ingestion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from ingest.landcover import UNKNOWN_CATEGORY, resolve_landcover

CategoryResolver = Callable[[Optional[str]], str]


def resolve_free_category(raw: str | None) -> str:
    """Take a free-form category verbatim; empty or missing becomes ``"unknown"``."""
    return raw if raw else UNKNOWN_CATEGORY


@dataclass(frozen=True, slots=True)
class PointRecord:
    """Normalized hotspot ready for aggregation and rendering."""

    name: str
    latitude: float
    longitude: float
    value: float
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "value": self.value,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class RowSchema:
    """Which columns carry the measure and the category, and how categories resolve."""

    name_field: str = "name"
    latitude_field: str = "latitude"
    longitude_field: str = "longitude"
    value_field: str = "value"
    category_field: str = "category"
    resolve_category: CategoryResolver = resolve_free_category

    @classmethod
    def landcover(cls, **overrides: Any) -> "RowSchema":
        """Schema for exports where the category is a `LandCover` class index."""
        fields: Dict[str, Any] = {
            "category_field": "LandCover",
            "resolve_category": resolve_landcover,
        }
        fields.update(overrides)
        return cls(**fields)


DEFAULT_SCHEMA = RowSchema()
LANDCOVER_SCHEMA = RowSchema.landcover()


def detect_schema(fieldnames: Iterable[str] | None) -> RowSchema:
    """Pick the row schema from a CSV header.

    A header with `LandCover` and without `category` is a land-cover export;
    everything else uses the free-form category schema.
    """
    names = set(fieldnames or ())
    if LANDCOVER_SCHEMA.category_field in names and DEFAULT_SCHEMA.category_field not in names:
        return LANDCOVER_SCHEMA
    return DEFAULT_SCHEMA
