"""Normalize raw hotspot CSV rows into `PointRecord`s.

Coercion rules
- `latitude` / `longitude`: parsed with `float()`; a missing, empty,
  unparseable or non-finite coordinate excludes the row.
- `value`: a missing or empty cell is read as ``"0"``; an unparseable or
  non-finite value is also coerced to ``0.0``. Downstream, "missing" and
  "zero" cannot be told apart.
- `category`: resolved by the row schema (verbatim or land-cover lookup),
  never missing.
- `name`: empty string when absent.

Excluded rows are never surfaced individually; they are logged at debug level
and counted in an optional `NormalizationSummary`.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional

from ingest.logging_utils import log_event
from ingest.models import DEFAULT_SCHEMA, PointRecord, RowSchema

LOGGER = logging.getLogger(__name__)

RawRow = Mapping[str, Optional[str]]


class MalformedRow(ValueError):
    """Raised when a raw row cannot be coerced into a point."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


@dataclass
class NormalizationSummary:
    """Counts collected while a normalization generator is consumed."""

    total_rows: int = 0
    parsed_rows: int = 0
    value_defaulted: int = 0
    dropped: Counter[str] = field(default_factory=Counter)

    @property
    def dropped_rows(self) -> int:
        return sum(self.dropped.values())


def _parse_coordinate(raw: str | None, field_name: str) -> float:
    if raw is None or not raw.strip():
        raise MalformedRow("missing_coordinate", f"Missing {field_name}.")
    try:
        coord = float(raw)
    except ValueError as exc:
        raise MalformedRow("non_numeric_coordinate", f"Non-numeric {field_name}: {raw!r}.") from exc
    if not math.isfinite(coord):
        raise MalformedRow("non_finite_coordinate", f"Non-finite {field_name}: {raw!r}.")
    return coord


def _parse_value(raw: str | None) -> tuple[float, bool]:
    """Return `(value, defaulted)`; defaulted is True when the cell was not a usable number."""
    text = raw.strip() if raw else ""
    if not text:
        return 0.0, True
    try:
        value = float(text)
    except ValueError:
        return 0.0, True
    if not math.isfinite(value):
        return 0.0, True
    return value, False


def _coerce(row: RawRow, schema: RowSchema) -> tuple[PointRecord, bool]:
    latitude = _parse_coordinate(row.get(schema.latitude_field), schema.latitude_field)
    longitude = _parse_coordinate(row.get(schema.longitude_field), schema.longitude_field)
    value, defaulted = _parse_value(row.get(schema.value_field))

    point = PointRecord(
        name=row.get(schema.name_field) or "",
        latitude=latitude,
        longitude=longitude,
        value=value,
        category=schema.resolve_category(row.get(schema.category_field)),
    )
    return point, defaulted


def coerce_row(row: RawRow, schema: RowSchema = DEFAULT_SCHEMA) -> PointRecord:
    """Coerce one raw row; raises `MalformedRow` when the coordinates are unusable."""
    point, _ = _coerce(row, schema)
    return point


def normalize_rows(
    rows: Iterable[RawRow],
    schema: RowSchema = DEFAULT_SCHEMA,
    *,
    summary: NormalizationSummary | None = None,
) -> Iterator[PointRecord]:
    """Lazily yield a `PointRecord` for every row with usable coordinates.

    The returned generator can be consumed once. When `summary` is given it is
    updated as rows are pulled.
    """
    for index, row in enumerate(rows):
        if summary is not None:
            summary.total_rows += 1
        try:
            point, defaulted = _coerce(row, schema)
        except MalformedRow as exc:
            if summary is not None:
                summary.dropped[exc.reason] += 1
            log_event(
                LOGGER,
                "hotspot.validation",
                "Skipping row",
                level="debug",
                row_index=index,
                reason=exc.reason,
                detail=str(exc),
            )
            continue

        if summary is not None:
            summary.parsed_rows += 1
            if defaulted:
                summary.value_defaulted += 1
        yield point
