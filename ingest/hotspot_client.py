"""Helpers for locating, downloading and parsing daily hotspot CSV files."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from ingest.config import HotspotSourceSettings, settings as source_settings
from ingest.logging_utils import log_event
from ingest.models import PointRecord, RowSchema, detect_schema
from ingest.normalize import NormalizationSummary, normalize_rows

LOGGER = logging.getLogger(__name__)

HOTSPOT_FILENAME_TEMPLATE = "hotspots{stamp}.csv"
REQUIRED_COLUMNS = ("latitude", "longitude")
CSV_CONTENT_TYPES = frozenset(
    {
        "text/csv",
        "text/plain",
        "application/csv",
        "application/vnd.ms-excel",
        "application/octet-stream",
    }
)


class SourceUnavailable(RuntimeError):
    """Raised when a hotspot source cannot be read or is not tabular."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{message} ({source})")
        self.source = source


def hotspot_filename(day: date) -> str:
    """Daily export name, e.g. ``hotspots20250630.csv``."""
    return HOTSPOT_FILENAME_TEMPLATE.format(stamp=day.strftime("%Y%m%d"))


def resolve_source(day: date, config: HotspotSourceSettings | None = None) -> str:
    """Return the URL (when a base URL is configured) or local path for a day's export."""
    config = config or source_settings
    filename = hotspot_filename(day)
    if config.source_base_url:
        return f"{config.source_base_url}/{filename}"
    return str(Path(config.data_dir) / filename)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_csv_text(source: str, timeout_seconds: float = 30.0) -> str:
    """Read the raw CSV payload from a URL or a local path."""
    if not _is_url(source):
        try:
            return Path(source).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(source, f"Failed to read hotspot file: {exc}") from exc

    log_event(LOGGER, "hotspot.fetch", "Requesting hotspot CSV", url=source)
    try:
        response = httpx.get(source, timeout=timeout_seconds, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise SourceUnavailable(source, f"Failed to fetch hotspot data: {exc}") from exc

    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type and content_type not in CSV_CONTENT_TYPES:
        raise SourceUnavailable(source, f"Unexpected content type {content_type!r}")
    # Match the utf-8-sig read of local files.
    return response.text.removeprefix("\ufeff")


def read_csv_rows(text: str, source: str = "<memory>") -> tuple[List[Dict[str, str]], List[str]]:
    """Parse CSV text into header-driven rows; returns `(rows, fieldnames)`.

    A payload without a header or without both coordinate columns is treated as
    non-tabular.
    """
    reader = csv.DictReader(io.StringIO(text))
    try:
        fieldnames = [name.strip() for name in (reader.fieldnames or [])]
        reader.fieldnames = fieldnames
        rows = list(reader)
    except csv.Error as exc:
        raise SourceUnavailable(source, f"Malformed CSV payload: {exc}") from exc

    missing = [col for col in REQUIRED_COLUMNS if col not in fieldnames]
    if missing:
        raise SourceUnavailable(source, f"Payload is not a hotspot table; missing columns {missing}")
    return rows, fieldnames


def load_points(
    source: str,
    *,
    schema: Optional[RowSchema] = None,
    timeout_seconds: float | None = None,
    summary: NormalizationSummary | None = None,
) -> List[PointRecord]:
    """Fetch, parse and normalize one hotspot source.

    The schema is detected from the header unless given. Raises
    `SourceUnavailable` on total failure; individual bad rows are dropped.
    """
    timeout = timeout_seconds if timeout_seconds is not None else source_settings.request_timeout_seconds
    text = fetch_csv_text(source, timeout_seconds=timeout)
    rows, fieldnames = read_csv_rows(text, source=source)

    effective_schema = schema or detect_schema(fieldnames)
    log_event(
        LOGGER,
        "hotspot.schema",
        "Resolved row schema",
        level="debug",
        source=source,
        category_field=effective_schema.category_field,
    )

    summary = summary if summary is not None else NormalizationSummary()
    points = list(normalize_rows(rows, effective_schema, summary=summary))
    LOGGER.info(
        "Loaded %s points from %s rows (dropped=%s, value_defaulted=%s)",
        summary.parsed_rows,
        summary.total_rows,
        summary.dropped_rows,
        summary.value_defaulted,
        extra={"source": source},
    )
    return points
