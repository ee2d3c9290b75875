"""CLI entrypoint: load a hotspot export and print its overlay as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional, TextIO

from api.config import settings as api_settings
from api.fires.overlay import OVERLAY_MODES, OverlayConfig, build_overlay
from ingest.config import settings as source_settings
from ingest.hotspot_client import SourceUnavailable, load_points, resolve_source
from ingest.logging_utils import configure_logging
from ingest.normalize import NormalizationSummary

LOGGER = logging.getLogger("hotspot_overlay")


def run_hotspot_overlay(
    day: Optional[date],
    mode: str,
    source: Optional[str] = None,
    bucket_count: Optional[int] = None,
    cell_size_deg: Optional[float] = None,
    out: TextIO | None = None,
) -> int:
    """Build the overlay for one export and write it to `out`; returns the exit code."""
    out = out or sys.stdout
    if source is None:
        if day is None:
            LOGGER.error("Either --date or --source is required")
            return 2
        source = resolve_source(day, source_settings)

    try:
        config = OverlayConfig.from_settings(
            api_settings,
            mode,  # type: ignore[arg-type]
            bucket_count=bucket_count,
            cell_size_deg=cell_size_deg,
        )
    except ValueError as exc:
        LOGGER.error("Invalid overlay options: %s", exc)
        return 2

    LOGGER.info("Building %s overlay", mode, extra={"source": source})
    summary = NormalizationSummary()
    try:
        points = load_points(
            source,
            schema=config.schema,
            timeout_seconds=source_settings.request_timeout_seconds,
            summary=summary,
        )
    except SourceUnavailable as exc:
        LOGGER.error("Failed to load hotspot data: %s", exc)
        return 1

    overlay = build_overlay(points, mode, config)  # type: ignore[arg-type]

    payload = overlay.to_dict()
    payload["source"] = source
    payload["rows"] = {
        "total": summary.total_rows,
        "parsed": summary.parsed_rows,
        "dropped": dict(summary.dropped),
        "value_defaulted": summary.value_defaulted,
    }
    json.dump(payload, out, indent=2)
    out.write("\n")

    if not points:
        LOGGER.warning("No valid rows in %s", source)
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a hotspot map overlay.")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Export date YYYY-MM-DD (resolved against FIREWATCH_DATA_DIR / FIREWATCH_SOURCE_URL).",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Explicit CSV path or URL (overrides --date).",
    )
    parser.add_argument(
        "--mode",
        choices=OVERLAY_MODES,
        default="heatmap",
        help="Overlay mode.",
    )
    parser.add_argument(
        "--buckets",
        type=int,
        default=None,
        help="Override the legend bucket count.",
    )
    parser.add_argument(
        "--cell-size",
        type=float,
        default=None,
        help="Override the heatmap cell edge (degrees).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    configure_logging()
    args = parse_args(argv)
    exit_code = run_hotspot_overlay(
        args.date,
        args.mode,
        source=args.source,
        bucket_count=args.buckets,
        cell_size_deg=args.cell_size,
    )
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main(sys.argv[1:])
