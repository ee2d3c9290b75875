"""Overlay endpoints returning classified hotspot aggregates for the map renderer."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from api.config import settings
from api.errors import OverlayHTTPError
from api.fires import dataset as dataset_store
from api.fires.dataset import Dataset
from api.fires.overlay import Mode, OverlayConfig, build_overlay

overlay_router = APIRouter(prefix="/overlay", tags=["overlay"])


def _render(dataset: Dataset, mode: Mode, buckets: Optional[int], cell_size_deg: Optional[float]) -> dict:
    if not dataset.ok:
        raise OverlayHTTPError(
            502,
            "source_unavailable",
            dataset.error or "Failed to load hotspot data",
            {"source": dataset.source, "reason": dataset.error_detail},
        )

    try:
        config = OverlayConfig.from_settings(settings, mode, bucket_count=buckets, cell_size_deg=cell_size_deg)
    except ValueError as exc:
        raise OverlayHTTPError(422, "invalid_grid", str(exc), {"cell_size_deg": cell_size_deg}) from exc
    overlay = build_overlay(dataset.points, mode, config)
    payload = overlay.to_dict()
    payload["date"] = dataset.day.isoformat() if dataset.day else None
    payload["source"] = dataset.source
    payload["message"] = dataset.warning
    return payload


@overlay_router.get("")
def get_overlay(
    day: date = Query(..., alias="date", description="Hotspot export date (YYYY-MM-DD)"),
    mode: Mode = Query("heatmap", description="Overlay mode: dot, choropleth or heatmap"),
    buckets: Optional[int] = Query(None, ge=1, le=20, description="Legend bucket count override"),
    cell_size_deg: Optional[float] = Query(None, gt=0, le=10, description="Heatmap cell edge in degrees"),
):
    """
    Load the hotspot export for `day` and return it as an overlay.

    The freshly loaded dataset replaces the currently applied one. A source that
    cannot be read yields HTTP 502 with `code=source_unavailable`.
    """
    dataset = dataset_store.store.load(day)
    return _render(dataset, mode, buckets, cell_size_deg)


@overlay_router.get("/current")
def get_current_overlay(
    mode: Mode = Query("heatmap", description="Overlay mode: dot, choropleth or heatmap"),
    buckets: Optional[int] = Query(None, ge=1, le=20, description="Legend bucket count override"),
    cell_size_deg: Optional[float] = Query(None, gt=0, le=10, description="Heatmap cell edge in degrees"),
):
    """Re-classify the currently applied dataset, e.g. after a mode switch."""
    dataset = dataset_store.store.current
    if dataset is None:
        raise OverlayHTTPError(404, "no_dataset", "No hotspot dataset has been loaded yet")
    return _render(dataset, mode, buckets, cell_size_deg)
