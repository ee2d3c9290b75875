"""Hold the currently applied hotspot dataset and swap in new loads atomically."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional, Sequence

from ingest.config import HotspotSourceSettings, settings as source_settings
from ingest.hotspot_client import SourceUnavailable, load_points, resolve_source
from ingest.logging_utils import log_event
from ingest.models import PointRecord, RowSchema

LOGGER = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load hotspot data"
NO_VALID_ROWS_MESSAGE = (
    "No valid data found in CSV file. Please ensure it has columns: "
    "name, latitude, longitude, value, category"
)

PointLoader = Callable[..., Sequence[PointRecord]]


@dataclass(frozen=True)
class Dataset:
    """Immutable snapshot of one load. `error` is set on total failure."""

    day: Optional[date]
    source: str
    points: tuple[PointRecord, ...]
    loaded_at: datetime
    error: Optional[str] = None
    error_detail: Optional[str] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DatasetStore:
    """Owner of the applied dataset.

    Each `load` builds a complete `Dataset` before publishing it with a single
    reference swap, so readers see either the old snapshot or the new one. Loads
    are numbered; one that finishes after a newer load was applied is discarded.
    """

    def __init__(
        self,
        config: HotspotSourceSettings | None = None,
        loader: PointLoader = load_points,
    ) -> None:
        self._config = config or source_settings
        self._loader = loader
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._applied_seq = 0
        self._current: Optional[Dataset] = None

    @property
    def current(self) -> Optional[Dataset]:
        return self._current

    def load(self, day: date, *, schema: RowSchema | None = None) -> Dataset:
        """Load the export for `day` and apply it."""
        return self.load_source(resolve_source(day, self._config), day=day, schema=schema)

    def load_source(
        self,
        source: str,
        *,
        day: Optional[date] = None,
        schema: RowSchema | None = None,
    ) -> Dataset:
        """Load an explicit path or URL and apply it; never raises `SourceUnavailable`."""
        with self._lock:
            seq = next(self._sequence)

        try:
            points = tuple(
                self._loader(
                    source,
                    schema=schema,
                    timeout_seconds=self._config.request_timeout_seconds,
                )
            )
        except SourceUnavailable as exc:
            LOGGER.error("Hotspot load failed for %s: %s", source, exc)
            dataset = Dataset(
                day=day,
                source=source,
                points=(),
                loaded_at=datetime.now(timezone.utc),
                error=LOAD_FAILED_MESSAGE,
                error_detail=str(exc),
            )
        else:
            dataset = Dataset(
                day=day,
                source=source,
                points=points,
                loaded_at=datetime.now(timezone.utc),
                warning=None if points else NO_VALID_ROWS_MESSAGE,
            )

        return self._apply(seq, dataset)

    def _apply(self, seq: int, dataset: Dataset) -> Dataset:
        with self._lock:
            if seq < self._applied_seq:
                log_event(
                    LOGGER,
                    "dataset.apply",
                    "Discarding stale load",
                    level="warning",
                    seq=seq,
                    applied_seq=self._applied_seq,
                    source=dataset.source,
                )
                return dataset
            self._applied_seq = seq
            self._current = dataset
        log_event(
            LOGGER,
            "dataset.apply",
            "Applied dataset",
            seq=seq,
            source=dataset.source,
            points=len(dataset.points),
            error=dataset.error,
        )
        return dataset


store = DatasetStore()
