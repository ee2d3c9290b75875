"""Shared helpers for structured/consistent hotspot logging."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for CLI entry points."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _encode_context(context: Mapping[str, Any]) -> str:
    try:
        return json.dumps(context, default=str, sort_keys=True)
    except TypeError:
        # Mixed-type keys cannot be sorted.
        safe_ctx = {str(k): str(v) for k, v in context.items()}
        return json.dumps(safe_ctx, sort_keys=True)


def log_event(
    logger: logging.Logger,
    event: str,
    message: str,
    *,
    level: str = "info",
    **fields: Any,
) -> None:
    """Emit `[event] message | {context}` with the context also attached as `extra`.

    Fields whose value is ``None`` are left out of the context.

    Example:
        log_event(LOGGER, "hotspot.validation", "Dropped row", level="debug", reason="bad_lat")
    """
    context = {k: v for k, v in fields.items() if v is not None}
    payload = f"[{event}] {message}"
    if context:
        payload = f"{payload} | {_encode_context(context)}"

    log_fn = getattr(logger, level, logger.info)
    log_fn(payload, extra={"event": event, "context": context})
