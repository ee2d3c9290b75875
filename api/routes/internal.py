from fastapi import APIRouter

from api.config import settings
from api.fires import dataset as dataset_store

internal_router = APIRouter(tags=["internal"])


@internal_router.get("/health")
async def healthcheck() -> dict:
    """Simple health endpoint used for local dev and readiness checks."""
    return {"status": "ok"}


@internal_router.get("/version")
async def version() -> dict:
    """Return the current app version and deployment metadata."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "git_commit": settings.git_commit,
        "environment": settings.environment,
    }


@internal_router.get("/status")
async def dataset_status() -> dict:
    """Describe the currently applied hotspot dataset, if any."""
    dataset = dataset_store.store.current
    if dataset is None:
        return {"loaded": False}
    return {
        "loaded": True,
        "date": dataset.day.isoformat() if dataset.day else None,
        "source": dataset.source,
        "points": len(dataset.points),
        "loaded_at": dataset.loaded_at.isoformat(),
        "error": dataset.error,
        "warning": dataset.warning,
    }
