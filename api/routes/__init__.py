"""API route package for the FastAPI application."""

from .internal import internal_router
from .overlay import overlay_router

__all__ = ["internal_router", "overlay_router"]
