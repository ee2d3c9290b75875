"""Standardized error responses."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response model."""
    code: str
    message: str
    details: Optional[Any] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "code": "source_unavailable",
                "message": "Failed to load hotspot data",
                "details": {"source": "data/hotspots20250630.csv"},
            }
        }
    }


class OverlayHTTPError(Exception):
    """Raised by routes to return an `ErrorResponse` with a given status."""

    def __init__(self, status_code: int, code: str, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """Render `OverlayHTTPError` as an `ErrorResponse` body."""

    @app.exception_handler(OverlayHTTPError)
    async def _overlay_http_error(request: Request, exc: OverlayHTTPError) -> JSONResponse:
        return error_response(exc.status_code, exc.code, exc.message, exc.details)

