from __future__ import annotations

import os
import subprocess
from importlib import metadata
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from api.core.grid import DEFAULT_CELL_SIZE_DEG, NSW_DOMAIN, DomainBounds
from api.core.theme import BucketCounts, Palettes


def _get_project_version() -> str:
    try:
        return metadata.version("firewatch-overlay")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def _get_git_commit() -> str:
    if (value := os.getenv("GIT_COMMIT")):
        return value

    repo_root = Path(__file__).resolve().parent.parent
    if (repo_root / ".git").exists():
        try:
            result = subprocess.run(
                ["git", "rev-parse", "HEAD"],
                cwd=repo_root,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except (OSError, subprocess.CalledProcessError):
            pass

    return "unknown"


def _split_palette(value: object, default: tuple[str, ...], env_name: str) -> List[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        colors = [segment.strip() for segment in value.split(",") if segment.strip()]
    elif isinstance(value, (list, tuple)):
        colors = [str(segment).strip() for segment in value if str(segment).strip()]
    else:
        raise ValueError(f"{env_name} must be a comma-separated string or list.")
    if not colors:
        raise ValueError(f"{env_name} must contain at least one color.")
    return colors


def _default_domain() -> str:
    d = NSW_DOMAIN
    return f"{d.west},{d.south},{d.east},{d.north}"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    app_name: str = "Fire Watch Overlay API"
    version: str = Field(default_factory=_get_project_version)
    environment: str = Field(default="dev", validation_alias="APP_ENV")
    git_commit: str = Field(default_factory=_get_git_commit, validation_alias="GIT_COMMIT")

    # Overlay defaults (callers may override per request)
    overlay_bucket_count: int = Field(default=BucketCounts.GENERIC, validation_alias="OVERLAY_BUCKET_COUNT")
    overlay_heatmap_bucket_count: int = Field(
        default=BucketCounts.HEATMAP,
        validation_alias="OVERLAY_HEATMAP_BUCKET_COUNT",
    )
    overlay_palette: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(Palettes.DOT),
        validation_alias="OVERLAY_PALETTE",
    )
    overlay_heatmap_palette: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(Palettes.HEATMAP),
        validation_alias="OVERLAY_HEATMAP_PALETTE",
    )
    overlay_cell_size_deg: float = Field(default=DEFAULT_CELL_SIZE_DEG, validation_alias="OVERLAY_CELL_SIZE_DEG")
    overlay_domain: str = Field(default_factory=_default_domain, validation_alias="OVERLAY_DOMAIN")

    @field_validator("overlay_bucket_count", "overlay_heatmap_bucket_count", mode="before")
    @classmethod
    def _validate_bucket_count(cls, value: object) -> int:
        val = int(value)  # raises if not numeric
        if val < 1:
            raise ValueError("Overlay bucket counts must be at least 1")
        return val

    @field_validator("overlay_palette", mode="before")
    @classmethod
    def _split_overlay_palette(cls, value: object) -> List[str]:
        return _split_palette(value, Palettes.DOT, "OVERLAY_PALETTE")

    @field_validator("overlay_heatmap_palette", mode="before")
    @classmethod
    def _split_heatmap_palette(cls, value: object) -> List[str]:
        return _split_palette(value, Palettes.HEATMAP, "OVERLAY_HEATMAP_PALETTE")

    @field_validator("overlay_cell_size_deg", mode="before")
    @classmethod
    def _validate_cell_size(cls, value: object) -> float:
        val = float(value)
        if not val > 0:
            raise ValueError("OVERLAY_CELL_SIZE_DEG must be positive")
        return val

    @field_validator("overlay_domain", mode="before")
    @classmethod
    def _validate_domain(cls, value: object) -> str:
        if value is None:
            return _default_domain()
        if not isinstance(value, str):
            raise ValueError("OVERLAY_DOMAIN must be a string")
        DomainBounds.from_bbox_string(value)  # raises on malformed or inverted bounds
        return value.strip()

    @property
    def resolved_domain(self) -> DomainBounds:
        """Parse the configured `west,south,east,north` domain."""
        return DomainBounds.from_bbox_string(self.overlay_domain)


settings = AppSettings()
