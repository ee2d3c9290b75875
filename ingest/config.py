"""Configuration helpers for hotspot source loading."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env", override=False)


class HotspotSourceSettings(BaseSettings):
    """Environment-driven configuration for where daily hotspot CSVs live."""

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(default=REPO_ROOT / "data", validation_alias="FIREWATCH_DATA_DIR")
    source_base_url: Optional[str] = Field(default=None, validation_alias="FIREWATCH_SOURCE_URL")
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="FIREWATCH_REQUEST_TIMEOUT_SECONDS",
    )

    @field_validator("source_base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, str):
            cleaned = value.strip().rstrip("/")
            return cleaned or None
        raise ValueError("FIREWATCH_SOURCE_URL must be a string")

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _validate_timeout(cls, value: object) -> float:
        val = float(value)  # raises if not numeric
        if val <= 0:
            raise ValueError("FIREWATCH_REQUEST_TIMEOUT_SECONDS must be positive")
        return val


settings = HotspotSourceSettings()
