"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads defaults for the fixture
generator from environment variables and a `.env` file. Command-line options
always take precedence over these values.

The `get_settings` function provides a cached, singleton instance of the
configuration. `ExtractionConfig` is the explicit, per-run description of
which capture and channel to read; it is passed down to the capture reader
instead of any process-wide state.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    """Defines all application configuration parameters."""

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Capture selection
    HAR_FILE: Optional[str] = Field(
        default=None, description="Default path to the HAR capture when --input is omitted"
    )
    WS_URL: Optional[str] = Field(
        default=None,
        description=(
            "Default WebSocket request URL selecting the channel. Empty means the "
            "first WebSocket entry of the capture."
        ),
    )

    # Output
    FIXTURE_OUTPUT_FILE: Optional[str] = Field(
        default=None, description="Write the fixture table here instead of stdout"
    )
    FIXTURE_INDENT: int = Field(
        default=2, ge=0, description="JSON indentation width of the rendered fixture"
    )

    # Decoding behavior
    STRICT_DECODE: bool = Field(
        default=True,
        description=(
            "Abort on the first frame body that is not valid JSON. When false such "
            "frames are logged and skipped (fixture may then be incomplete)."
        ),
    )

    @field_validator("HAR_FILE", "WS_URL", "FIXTURE_OUTPUT_FILE", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        """Trim whitespace and normalize blank -> None for optional paths/URLs."""
        if v is None:
            return None
        if isinstance(v, str):
            trimmed = v.strip()
            return trimmed or None
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v


class ExtractionConfig(BaseModel):
    """Which capture to read and which channel to extract from it."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    filter_url: Optional[str] = None

    @field_validator("filter_url", mode="before")
    @classmethod
    def blank_url_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str):
            return v.strip() or None
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the application settings."""
    return Settings()


__all__ = ["Settings", "ExtractionConfig", "get_settings"]
