"""Application configuration.

Timeline defaults are read once from .env / SVGTWEEN_* environment variables
and used wherever a TimelineConfig does not override them.
"""
from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="SVGTWEEN_", extra="ignore")

    default_easing: str = "linear"
    speed: float = 1.0
    startup_delay_ms: float = 100.0  # Deferred start of play() so pending layout settles
    frame_interval_ms: float = Field(
        default=1000.0 / 60.0,
        validation_alias=AliasChoices("SVGTWEEN_FRAME_INTERVAL_MS", "SVGTWEEN_FRAME_MS"),
    )
    morph_segments: int = 220
    reshape_steps: int = 150
    output_dir: str = "outputs"
    log_level: str = "INFO"


settings = Settings()
