"""Global settings loaded from environment variables via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLEANURLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_dir: str = ""  # empty: log to stderr only
    log_level: str = "WARNING"
