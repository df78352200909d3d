"""Repo Insights settings.

Read from ``RI_``-prefixed environment variables or a ``.env`` file.
The engine limits default to the report layout: 8 languages, 10 topics,
5 repositories per highlight list, a one-year maintenance window.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Repo Insights"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    metrics_enabled: bool = True

    # Engine limits
    language_limit: int = Field(default=8, ge=1)
    topic_limit: int = Field(default=10, ge=1)
    highlight_limit: int = Field(default=5, ge=1)
    maintenance_window_days: int = Field(default=365, ge=1)
    max_repositories: int = Field(default=1000, ge=1)

    # JSON file merged over the built-in technology keyword tables
    tech_registry_path: Path | None = None

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
