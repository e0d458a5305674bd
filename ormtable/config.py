"""Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with an ORMTABLE_-prefixed environment variable
    - get_settings() is cached (lru_cache): single instance per process
    - log_level is always an upper-case standard logging level name

Design Decisions:
    - Defaults work without any environment: in-memory SQLite, INFO logs, JSON format
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ormtable settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORMTABLE_", env_file=".env", case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite://"
    database_echo: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
