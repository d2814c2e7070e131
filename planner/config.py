"""
Configuration and settings for the planner backend.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="PLANNER_USE_IN_MEMORY_BACKENDS"
    )

    # Admin login
    admin_username: str = Field(
        default="admin", validation_alias="PLANNER_ADMIN_USERNAME"
    )
    admin_password: str = Field(
        default="roronoazoro", validation_alias="PLANNER_ADMIN_PASSWORD"
    )

    # First day the calendar lets you open.
    calendar_min_date: date = Field(
        default=date(2024, 6, 23), validation_alias="PLANNER_CALENDAR_MIN_DATE"
    )

    log_level: str = Field(default="INFO", validation_alias="PLANNER_LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
