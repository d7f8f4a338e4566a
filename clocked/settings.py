"""
Typed settings management using pydantic-settings.

All values can be overridden with ``CLOCKED_``-prefixed environment variables
or a local ``.env`` file.

Usage:
    from clocked.settings import get_settings

    settings = get_settings()
    print(settings.max_horizon)
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClockedSettings(BaseSettings):
    """Scheduler, executor and notification configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CLOCKED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scheduling policy
    max_horizon_hours: float = Field(
        default=24.0,
        gt=0,
        description="Maximum lead time between now and an event's target time",
    )
    dispatch_lead_seconds: float = Field(
        default=1.0,
        gt=0,
        description="How long before the target time an event hands its actions over",
    )

    # OS command execution
    command_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout applied to every OS command",
    )
    abort_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Timeout for aborting or probing an OS-level shutdown",
    )
    dry_run: bool = Field(
        default=False,
        description="Log OS commands instead of running them",
    )

    # Alarm asset resolution
    alarm_sound: Optional[Path] = Field(
        default=None,
        description="Explicit audio file played by the alarm",
    )
    resources_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding packaged resources (packaged builds)",
    )

    # Notifications / display
    notification_history: int = Field(
        default=100,
        ge=0,
        description="Number of recent notifications kept by the bus",
    )
    log_level: str = Field(default="INFO", description="Console log level")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def max_horizon(self) -> timedelta:
        return timedelta(hours=self.max_horizon_hours)


@lru_cache(maxsize=1)
def get_settings() -> ClockedSettings:
    """Get the cached settings singleton.

    The settings are loaded once and cached for the process lifetime.
    To reload, call clear_settings_cache() first.
    """
    return ClockedSettings()


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""
    get_settings.cache_clear()
