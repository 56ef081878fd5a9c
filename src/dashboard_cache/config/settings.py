"""
Runtime settings for dashboard-cache.

Values come from environment variables prefixed with ``DASHBOARD_CACHE_``
or from a local ``.env`` file.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Cache service settings."""

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Background work (0 disables the task)
    sweep_interval_seconds: float = Field(default=30.0, ge=0)
    monitoring_interval_minutes: float = Field(default=15.0, ge=0)
    periodic_invalidation_minutes: float = Field(default=0.0, ge=0)
    warmup_interval_minutes: float = Field(default=0.0, ge=0)

    # Invalidation history ring buffer
    invalidation_history_size: int = Field(default=1000, gt=0)

    # HTTP layer
    enable_api_cache_middleware: bool = True
    api_responses_max_entries: int = Field(default=500, gt=0)

    # Monitoring server
    host: str = "0.0.0.0"
    port: int = Field(default=8010, ge=1, le=65535)
    debug: bool = False


@lru_cache()
def get_settings() -> CacheSettings:
    """Get cached settings instance."""
    return CacheSettings()
