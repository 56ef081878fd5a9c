"""Configuration: runtime settings, cache presets and logging."""

from .settings import CacheSettings, get_settings
from .presets import CacheConfigs
from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "CacheSettings",
    "get_settings",
    "CacheConfigs",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]
