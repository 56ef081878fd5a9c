"""Tests for settings, cache presets and logging configuration."""

import pytest
from pydantic import ValidationError

from dashboard_cache.config.logging_config import LoggingConfig, get_log_level_from_verbosity
from dashboard_cache.config.presets import CacheConfigs
from dashboard_cache.config.settings import CacheSettings
from dashboard_cache.core.exceptions import CacheConfigurationError
from dashboard_cache.core.value_objects.cache_config import CacheConfig


class TestCacheSettings:
    """Environment driven settings."""

    def test_defaults(self):
        settings = CacheSettings(_env_file=None)

        assert settings.sweep_interval_seconds == 30.0
        assert settings.monitoring_interval_minutes == 15.0
        assert settings.periodic_invalidation_minutes == 0.0
        assert settings.invalidation_history_size == 1000
        assert settings.enable_api_cache_middleware is True
        assert settings.port == 8010

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_CACHE_PORT", "9000")
        monkeypatch.setenv("DASHBOARD_CACHE_ENABLE_API_CACHE_MIDDLEWARE", "false")
        monkeypatch.setenv("DASHBOARD_CACHE_PERIODIC_INVALIDATION_MINUTES", "60")

        settings = CacheSettings(_env_file=None)

        assert settings.port == 9000
        assert settings.enable_api_cache_middleware is False
        assert settings.periodic_invalidation_minutes == 60.0

    def test_rejects_negative_interval(self):
        with pytest.raises(ValidationError):
            CacheSettings(sweep_interval_seconds=-1, _env_file=None)


class TestCacheConfigs:
    """Named cache presets."""

    @pytest.mark.parametrize(
        "name, max_entries, ttl_ms",
        [
            ("users", 1000, 300_000),
            ("usersList", 100, 60_000),
            ("userStats", 10, 600_000),
            ("performance", 50, 30_000),
            ("dbStatus", 5, 120_000),
            ("session", 500, 1_800_000),
            ("apiResponses", 500, 120_000),
        ],
    )
    def test_presets(self, name, max_entries, ttl_ms):
        config = CacheConfigs.for_cache(name)

        assert config.max_entries == max_entries
        assert config.ttl_ms == ttl_ms

    def test_performance_does_not_refresh(self):
        assert CacheConfigs.performance.refresh_ttl_on_access is False

    def test_unknown_cache_uses_default(self):
        assert CacheConfigs.for_cache("reports") == CacheConfigs.default

    def test_all_excludes_default(self):
        assert "default" not in CacheConfigs.all()
        assert len(CacheConfigs.all()) == 7

    @pytest.mark.parametrize("max_entries, ttl_ms", [(0, 1000), (10, 0)])
    def test_invalid_config(self, max_entries, ttl_ms):
        with pytest.raises(CacheConfigurationError):
            CacheConfig(max_entries=max_entries, ttl_ms=ttl_ms)


class TestLoggingConfig:
    """dictConfig mapping built from the environment."""

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch):
        for name in ("LOG_VERBOSITY", "LOG_LEVEL", "LOG_FORMAT", "ENABLE_CACHE_OPERATION_LOGGING"):
            monkeypatch.delenv(name, raising=False)

    @pytest.mark.parametrize(
        "verbosity, level",
        [("quiet", "ERROR"), ("NORMAL", "INFO"), ("verbose", "INFO"), ("debug", "DEBUG"), ("loud", "INFO")],
    )
    def test_verbosity_levels(self, verbosity, level):
        assert get_log_level_from_verbosity(verbosity) == level

    def test_defaults(self):
        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "INFO"
        assert config["formatters"]["default"]["format"] == LoggingConfig.FORMATS["simple"]
        assert config["loggers"]["asyncio"]["level"] == "ERROR"
        assert config["loggers"]["dashboard_cache.application.services.cache_manager"]["level"] == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        assert LoggingConfig.build_config()["root"]["level"] == "WARNING"

    def test_operation_logging(self, monkeypatch):
        monkeypatch.setenv("ENABLE_CACHE_OPERATION_LOGGING", "true")

        config = LoggingConfig.build_config()

        assert config["loggers"]["dashboard_cache.api.response_cache"]["level"] == "DEBUG"
        assert config["handlers"]["console"]["level"] == "DEBUG"

    def test_json_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        config = LoggingConfig.build_config()

        assert config["formatters"]["default"]["format"].startswith('{"time"')
