"""Pytest configuration and fixtures for dashboard-cache tests."""

import pytest

from dashboard_cache.application.services.cache_manager import CacheManager
from dashboard_cache.config.settings import CacheSettings
from dashboard_cache.service import CacheService


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """Fake clock shared by the components under test."""
    return FakeClock()


@pytest.fixture
def cache_manager(clock):
    """Cache manager driven by the fake clock."""
    return CacheManager(clock=clock)


@pytest.fixture
def settings():
    """Settings with every background task disabled."""
    return CacheSettings(
        sweep_interval_seconds=0,
        monitoring_interval_minutes=0,
        periodic_invalidation_minutes=0,
        warmup_interval_minutes=0,
        _env_file=None,
    )


@pytest.fixture
def cache_service(settings, clock):
    """Isolated cache service."""
    return CacheService(settings=settings, clock=clock)
