"""Cache service container.

Owns every cache component of one application instance and the background
tasks that keep them healthy. Nothing is module-global, so each test or
application builds its own isolated service.
"""

import logging
from typing import Optional

from .api.response_cache import ApiResponseCache
from .application.services.cache_invalidator import CacheInvalidator
from .application.services.cache_manager import CacheManager
from .application.services.cache_monitor import CacheMonitor
from .application.services.cache_warmup import CacheWarmup
from .application.services.invalidation_engine import CacheInvalidationEngine
from .application.services.invalidation_monitor import CacheInvalidationMonitor
from .application.services.invalidation_utils import CacheInvalidationUtils
from .config.settings import CacheSettings, get_settings
from .infrastructure.bounded_ttl_cache import Clock

logger = logging.getLogger(__name__)


class CacheService:
    """Wires the cache manager, invalidation, monitoring and HTTP caching."""

    def __init__(self, settings: Optional[CacheSettings] = None, clock: Optional[Clock] = None):
        """Initialize cache service.

        Args:
            settings: Runtime settings, read from the environment by default
            clock: Millisecond clock shared by every component
        """
        self.settings = settings or get_settings()

        self.cache_manager = CacheManager(clock=clock)
        self.api_cache = ApiResponseCache(
            self.cache_manager,
            max_entries=self.settings.api_responses_max_entries,
        )
        self.invalidation_monitor = CacheInvalidationMonitor(
            max_events=self.settings.invalidation_history_size
        )
        self.invalidation_engine = CacheInvalidationEngine(
            self.cache_manager,
            api_cache=self.api_cache,
            monitor=self.invalidation_monitor,
        )
        self.invalidation_utils = CacheInvalidationUtils(self.invalidation_engine)
        self.invalidator = CacheInvalidator(self.cache_manager)
        self.warmup = CacheWarmup(self.cache_manager)
        self.monitor = CacheMonitor(self.cache_manager, warmup=self.warmup, clock=clock)

        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Start the background tasks enabled in the settings."""
        if self._started:
            return

        settings = self.settings
        if settings.sweep_interval_seconds > 0:
            await self.cache_manager.start_sweeper(settings.sweep_interval_seconds)
        if settings.monitoring_interval_minutes > 0:
            await self.monitor.start_periodic_monitoring(settings.monitoring_interval_minutes)
        if settings.periodic_invalidation_minutes > 0:
            await self.invalidation_engine.schedule_periodic_invalidation(
                settings.periodic_invalidation_minutes
            )
        if settings.warmup_interval_minutes > 0:
            await self.warmup.schedule_periodic_warmup(settings.warmup_interval_minutes)

        self._started = True
        logger.info("Cache service started")

    async def shutdown(self) -> None:
        """Stop background tasks and apply the invalidations still queued."""
        if not self._started:
            return

        try:
            await self.warmup.stop_periodic_warmup()
            await self.monitor.stop_periodic_monitoring()
            await self.invalidation_engine.shutdown()
            await self.cache_manager.stop_sweeper()
            logger.info("Cache service shutdown completed")
        except Exception as e:
            logger.error(f"Error during cache service shutdown: {e}")
        finally:
            self._started = False


def create_cache_service(
    settings: Optional[CacheSettings] = None,
    clock: Optional[Clock] = None,
) -> CacheService:
    """Create a cache service with every component wired."""
    return CacheService(settings=settings, clock=clock)
