"""Cache warmup service.

ONLY proactive cache population - runs registered loaders and stores what
they return in their named caches.

Loaders are async callables returning a mapping of cache key to value.
A failing loader is logged and skipped; it never aborts the others.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .cache_manager import CacheManager

logger = logging.getLogger(__name__)

WarmupLoader = Callable[[], Awaitable[Dict[str, Any]]]


@dataclass
class WarmupRegistration:
    """A loader bound to the named cache it fills."""

    name: str
    cache_name: str
    loader: WarmupLoader


@dataclass
class WarmupResult:
    """Result of one loader run."""

    name: str
    cache_name: str
    success: bool
    entries_warmed: int = 0
    error_message: Optional[str] = None


@dataclass
class WarmupReport:
    """Result of a full warmup run."""

    results: List[WarmupResult] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def entries_warmed(self) -> int:
        return sum(result.entries_warmed for result in self.results)

    @property
    def failed(self) -> List[str]:
        return [result.name for result in self.results if not result.success]


class CacheWarmup:
    """Runs warmup loaders against a CacheManager."""

    def __init__(self, cache_manager: CacheManager):
        self._cache_manager = cache_manager
        self._registrations: Dict[str, WarmupRegistration] = {}
        self._periodic_task: Optional[asyncio.Task] = None

    def register(self, name: str, cache_name: str, loader: WarmupLoader) -> None:
        """Register (or replace) a loader under a name."""
        self._registrations[name] = WarmupRegistration(name=name, cache_name=cache_name, loader=loader)
        logger.debug(f"Warmup loader registered: {name} -> {cache_name}")

    def unregister(self, name: str) -> bool:
        return self._registrations.pop(name, None) is not None

    @property
    def loader_names(self) -> List[str]:
        return list(self._registrations)

    async def warmup(self, name: str) -> WarmupResult:
        """Run a single registered loader.

        Raises:
            KeyError: If no loader is registered under ``name``
        """
        return await self._run(self._registrations[name])

    async def warmup_all(self) -> WarmupReport:
        """Run every registered loader concurrently."""
        logger.info("Starting comprehensive cache warmup")
        start_time = time.perf_counter()

        results = await asyncio.gather(
            *(self._run(registration) for registration in self._registrations.values())
        )

        report = WarmupReport(
            results=list(results),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        logger.info(
            f"Comprehensive warmup completed in {report.duration_ms:.0f}ms: "
            f"{report.entries_warmed} entries, {len(report.failed)} failed loaders"
        )
        return report

    async def schedule_periodic_warmup(self, interval_minutes: float = 30) -> None:
        await self.stop_periodic_warmup()
        logger.info(f"Scheduling periodic warmup every {interval_minutes} minutes")
        self._periodic_task = asyncio.create_task(self._periodic_loop(interval_minutes * 60))

    async def stop_periodic_warmup(self) -> None:
        if self._periodic_task:
            self._periodic_task.cancel()
            try:
                await self._periodic_task
            except asyncio.CancelledError:
                pass
            self._periodic_task = None

    async def _run(self, registration: WarmupRegistration) -> WarmupResult:
        try:
            entries = await registration.loader()
            for key, value in entries.items():
                self._cache_manager.set(registration.cache_name, key, value)
        except Exception as e:
            logger.error(f"Failed to warm up {registration.name}: {e}")
            return WarmupResult(
                name=registration.name,
                cache_name=registration.cache_name,
                success=False,
                error_message=str(e),
            )

        logger.info(f"{registration.name} warmed up: {len(entries)} entries")
        return WarmupResult(
            name=registration.name,
            cache_name=registration.cache_name,
            success=True,
            entries_warmed=len(entries),
        )

    async def _periodic_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            logger.info("Running scheduled warmup")
            await self.warmup_all()
