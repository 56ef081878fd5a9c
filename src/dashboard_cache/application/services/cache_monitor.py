"""Cache monitoring service.

ONLY cache diagnostics - aggregates named cache statistics into health
status, optimization recommendations and API payloads.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ...infrastructure.bounded_ttl_cache import Clock, monotonic_ms
from .cache_manager import CacheManager, CacheStats
from .cache_warmup import CacheWarmup, WarmupReport

logger = logging.getLogger(__name__)

# Rough estimate of one cached item
BYTES_PER_ENTRY = 1024

HIGH_MEMORY_MB = 100.0
LOW_OVERALL_HIT_RATE = 0.5
EXCELLENT_HIT_RATE = 0.9
LOW_CACHE_HIT_RATE = 0.3
CRITICAL_HIT_RATE = 0.2
NEAR_CAPACITY_RATIO = 0.9
MAX_API_RECOMMENDATIONS = 5


class HealthStatus(str, Enum):
    """Overall cache health."""
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class CacheMetrics:
    """Statistics of one named cache plus its memory estimate."""

    name: str
    size: int
    max: int
    hits: int
    misses: int
    sets: int
    hit_rate: float
    memory_usage: int
    last_accessed: str

    @classmethod
    def from_stats(cls, stats: CacheStats, now: Optional[datetime] = None) -> "CacheMetrics":
        now = now or datetime.now(timezone.utc)
        return cls(
            name=stats.name,
            size=stats.size,
            max=stats.max,
            hits=stats.hits,
            misses=stats.misses,
            sets=stats.sets,
            hit_rate=stats.hit_rate,
            memory_usage=estimate_memory_usage(stats.size),
            last_accessed=now.isoformat(),
        )


@dataclass
class CacheMonitoringData:
    """Snapshot of every named cache."""

    caches: List[CacheMetrics] = field(default_factory=list)
    total_memory_usage: int = 0
    overall_hit_rate: float = 0.0
    total_requests: int = 0
    uptime: int = 0
    last_warmup: Optional[str] = None
    recommendations: List[str] = field(default_factory=list)


def estimate_memory_usage(size: int) -> int:
    return size * BYTES_PER_ENTRY


def format_percentage(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def generate_recommendations(caches: List[CacheMetrics], overall_hit_rate: float) -> List[str]:
    """Advisory messages derived from hit rates, fill ratios and memory."""
    recommendations: List[str] = []

    if overall_hit_rate < LOW_OVERALL_HIT_RATE:
        recommendations.append(
            "Overall hit rate is low. Consider warming up more frequently accessed data."
        )
    elif overall_hit_rate > EXCELLENT_HIT_RATE:
        recommendations.append(
            "Excellent hit rate! Consider increasing cache sizes for better performance."
        )

    for cache in caches:
        if cache.hit_rate < LOW_CACHE_HIT_RATE:
            recommendations.append(
                f"{cache.name} cache has low hit rate ({format_percentage(cache.hit_rate)}). "
                "Review caching strategy."
            )

        if cache.max > 0 and cache.size / cache.max > NEAR_CAPACITY_RATIO:
            recommendations.append(
                f"{cache.name} cache is near capacity ({cache.size}/{cache.max}). "
                "Consider increasing max size."
            )

        if cache.sets > 0 and cache.hits == 0:
            recommendations.append(
                f"{cache.name} cache has no hits. Check if cached data is being accessed correctly."
            )

    total_memory_mb = sum(cache.memory_usage for cache in caches) / (1024 * 1024)
    if total_memory_mb > HIGH_MEMORY_MB:
        recommendations.append(
            f"High memory usage detected ({total_memory_mb:.1f}MB). "
            "Consider reducing cache sizes or TTL values."
        )

    return recommendations


class CacheMonitor:
    """Health and diagnostics for a CacheManager."""

    def __init__(
        self,
        cache_manager: CacheManager,
        warmup: Optional[CacheWarmup] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize cache monitor.

        Args:
            cache_manager: Caches to report on
            warmup: Loader runner used by ``run_warmup``
            clock: Millisecond clock used for uptime
        """
        self._cache_manager = cache_manager
        self._warmup = warmup
        self._clock = clock or monotonic_ms
        self._start_time = self._clock()
        self._last_warmup: Optional[datetime] = None
        self._monitoring_task: Optional[asyncio.Task] = None

    @property
    def last_warmup(self) -> Optional[datetime]:
        return self._last_warmup

    def get_monitoring_data(self) -> CacheMonitoringData:
        """Collect metrics of every named cache."""
        now = datetime.now(timezone.utc)
        caches = [
            CacheMetrics.from_stats(stats, now)
            for stats in self._cache_manager.get_stats().values()
        ]

        total_hits = sum(cache.hits for cache in caches)
        total_requests = total_hits + sum(cache.misses for cache in caches)
        overall_hit_rate = total_hits / total_requests if total_requests > 0 else 0.0

        return CacheMonitoringData(
            caches=caches,
            total_memory_usage=sum(cache.memory_usage for cache in caches),
            overall_hit_rate=overall_hit_rate,
            total_requests=total_requests,
            uptime=int(self._clock() - self._start_time),
            last_warmup=self._last_warmup.isoformat() if self._last_warmup else None,
            recommendations=generate_recommendations(caches, overall_hit_rate),
        )

    def get_health_status(
        self,
        data: Optional[CacheMonitoringData] = None,
    ) -> Tuple[HealthStatus, str]:
        """Classify health from hit rates.

        Returns:
            Status and a human readable message
        """
        data = data or self.get_monitoring_data()
        overall = format_percentage(data.overall_hit_rate)

        if data.overall_hit_rate < CRITICAL_HIT_RATE:
            return HealthStatus.CRITICAL, f"Critical: Very low hit rate ({overall})"

        if data.overall_hit_rate < LOW_OVERALL_HIT_RATE:
            return HealthStatus.WARNING, f"Warning: Low hit rate ({overall})"

        problematic_caches = sum(1 for cache in data.caches if cache.hit_rate < LOW_CACHE_HIT_RATE)
        if problematic_caches > 0:
            return HealthStatus.WARNING, f"Warning: {problematic_caches} cache(s) have low hit rates"

        return HealthStatus.HEALTHY, f"Healthy: Hit rate {overall}"

    def generate_recommendations(
        self,
        caches: List[CacheMetrics],
        overall_hit_rate: float,
    ) -> List[str]:
        return generate_recommendations(caches, overall_hit_rate)

    def format_performance_summary(self) -> str:
        data = self.get_monitoring_data()
        status, message = self.get_health_status(data)

        lines = [
            "=== CACHE PERFORMANCE SUMMARY ===",
            f"Status: {status.value.upper()} - {message}",
            f"Overall Hit Rate: {format_percentage(data.overall_hit_rate)}",
            f"Total Requests: {data.total_requests}",
            f"Memory Usage: {data.total_memory_usage / (1024 * 1024):.1f}MB",
            f"Uptime: {data.uptime // 1000}s",
            "Cache Details:",
        ]
        lines.extend(
            f"  {cache.name}: {cache.size}/{cache.max} items, "
            f"{format_percentage(cache.hit_rate)} hit rate"
            for cache in data.caches
        )
        if data.recommendations:
            lines.append("Recommendations:")
            lines.extend(f"  - {recommendation}" for recommendation in data.recommendations)

        return "\n".join(lines)

    def log_performance_summary(self) -> None:
        logger.info(self.format_performance_summary())

    async def run_warmup(self) -> Optional[WarmupReport]:
        """Run the warmup loaders and remember when it happened."""
        self._last_warmup = datetime.now(timezone.utc)
        if self._warmup is None:
            logger.warning("Cache warmup requested but no warmup service is configured")
            return None
        return await self._warmup.warmup_all()

    async def start_periodic_monitoring(self, interval_minutes: float = 15) -> None:
        """Log the performance summary every ``interval_minutes``."""
        await self.stop_periodic_monitoring()
        logger.info(f"Starting periodic cache monitoring every {interval_minutes} minutes")
        self._monitoring_task = asyncio.create_task(self._monitoring_loop(interval_minutes * 60))

    async def stop_periodic_monitoring(self) -> None:
        if self._monitoring_task:
            self._monitoring_task.cancel()
            try:
                await self._monitoring_task
            except asyncio.CancelledError:
                pass
            self._monitoring_task = None

    def get_cache_stats_for_api(self) -> Dict[str, Any]:
        """Payload served by the cache stats endpoint."""
        data = self.get_monitoring_data()
        status, message = self.get_health_status(data)

        return {
            "health": status.value,
            "message": message,
            "metrics": {
                "overall_hit_rate": data.overall_hit_rate,
                "total_requests": data.total_requests,
                "total_memory_usage": data.total_memory_usage,
                "uptime": data.uptime,
                "last_warmup": data.last_warmup,
            },
            "caches": [
                {
                    "name": cache.name,
                    "hit_rate": cache.hit_rate,
                    "size": cache.size,
                    "max": cache.max,
                    "memory_usage": cache.memory_usage,
                }
                for cache in data.caches
            ],
            "recommendations": data.recommendations[:MAX_API_RECOMMENDATIONS],
        }

    async def _monitoring_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.log_performance_summary()
            except Exception as e:
                logger.error(f"Cache performance summary failed: {e}")
