"""Cache monitoring API models.

ONLY request/response shapes - field names are snake_case in Python and
camelCase on the wire.
"""

from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheMetricsSummary(CamelModel):
    """Aggregate metrics across every named cache."""

    overall_hit_rate: float = Field(..., ge=0.0, le=1.0, description="Hits over all requests")
    total_requests: int = Field(default=0, ge=0, description="Hits plus misses")
    total_memory_usage: int = Field(default=0, ge=0, description="Estimated bytes used")
    uptime: int = Field(default=0, ge=0, description="Milliseconds since the monitor started")
    last_warmup: Optional[str] = Field(default=None, description="ISO timestamp of the last warmup")


class CacheSummary(CamelModel):
    """Metrics of one named cache."""

    name: str
    hit_rate: float = Field(..., ge=0.0, le=1.0)
    size: int = Field(..., ge=0)
    max: int = Field(..., gt=0)
    memory_usage: int = Field(default=0, ge=0)


class CacheStatsResponse(CamelModel):
    """Payload of the cache statistics endpoint."""

    health: str = Field(..., description="healthy, warning or critical")
    message: str
    metrics: CacheMetricsSummary
    caches: List[CacheSummary] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list, max_length=5)


class CacheAction(str, Enum):
    """Operations accepted by the cache statistics endpoint."""
    WARMUP = "warmup"
    CLEAR = "clear"
    STATS = "stats"


class CacheActionRequest(CamelModel):
    """Body of a cache operation request.

    ``action`` stays a plain string so unsupported actions get a 400 with
    the list of supported ones instead of a validation error.
    """

    action: str = Field(..., description="warmup, clear or stats")
    cache_name: Optional[str] = Field(default=None, description="Cache to clear, all when omitted")


class CacheActionResponse(CamelModel):
    """Result of a warmup or clear operation."""

    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
