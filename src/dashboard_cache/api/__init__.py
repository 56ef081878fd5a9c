"""HTTP layer: response caching, middleware and the monitoring router.

The router lives in ``dashboard_cache.api.routers`` and is imported from
there, since it depends on the service container.
"""

from .response_cache import (
    ApiCacheConfig,
    ApiCacheConfigs,
    ApiResponseCache,
    EndpointCacheConfigs,
    get_cache_config_for_path,
    with_api_cache,
)
from .middleware import ApiCacheMiddleware
from .dependencies import UserRole, get_cache_service, require_cache_admin

__all__ = [
    "ApiCacheConfig",
    "ApiCacheConfigs",
    "ApiResponseCache",
    "EndpointCacheConfigs",
    "get_cache_config_for_path",
    "with_api_cache",
    "ApiCacheMiddleware",
    "UserRole",
    "get_cache_service",
    "require_cache_admin",
]
