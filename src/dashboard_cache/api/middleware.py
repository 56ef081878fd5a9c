"""API cache middleware.

Applies the per-endpoint caching strategies to every GET request whose path
has a registered strategy, without decorating each route.
"""

import logging
from typing import Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .response_cache import ApiCacheConfig, ApiResponseCache, EndpointCacheConfigs

logger = logging.getLogger(__name__)


class ApiCacheMiddleware(BaseHTTPMiddleware):
    """Serve cached responses and store fresh ones."""

    def __init__(
        self,
        app,
        api_cache: Optional[ApiResponseCache] = None,
        endpoint_configs: Optional[Dict[str, ApiCacheConfig]] = None,
        default_config: Optional[ApiCacheConfig] = None,
        enabled: bool = True,
    ):
        """Initialize API cache middleware.

        Args:
            app: ASGI application
            api_cache: Response cache, the one on ``app.state.cache_service`` by default
            endpoint_configs: Strategy per exact path
            default_config: Strategy for GET paths without one; such paths
                are not cached when omitted
            enabled: Whether caching is active
        """
        super().__init__(app)
        self.api_cache = api_cache
        self.endpoint_configs = endpoint_configs if endpoint_configs is not None else dict(EndpointCacheConfigs)
        self.default_config = default_config
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or request.method != "GET":
            return await call_next(request)

        config = self.endpoint_configs.get(request.url.path, self.default_config)
        if config is None or config.skip_cache:
            return await call_next(request)

        api_cache = self.api_cache or request.app.state.cache_service.api_cache

        cached_response = api_cache.get_cached_response(request, config)
        if cached_response is not None:
            return cached_response

        response = await call_next(request)

        body = b"".join([chunk async for chunk in response.body_iterator])
        cacheable = api_cache.cache_response(request, response, config, body=body)

        fresh_response = Response(content=body, status_code=response.status_code)
        fresh_response.raw_headers = list(response.raw_headers)
        fresh_response.headers["x-cache"] = "MISS"
        if cacheable:
            fresh_response.headers["cache-control"] = config.cache_control

        return fresh_response
