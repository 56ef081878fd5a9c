"""Dashboard cache monitoring application.

FastAPI application exposing the cache administration router, with the API
response cache middleware and a lifespan that runs the cache service.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .__version__ import __version__
from .api.middleware import ApiCacheMiddleware
from .api.routers.cache_router import cache_router
from .core.exceptions import CacheError, create_error_response
from .service import CacheService, create_cache_service

logger = logging.getLogger(__name__)


def create_app(service: Optional[CacheService] = None) -> FastAPI:
    """Create the monitoring application.

    Args:
        service: Cache service to expose, a new one built from the
            environment settings by default

    Returns:
        FastAPI application with ``app.state.cache_service`` set
    """
    service = service or create_cache_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        await service.start()
        try:
            yield
        finally:
            await service.shutdown()

    app = FastAPI(
        title="Dashboard Cache",
        version=__version__,
        description="In-process cache monitoring and administration",
        debug=service.settings.debug,
        lifespan=lifespan,
    )
    app.state.cache_service = service

    app.add_middleware(
        ApiCacheMiddleware,
        api_cache=service.api_cache,
        enabled=service.settings.enable_api_cache_middleware,
    )
    app.include_router(cache_router)

    @app.exception_handler(CacheError)
    async def cache_error_handler(request: Request, exc: CacheError):
        logger.warning(f"Cache error on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=create_error_response(exc),
        )

    @app.get("/health", tags=["Health"])
    async def health():
        health_status, message = service.monitor.get_health_status()
        return {"status": health_status.value, "message": message}

    logger.info("Created dashboard cache application")
    return app
