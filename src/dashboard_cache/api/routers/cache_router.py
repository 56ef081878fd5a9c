"""Cache monitoring router.

ONLY cache administration endpoints - statistics, warmup and clearing for
dashboard administrators.
"""

import logging
from typing import Annotated, Union

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import UserRole, get_cache_service, require_cache_admin
from ..models.responses import (
    CacheAction,
    CacheActionRequest,
    CacheActionResponse,
    CacheStatsResponse,
)
from ...service import CacheService

logger = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

cache_router = APIRouter(
    prefix="/cache",
    tags=["Cache"],
    responses={
        401: {"description": "No authenticated user"},
        403: {"description": "Only SuperAdmin and Admin may manage caches"},
    },
)


@cache_router.get(
    "/stats",
    response_model=CacheStatsResponse,
    summary="Get cache statistics",
    description="Health, aggregate metrics, per-cache metrics and recommendations",
)
async def get_cache_stats(
    response: Response,
    service: Annotated[CacheService, Depends(get_cache_service)],
    role: Annotated[UserRole, Depends(require_cache_admin)],
) -> CacheStatsResponse:
    """Get cache statistics."""
    response.headers.update(NO_STORE_HEADERS)
    return CacheStatsResponse.model_validate(service.monitor.get_cache_stats_for_api())


@cache_router.post(
    "/stats",
    response_model=None,
    summary="Run a cache operation",
    description="warmup runs every loader, clear empties one cache or all, stats returns statistics",
)
async def run_cache_action(
    request: CacheActionRequest,
    service: Annotated[CacheService, Depends(get_cache_service)],
    role: Annotated[UserRole, Depends(require_cache_admin)],
) -> Union[CacheActionResponse, CacheStatsResponse]:
    """Run a cache operation."""
    if request.action == CacheAction.WARMUP:
        await service.monitor.run_warmup()
        logger.info(f"Cache warmup triggered by {role.value}")
        return CacheActionResponse(message="Cache warmup completed successfully")

    if request.action == CacheAction.CLEAR:
        if request.cache_name:
            service.cache_manager.clear(request.cache_name)
            logger.info(f"Cache '{request.cache_name}' cleared by {role.value}")
            return CacheActionResponse(message=f"Cache '{request.cache_name}' cleared successfully")

        service.cache_manager.clear_all()
        logger.info(f"All caches cleared by {role.value}")
        return CacheActionResponse(message="All caches cleared successfully")

    if request.action == CacheAction.STATS:
        return CacheStatsResponse.model_validate(service.monitor.get_cache_stats_for_api())

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid action. Supported actions: warmup, clear, stats",
    )
