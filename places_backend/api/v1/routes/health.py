"""Health check endpoints."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from places_backend.core.dependencies import get_place_cache, get_place_details_repository
from places_backend.core.settings import settings
from places_backend.domain.repositories.place_details_repository import PlaceDetailsRepository
from places_backend.infrastructure.cache.place_cache import PlaceCacheService

router = APIRouter()


@router.get("/health", tags=["health"])
async def simple_health_check() -> Dict[str, str]:
    """
    Simple health check for load balancer - no dependency checks.

    Returns HTTP 200 OK if the application is running.
    """
    return {"status": "ok"}


@router.get("/health/detailed", tags=["health"])
async def detailed_health_check(
    repository: Optional[PlaceDetailsRepository] = Depends(get_place_details_repository),
    cache: PlaceCacheService = Depends(get_place_cache),
) -> Dict[str, Any]:
    """
    Detailed health check for the places layer.

    Response includes:
    - Whether a provider API key is configured
    - The active durable store backend (or "none" when degraded)
    - In-process cache occupancy
    """
    durable_backend = repository.backend_name if repository else "none"
    degraded = repository is None and settings.DURABLE_STORE_BACKEND != "none"

    return {
        "status": "degraded" if degraded else "ok",
        "provider_configured": bool(settings.GOOGLE_PLACES_API_KEY),
        "durable_store": {
            "configured": settings.DURABLE_STORE_BACKEND,
            "active": durable_backend,
        },
        "cache": cache.stats(),
    }
