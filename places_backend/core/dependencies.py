"""Dependency injection for FastAPI routes.
Routes depend on the services; the services get their collaborators here."""
import logging
from functools import lru_cache
from typing import Optional

from places_backend.application.services.photo_proxy import PhotoProxy
from places_backend.application.services.place_details_service import PlaceDetailsService
from places_backend.application.services.place_resolver import PlaceResolver
from places_backend.core.settings import settings
from places_backend.domain.repositories.place_details_repository import PlaceDetailsRepository
from places_backend.infrastructure.cache.place_cache import PlaceCacheService
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient
from places_backend.infrastructure.persistence.repositories.in_memory_place_details_repository import (
    InMemoryPlaceDetailsRepository,
)

logger = logging.getLogger(__name__)


def build_place_details_repository(backend: str) -> Optional[PlaceDetailsRepository]:
    """Construct the durable store for a backend name. May raise."""
    if backend == "none":
        return None
    if backend == "memory":
        return InMemoryPlaceDetailsRepository()
    if backend == "redis":
        from places_backend.infrastructure.persistence.repositories.redis_place_details_repository import (
            RedisPlaceDetailsRepository,
        )
        return RedisPlaceDetailsRepository.from_settings()
    if backend == "database":
        from places_backend.infrastructure.persistence.db import get_session_factory, init_db
        from places_backend.infrastructure.persistence.repositories.sqlalchemy_place_details_repository import (
            SQLAlchemyPlaceDetailsRepository,
        )
        init_db()
        return SQLAlchemyPlaceDetailsRepository(get_session_factory())
    raise ValueError(f"Unknown DURABLE_STORE_BACKEND: {backend}")


@lru_cache()
def get_place_details_repository() -> Optional[PlaceDetailsRepository]:
    """Get the durable store, or None when it cannot be constructed.

    Construction is attempted once per process; a failed handshake is logged
    and the service continues with in-process caching only.
    """
    backend = settings.DURABLE_STORE_BACKEND
    try:
        repository = build_place_details_repository(backend)
    except Exception as e:
        logger.warning(
            f"Durable place store '{backend}' unavailable. Falling back to in-memory cache only: {e}"
        )
        return None

    if repository is None:
        logger.info("Durable place store disabled")
    else:
        logger.info(f"Durable place store ready: {repository.backend_name}")
    return repository


@lru_cache()
def get_places_client() -> GooglePlacesClient:
    """Get the provider client."""
    return GooglePlacesClient()


@lru_cache()
def get_place_cache() -> PlaceCacheService:
    """Get the process-wide in-process cache tiers."""
    return PlaceCacheService()


@lru_cache()
def get_place_resolver() -> PlaceResolver:
    """Get the place id resolver."""
    return PlaceResolver(client=get_places_client(), cache=get_place_cache())


@lru_cache()
def get_place_details_service() -> PlaceDetailsService:
    """Get the place details service."""
    return PlaceDetailsService(
        client=get_places_client(),
        cache=get_place_cache(),
        repository=get_place_details_repository(),
        resolver=get_place_resolver(),
    )


@lru_cache()
def get_photo_proxy() -> PhotoProxy:
    """Get the photo proxy."""
    return PhotoProxy(client=get_places_client())
