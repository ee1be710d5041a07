"""Resolves internal locations to Google Place IDs."""
import logging
from typing import Optional

from places_backend.config import settings
from places_backend.constants import SEARCH_FIELD_MASK
from places_backend.core.exceptions import PlacesServiceError, ResolutionFailed
from places_backend.domain.entities.location import Location
from places_backend.infrastructure.cache.place_cache import PlaceCacheService, PlaceIdCacheEntry
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient

logger = logging.getLogger(__name__)


class PlaceResolver:
    """Turns a location into a provider identifier.

    A place_id already present on the location was curated upstream and is
    trusted as-is: no search call, no revalidation. Everything else goes
    through a one-result text search. Only successes are cached.
    """

    def __init__(
        self,
        client: GooglePlacesClient,
        cache: PlaceCacheService,
        country_hint: Optional[str] = None,
    ):
        self.client = client
        self.cache = cache
        self.country_hint = country_hint if country_hint is not None else settings.SEARCH_COUNTRY_HINT

    async def search_place_id(self, query: str) -> Optional[PlaceIdCacheEntry]:
        """Search for the best single match. None means the provider found nothing."""
        places = await self.client.search_text(query, field_mask=SEARCH_FIELD_MASK, page_size=1)
        place = places[0] if places else None
        if not place or not place.get("id"):
            return None

        display_name = place.get("displayName") or {}
        return self.cache.new_place_id_entry(
            place_id=place["id"],
            matched_name=display_name.get("text"),
            formatted_address=place.get("formattedAddress"),
        )

    async def resolve(self, location: Location) -> PlaceIdCacheEntry:
        """Resolve a location to a place id entry.

        Raises:
            ResolutionFailed: the search returned no candidate
            TransportError: the search call failed
            ConfigurationError: no API key configured
        """
        cached = self.cache.get_place_id(location.id)
        if cached:
            return cached

        if location.place_id:
            entry = self.cache.new_place_id_entry(location.place_id)
            return self.cache.set_place_id(location.id, entry)

        query = location.search_query(self.country_hint)
        found = await self.search_place_id(query)
        if not found:
            logger.warning(f'No Google Place found for location {location.id} ("{query}")')
            raise ResolutionFailed(location.id, location.name)

        logger.info(f"Resolved location {location.id} to place {found.place_id} ({found.matched_name})")
        return self.cache.set_place_id(location.id, found)

    async def can_resolve(self, location: Location) -> bool:
        """Check used by data-quality audits. Never raises on provider trouble."""
        try:
            await self.resolve(location)
            return True
        except PlacesServiceError as e:
            logger.info(f"Location {location.id} is not resolvable: {e}")
            return False
