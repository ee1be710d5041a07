"""Place details with two cache tiers in front of the Google Places API.

Lookup order for get_details:
1. in-process details cache
2. durable store row, if fetched within the details TTL
3. place id (durable row, trusted location id, or text search) + details call

Successful fetches are written back to both tiers. The durable write runs in
the background and its failures are only logged. Failed fetches are never
cached, so the next call retries once the provider recovers.
"""
import asyncio
import logging
from typing import Iterable, List, Optional, Set

from places_backend.application.services.place_resolver import PlaceResolver
from places_backend.application.services.place_transformers import (
    build_location_draft,
    normalize_details_row,
    transform_place_details,
)
from places_backend.config import settings
from places_backend.constants import AUTOCOMPLETE_FIELD_MASK, COORDINATES_FIELD_MASK, FieldMask
from places_backend.core.exceptions import TransportError
from places_backend.domain.entities.location import Location
from places_backend.domain.entities.location_details import LocationDetails
from places_backend.domain.entities.place_search import (
    AutocompleteBias,
    AutocompletePlace,
    PlaceLookupResult,
    PlaceWithCoordinates,
)
from places_backend.domain.repositories.place_details_repository import (
    PlaceDetailsRecord,
    PlaceDetailsRepository,
)
from places_backend.domain.value_objects.coordinates import Coordinates
from places_backend.infrastructure.cache.place_cache import PlaceCacheService
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient

logger = logging.getLogger(__name__)


class PlaceDetailsService:
    """Entry point for place details, lookups and autocomplete."""

    def __init__(
        self,
        client: GooglePlacesClient,
        cache: PlaceCacheService,
        repository: Optional[PlaceDetailsRepository] = None,
        resolver: Optional[PlaceResolver] = None,
        persist_in_background: bool = True,
    ):
        self.client = client
        self.cache = cache
        self.repository = repository
        self.resolver = resolver or PlaceResolver(client, cache)
        self.persist_in_background = persist_in_background
        self._pending_writes: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    async def get_details(self, location: Location, field_mask: FieldMask = FieldMask.SLIM) -> LocationDetails:
        """Return details for a location, fetching from the provider only when both tiers are cold.

        Raises:
            ResolutionFailed: no place id could be found for the location
            TransportError: the provider call failed
            ConfigurationError: no API key configured
        """
        cached = self.cache.get_details(location.id)
        if cached:
            return cached

        record = await self._read_durable(location.id)
        if record and record.fetched_at and self.cache.is_details_fresh(record.fetched_at):
            details = self._warm_from_record(location, record)
            if details:
                return details

        place_id = await self._place_id_for(location, record)
        payload = await self.client.get_place_details(place_id, field_mask=field_mask.value)
        details = transform_place_details(payload, place_id, fetched_at=self.cache.clock())
        self.cache.set_details(location.id, details)
        logger.info(
            f"Fetched details for location {location.id} (place {details.place_id}): "
            f"{len(details.photos)} photos, {len(details.reviews)} reviews"
        )

        await self._write_back(location.id, details)
        return details

    async def can_resolve_identifier(self, location: Location) -> bool:
        """True if the location has, or can be given, a place id."""
        return await self.resolver.can_resolve(location)

    def _warm_from_record(self, location: Location, record: PlaceDetailsRecord) -> Optional[LocationDetails]:
        """Backfill both in-process tiers from a fresh durable row."""
        try:
            details = normalize_details_row(record)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable stored details for location {location.id}: {e}")
            return None

        self.cache.set_details(location.id, details)
        self.cache.set_place_id(location.id, self.cache.new_place_id_entry(details.place_id))
        logger.debug(f"Served location {location.id} from durable store")
        return details

    async def _place_id_for(self, location: Location, record: Optional[PlaceDetailsRecord]) -> str:
        # A stale row still carries a good identity.
        if record and record.place_id:
            self.cache.set_place_id(location.id, self.cache.new_place_id_entry(record.place_id))
            return record.place_id

        entry = await self.resolver.resolve(location)
        return entry.place_id

    # ------------------------------------------------------------------
    # Durable store
    # ------------------------------------------------------------------

    async def _read_durable(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        if self.repository is None:
            return None
        try:
            return await self.repository.get(location_id)
        except Exception as e:
            logger.warning(f"Failed to read cached Google Place details for location {location_id}: {e}")
            return None

    async def _persist(self, location_id: str, details: LocationDetails) -> None:
        record = PlaceDetailsRecord(
            location_id=location_id,
            place_id=details.place_id,
            payload=details.to_dict(),
            fetched_at=details.fetched_at,
        )
        try:
            await self.repository.upsert(record)
        except Exception as e:
            logger.warning(f"Failed to persist Google Place details for location {location_id}: {e}")

    async def _write_back(self, location_id: str, details: LocationDetails) -> None:
        if self.repository is None:
            return
        if not self.persist_in_background:
            await self._persist(location_id, details)
            return
        # Keep a reference so the task is not garbage collected mid-write
        task = asyncio.create_task(self._persist(location_id, details))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def flush_pending_writes(self) -> None:
        """Wait for background durable writes. Used on shutdown and in tests."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    # ------------------------------------------------------------------
    # Identifier lookups
    # ------------------------------------------------------------------

    async def resolve_autocomplete(
        self,
        input_text: str,
        bias: Optional[AutocompleteBias] = None,
        included_primary_types: Optional[Iterable[str]] = None,
    ) -> List[AutocompletePlace]:
        """Suggest places for free text, using searchText so coordinates come back immediately."""
        text = (input_text or "").strip()
        if not text:
            return []

        type_filters = [t for t in included_primary_types or [] if t]
        query = f"{text} {' '.join(type_filters)}" if type_filters else text

        places = await self.client.search_text(
            query,
            field_mask=AUTOCOMPLETE_FIELD_MASK,
            page_size=settings.AUTOCOMPLETE_PAGE_SIZE,
            extra=bias.to_request() if bias else None,
        )

        suggestions: List[AutocompletePlace] = []
        for place in places:
            display_name = (place.get("displayName") or {}).get("text")
            if not place.get("id") or not display_name:
                continue
            try:
                coordinates = Coordinates.from_provider(place.get("location"))
            except ValueError:
                coordinates = None
            suggestions.append(AutocompletePlace(
                place_id=place["id"],
                display_name=display_name,
                formatted_address=place.get("formattedAddress"),
                coordinates=coordinates,
            ))
        return suggestions

    async def fetch_coordinates_by_identifier(self, place_id: str) -> Optional[PlaceWithCoordinates]:
        """Position of a place chosen from autocomplete, or None if the provider has none."""
        try:
            payload = await self.client.get_place_details(place_id, field_mask=COORDINATES_FIELD_MASK)
        except TransportError as e:
            if e.status_code is None:
                raise
            logger.info(f"No coordinates for place {place_id}: {e}")
            return None

        display_name = (payload.get("displayName") or {}).get("text")
        try:
            coordinates = Coordinates.from_provider(payload.get("location"))
        except ValueError:
            coordinates = None
        if not payload.get("id") or not display_name or coordinates is None:
            return None

        return PlaceWithCoordinates(
            place_id=payload["id"],
            display_name=display_name,
            coordinates=coordinates,
            formatted_address=payload.get("formattedAddress"),
        )

    async def fetch_full_details_by_identifier(
        self,
        place_id: str,
        fallback_name: Optional[str] = None,
    ) -> Optional[PlaceLookupResult]:
        """Full-mask lookup for a place with no internal record. Not cached."""
        try:
            payload = await self.client.get_place_details(place_id, field_mask=FieldMask.FULL.value)
        except TransportError as e:
            if e.status_code is None:
                raise
            logger.info(f"Full lookup failed for place {place_id}: {e}")
            return None

        if not payload.get("id"):
            return None

        details = transform_place_details(payload, place_id, fetched_at=self.cache.clock())
        location = build_location_draft(payload, details, fallback_name=fallback_name)
        return PlaceLookupResult(location=location, details=details)
