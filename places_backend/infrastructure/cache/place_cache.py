"""In-process cache tiers for resolved place ids and place details."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from places_backend.config import settings
from places_backend.domain.entities.location_details import LocationDetails
from places_backend.infrastructure.cache.ttl_cache import BoundedTTLCache
from places_backend.utils.time_utils import utc_now


@dataclass(frozen=True)
class PlaceIdCacheEntry:
    """Resolved provider identifier for a location."""
    place_id: str
    expires_at: datetime
    matched_name: Optional[str] = None
    formatted_address: Optional[str] = None

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class PlaceDetailsCacheEntry:
    """Transformed details for a location."""
    details: LocationDetails
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class PlaceCacheService:
    """Owns both in-process tiers and their TTL policy.

    One instance is shared per process (see core.dependencies); tests build
    their own with a fake clock.
    """

    def __init__(
        self,
        place_id_ttl: Optional[timedelta] = None,
        details_ttl: Optional[timedelta] = None,
        place_id_max_size: Optional[int] = None,
        details_max_size: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.place_id_ttl = place_id_ttl or timedelta(seconds=settings.PLACE_ID_CACHE_TTL_SECONDS)
        self.details_ttl = details_ttl or timedelta(seconds=settings.PLACE_DETAILS_CACHE_TTL_SECONDS)
        self.clock = clock
        self._place_ids: BoundedTTLCache[PlaceIdCacheEntry] = BoundedTTLCache(
            place_id_max_size or settings.PLACE_ID_CACHE_MAX_SIZE, clock=clock
        )
        self._details: BoundedTTLCache[PlaceDetailsCacheEntry] = BoundedTTLCache(
            details_max_size or settings.PLACE_DETAILS_CACHE_MAX_SIZE, clock=clock
        )

    # ----- place ids -----

    def get_place_id(self, location_id: str) -> Optional[PlaceIdCacheEntry]:
        return self._place_ids.get(location_id)

    def new_place_id_entry(
        self,
        place_id: str,
        matched_name: Optional[str] = None,
        formatted_address: Optional[str] = None,
    ) -> PlaceIdCacheEntry:
        """Build an entry that expires one identifier TTL from now."""
        return PlaceIdCacheEntry(
            place_id=place_id,
            expires_at=self.clock() + self.place_id_ttl,
            matched_name=matched_name,
            formatted_address=formatted_address,
        )

    def set_place_id(self, location_id: str, entry: PlaceIdCacheEntry) -> PlaceIdCacheEntry:
        self._place_ids.set(location_id, entry)
        return entry

    # ----- details -----

    def get_details(self, location_id: str) -> Optional[LocationDetails]:
        entry = self._details.get(location_id)
        return entry.details if entry else None

    def set_details(self, location_id: str, details: LocationDetails) -> PlaceDetailsCacheEntry:
        entry = PlaceDetailsCacheEntry(details=details, expires_at=self.clock() + self.details_ttl)
        self._details.set(location_id, entry)
        return entry

    def is_details_fresh(self, fetched_at: datetime) -> bool:
        """True if details fetched at `fetched_at` are still inside the details TTL."""
        return self.clock() - fetched_at < self.details_ttl

    def stats(self) -> Dict[str, int]:
        return {
            "place_ids": len(self._place_ids),
            "place_ids_max": self._place_ids.max_size,
            "details": len(self._details),
            "details_max": self._details.max_size,
        }
