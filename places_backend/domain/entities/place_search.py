"""Search-side entities: autocomplete candidates and identifier lookups."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from places_backend.domain.entities.location import LocationDraft
from places_backend.domain.entities.location_details import LocationDetails
from places_backend.domain.value_objects.coordinates import Coordinates


@dataclass(frozen=True)
class AutocompleteBias:
    """Biases or restricts autocomplete results to an area.

    A rectangle restriction wins over a circle bias when both are given.
    """
    center: Optional[Coordinates] = None
    radius_meters: Optional[float] = None
    low: Optional[Coordinates] = None
    high: Optional[Coordinates] = None

    def to_request(self) -> Dict[str, Any]:
        """Render as the searchText request fragment."""
        if self.low and self.high:
            return {
                "locationRestriction": {
                    "rectangle": {
                        "low": {"latitude": self.low.latitude, "longitude": self.low.longitude},
                        "high": {"latitude": self.high.latitude, "longitude": self.high.longitude},
                    }
                }
            }
        if self.center and self.radius_meters:
            return {
                "locationBias": {
                    "circle": {
                        "center": {"latitude": self.center.latitude, "longitude": self.center.longitude},
                        "radius": self.radius_meters,
                    }
                }
            }
        return {}


@dataclass(frozen=True)
class AutocompletePlace:
    """Autocomplete candidate."""
    place_id: str
    display_name: str
    formatted_address: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "display_name": self.display_name,
            "formatted_address": self.formatted_address,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
        }


@dataclass(frozen=True)
class PlaceWithCoordinates:
    """Identifier lookup result carrying a position."""
    place_id: str
    display_name: str
    coordinates: Coordinates
    formatted_address: Optional[str] = None


@dataclass(frozen=True)
class PlaceLookupResult:
    """Ad-hoc lookup for a place with no internal record."""
    location: LocationDraft
    details: LocationDetails
