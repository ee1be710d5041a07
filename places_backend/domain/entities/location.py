"""Location domain entities - records owned by the content system."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from places_backend.domain.value_objects.coordinates import Coordinates


@dataclass(frozen=True)
class Location:
    """Internal location record. Read-only to the places layer."""
    id: str
    name: str
    city: Optional[str] = None
    region: Optional[str] = None
    place_id: Optional[str] = None

    def search_query(self, country_hint: Optional[str] = None) -> str:
        """Free-text query used when no place id is known."""
        parts = [self.name, self.city, self.region, country_hint]
        return ", ".join(part for part in parts if part)


@dataclass
class LocationDraft:
    """Location assembled from provider data for an ad-hoc lookup.

    Nothing is persisted; the content system decides whether to keep it.
    """
    place_id: str
    name: str
    category: str
    city: Optional[str] = None
    region: Optional[str] = None
    sub_type: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    primary_photo_url: Optional[str] = None
    editorial_summary: Optional[str] = None
    google_primary_type: Optional[str] = None
    google_types: List[str] = field(default_factory=list)
    business_status: Optional[str] = None
    price_level: Optional[str] = None
    accessibility_options: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "name": self.name,
            "city": self.city,
            "region": self.region,
            "category": self.category,
            "sub_type": self.sub_type,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "rating": self.rating,
            "review_count": self.review_count,
            "primary_photo_url": self.primary_photo_url,
            "editorial_summary": self.editorial_summary,
            "google_primary_type": self.google_primary_type,
            "google_types": list(self.google_types),
            "business_status": self.business_status,
            "price_level": self.price_level,
            "accessibility_options": self.accessibility_options,
        }
