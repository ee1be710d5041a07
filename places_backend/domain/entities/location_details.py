"""Canonical place details - independent of the provider's raw schema."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from places_backend.domain.value_objects.coordinates import Coordinates
from places_backend.utils.time_utils import format_timestamp, parse_timestamp


def _coordinates_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Coordinates]:
    if not data or data.get("lat") is None or data.get("lng") is None:
        return None
    return Coordinates(latitude=float(data["lat"]), longitude=float(data["lng"]))


@dataclass(frozen=True)
class PhotoAttribution:
    """Author credit that must be displayed next to a provider photo."""
    display_name: Optional[str] = None
    uri: Optional[str] = None
    photo_uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"display_name": self.display_name, "uri": self.uri, "photo_uri": self.photo_uri}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoAttribution":
        return cls(
            display_name=data.get("display_name"),
            uri=data.get("uri"),
            photo_uri=data.get("photo_uri"),
        )


@dataclass(frozen=True)
class Photo:
    """Provider photo referenced by its opaque name, served through the proxy."""
    name: str
    proxy_url: str
    width_px: Optional[int] = None
    height_px: Optional[int] = None
    attributions: List[PhotoAttribution] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "proxy_url": self.proxy_url,
            "width_px": self.width_px,
            "height_px": self.height_px,
            "attributions": [a.to_dict() for a in self.attributions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Photo":
        return cls(
            name=data["name"],
            proxy_url=data.get("proxy_url", ""),
            width_px=data.get("width_px"),
            height_px=data.get("height_px"),
            attributions=[PhotoAttribution.from_dict(a) for a in data.get("attributions") or []],
        )


@dataclass(frozen=True)
class Review:
    """Visitor review as returned by the provider."""
    author_name: str
    author_uri: Optional[str] = None
    profile_photo_uri: Optional[str] = None
    rating: Optional[float] = None
    text: Optional[str] = None
    relative_time: Optional[str] = None
    published_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "author_name": self.author_name,
            "author_uri": self.author_uri,
            "profile_photo_uri": self.profile_photo_uri,
            "rating": self.rating,
            "text": self.text,
            "relative_time": self.relative_time,
            "published_at": self.published_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Review":
        return cls(
            author_name=data.get("author_name") or "",
            author_uri=data.get("author_uri"),
            profile_photo_uri=data.get("profile_photo_uri"),
            rating=data.get("rating"),
            text=data.get("text"),
            relative_time=data.get("relative_time"),
            published_at=data.get("published_at"),
        )


@dataclass(frozen=True)
class LocationDetails:
    """Normalized place details for one location."""
    place_id: str
    fetched_at: datetime
    formatted_address: Optional[str] = None
    short_address: Optional[str] = None
    rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    editorial_summary: Optional[str] = None
    website_uri: Optional[str] = None
    phone: Optional[str] = None
    google_maps_uri: Optional[str] = None
    regular_opening_hours: List[str] = field(default_factory=list)
    current_opening_hours: List[str] = field(default_factory=list)
    reviews: List[Review] = field(default_factory=list)
    photos: List[Photo] = field(default_factory=list)
    # Populated only by the full field mask
    category: Optional[str] = None
    sub_type: Optional[str] = None
    google_primary_type: Optional[str] = None
    google_types: List[str] = field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    business_status: Optional[str] = None
    price_level: Optional[str] = None
    accessibility_options: Optional[Dict[str, Any]] = None
    serves_vegetarian_food: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the durable store and API responses."""
        return {
            "place_id": self.place_id,
            "formatted_address": self.formatted_address,
            "short_address": self.short_address,
            "rating": self.rating,
            "user_rating_count": self.user_rating_count,
            "editorial_summary": self.editorial_summary,
            "website_uri": self.website_uri,
            "phone": self.phone,
            "google_maps_uri": self.google_maps_uri,
            "regular_opening_hours": list(self.regular_opening_hours),
            "current_opening_hours": list(self.current_opening_hours),
            "reviews": [r.to_dict() for r in self.reviews],
            "photos": [p.to_dict() for p in self.photos],
            "category": self.category,
            "sub_type": self.sub_type,
            "google_primary_type": self.google_primary_type,
            "google_types": list(self.google_types),
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "business_status": self.business_status,
            "price_level": self.price_level,
            "accessibility_options": self.accessibility_options,
            "serves_vegetarian_food": self.serves_vegetarian_food,
            "fetched_at": format_timestamp(self.fetched_at),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        fallback_place_id: Optional[str] = None,
        fallback_fetched_at: Optional[datetime] = None,
    ) -> "LocationDetails":
        """Rebuild from a stored payload.

        Older payloads may lack `place_id`, `fetched_at`, photos or reviews;
        the row-level values fill the identity fields and lists default to empty.
        """
        place_id = data.get("place_id") or fallback_place_id
        if not place_id:
            raise ValueError("Stored payload has no place_id")

        fetched_at = parse_timestamp(data.get("fetched_at")) or fallback_fetched_at
        if fetched_at is None:
            raise ValueError("Stored payload has no fetched_at")

        return cls(
            place_id=place_id,
            fetched_at=fetched_at,
            formatted_address=data.get("formatted_address"),
            short_address=data.get("short_address"),
            rating=data.get("rating"),
            user_rating_count=data.get("user_rating_count"),
            editorial_summary=data.get("editorial_summary"),
            website_uri=data.get("website_uri"),
            phone=data.get("phone"),
            google_maps_uri=data.get("google_maps_uri"),
            regular_opening_hours=list(data.get("regular_opening_hours") or []),
            current_opening_hours=list(data.get("current_opening_hours") or []),
            reviews=[Review.from_dict(r) for r in data.get("reviews") or []],
            photos=[Photo.from_dict(p) for p in data.get("photos") or [] if p.get("name")],
            category=data.get("category"),
            sub_type=data.get("sub_type"),
            google_primary_type=data.get("google_primary_type"),
            google_types=list(data.get("google_types") or []),
            coordinates=_coordinates_from_dict(data.get("coordinates")),
            business_status=data.get("business_status"),
            price_level=data.get("price_level"),
            accessibility_options=data.get("accessibility_options"),
            serves_vegetarian_food=data.get("serves_vegetarian_food"),
        )
