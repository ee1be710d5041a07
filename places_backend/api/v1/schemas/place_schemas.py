"""Pydantic schemas for the places API."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from places_backend.domain.entities.location import Location


# Request Schemas
class LocationRequestSchema(BaseModel):
    """Internal location record as sent by the content system."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    city: Optional[str] = None
    region: Optional[str] = None
    place_id: Optional[str] = None

    def to_entity(self) -> Location:
        return Location(
            id=self.id,
            name=self.name,
            city=self.city,
            region=self.region,
            place_id=self.place_id or None,
        )


# Details Response Schemas
class PhotoAttributionSchema(BaseModel):
    """Photo author credit."""
    display_name: Optional[str] = None
    uri: Optional[str] = None
    photo_uri: Optional[str] = None


class PhotoSchema(BaseModel):
    """Photo served through the proxy."""
    name: str
    proxy_url: str
    width_px: Optional[int] = None
    height_px: Optional[int] = None
    attributions: List[PhotoAttributionSchema] = []


class ReviewSchema(BaseModel):
    """Review schema."""
    author_name: str
    author_uri: Optional[str] = None
    profile_photo_uri: Optional[str] = None
    rating: Optional[float] = None
    text: Optional[str] = None
    relative_time: Optional[str] = None
    published_at: Optional[str] = None


class CoordinatesSchema(BaseModel):
    lat: float
    lng: float


class LocationDetailsSchema(BaseModel):
    """Canonical place details."""
    place_id: str
    formatted_address: Optional[str] = None
    short_address: Optional[str] = None
    rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    editorial_summary: Optional[str] = None
    website_uri: Optional[str] = None
    phone: Optional[str] = None
    google_maps_uri: Optional[str] = None
    regular_opening_hours: List[str] = []
    current_opening_hours: List[str] = []
    reviews: List[ReviewSchema] = []
    photos: List[PhotoSchema] = []
    category: Optional[str] = None
    sub_type: Optional[str] = None
    google_primary_type: Optional[str] = None
    google_types: List[str] = []
    coordinates: Optional[CoordinatesSchema] = None
    business_status: Optional[str] = None
    price_level: Optional[str] = None
    accessibility_options: Optional[Dict[str, Any]] = None
    serves_vegetarian_food: Optional[bool] = None
    fetched_at: datetime


class ResolvableResponseSchema(BaseModel):
    """Data-quality check result."""
    location_id: str
    resolvable: bool


# Search Schemas
class AutocompletePlaceSchema(BaseModel):
    """Autocomplete suggestion."""
    place_id: str
    display_name: str
    formatted_address: Optional[str] = None
    coordinates: Optional[CoordinatesSchema] = None


class AutocompleteResponseSchema(BaseModel):
    places: List[AutocompletePlaceSchema]
    count: int


class PlaceCoordinatesResponseSchema(BaseModel):
    """Identifier lookup with position."""
    place_id: str
    display_name: str
    formatted_address: Optional[str] = None
    coordinates: CoordinatesSchema


class LocationDraftSchema(BaseModel):
    """Draft location built from provider data."""
    place_id: str
    name: str
    city: Optional[str] = None
    region: Optional[str] = None
    category: str
    sub_type: Optional[str] = None
    coordinates: Optional[CoordinatesSchema] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    primary_photo_url: Optional[str] = None
    editorial_summary: Optional[str] = None
    google_primary_type: Optional[str] = None
    google_types: List[str] = []
    business_status: Optional[str] = None
    price_level: Optional[str] = None
    accessibility_options: Optional[Dict[str, Any]] = None


class PlaceLookupResponseSchema(BaseModel):
    location: LocationDraftSchema
    details: LocationDetailsSchema
