"""Pure functions mapping Places API (New) payloads into canonical details.

Field notes for the v1 payload:
- reviews[].authorAttribution.{displayName, uri, photoUri}
- reviews[].text is an object {text, languageCode}
- reviews[].publishTime is ISO 8601, relativePublishTimeDescription is display text
- photos[].name is the opaque reference used by the media endpoint
- opening hours arrive as weekdayDescriptions, one string per day
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

from places_backend.application.services.type_mapper import map_google_type_to_category
from places_backend.config import settings
from places_backend.constants import DEFAULT_REVIEW_AUTHOR
from places_backend.domain.entities.location import LocationDraft
from places_backend.domain.entities.location_details import (
    LocationDetails,
    Photo,
    PhotoAttribution,
    Review,
)
from places_backend.domain.repositories.place_details_repository import PlaceDetailsRecord
from places_backend.domain.value_objects.coordinates import Coordinates

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    """Unwrap a localized text object ({text, languageCode}) or plain string."""
    if isinstance(value, dict):
        return value.get("text")
    if isinstance(value, str):
        return value
    return None


def build_photo_proxy_url(photo_name: str, max_width_px: Optional[int] = None) -> str:
    """Relative URL of the photo proxy for a provider photo name."""
    width = max_width_px or settings.PHOTO_PROXY_MAX_WIDTH
    return f"{settings.PHOTO_PROXY_PATH}?photoName={quote(photo_name, safe='')}&maxWidthPx={width}"


def transform_reviews(reviews: Optional[List[Dict[str, Any]]], max_reviews: Optional[int] = None) -> List[Review]:
    """Keep the first `max_reviews` reviews in provider order."""
    if not reviews:
        return []
    limit = settings.MAX_REVIEWS if max_reviews is None else max_reviews

    result = []
    for review in [r for r in reviews if r][:limit]:
        author = review.get("authorAttribution") or {}
        result.append(Review(
            author_name=author.get("displayName") or DEFAULT_REVIEW_AUTHOR,
            author_uri=author.get("uri"),
            profile_photo_uri=author.get("photoUri"),
            rating=review.get("rating"),
            text=_text(review.get("text")),
            relative_time=review.get("relativePublishTimeDescription"),
            published_at=review.get("publishTime"),
        ))
    return result


def transform_photos(photos: Optional[List[Dict[str, Any]]], max_photos: Optional[int] = None) -> List[Photo]:
    """Keep the first `max_photos` named photos in provider order."""
    if not photos:
        return []
    limit = settings.MAX_PHOTOS if max_photos is None else max_photos

    result = []
    for photo in [p for p in photos if p and p.get("name")][:limit]:
        result.append(Photo(
            name=photo["name"],
            proxy_url=build_photo_proxy_url(photo["name"]),
            width_px=photo.get("widthPx"),
            height_px=photo.get("heightPx"),
            attributions=[
                PhotoAttribution(
                    display_name=a.get("displayName"),
                    uri=a.get("uri"),
                    photo_uri=a.get("photoUri"),
                )
                for a in photo.get("authorAttributions") or []
                if a
            ],
        ))
    return result


def transform_opening_hours(hours: Optional[Dict[str, Any]]) -> List[str]:
    """Flatten an opening hours object to its weekday descriptions."""
    if not hours:
        return []
    return [d for d in hours.get("weekdayDescriptions") or [] if isinstance(d, str)]


def _coordinates(payload: Dict[str, Any], place_id: str) -> Optional[Coordinates]:
    try:
        return Coordinates.from_provider(payload.get("location"))
    except ValueError as e:
        logger.warning(f"Ignoring invalid coordinates for place {place_id}: {e}")
        return None


def transform_place_details(
    payload: Dict[str, Any],
    fallback_place_id: str,
    fetched_at: datetime,
) -> LocationDetails:
    """Build canonical details from a place details payload.

    Categorization, coordinates and amenities stay None unless the payload
    was fetched with the full field mask.
    """
    place_id = payload.get("id") or fallback_place_id
    primary_type = payload.get("primaryType")
    google_types = list(payload.get("types") or [])
    mapping = map_google_type_to_category(primary_type, google_types) if primary_type or google_types else None

    return LocationDetails(
        place_id=place_id,
        fetched_at=fetched_at,
        formatted_address=payload.get("formattedAddress"),
        short_address=payload.get("shortFormattedAddress"),
        rating=payload.get("rating"),
        user_rating_count=payload.get("userRatingCount"),
        editorial_summary=_text(payload.get("editorialSummary")),
        website_uri=payload.get("websiteUri"),
        phone=payload.get("internationalPhoneNumber"),
        google_maps_uri=payload.get("googleMapsUri"),
        regular_opening_hours=transform_opening_hours(payload.get("regularOpeningHours")),
        current_opening_hours=transform_opening_hours(payload.get("currentOpeningHours")),
        reviews=transform_reviews(payload.get("reviews")),
        photos=transform_photos(payload.get("photos")),
        category=mapping.category if mapping else None,
        sub_type=mapping.sub_type if mapping else None,
        google_primary_type=primary_type,
        google_types=google_types,
        coordinates=_coordinates(payload, place_id),
        business_status=payload.get("businessStatus"),
        price_level=payload.get("priceLevel"),
        accessibility_options=payload.get("accessibilityOptions"),
        serves_vegetarian_food=payload.get("servesVegetarianFood"),
    )


def normalize_details_row(record: PlaceDetailsRecord) -> LocationDetails:
    """Rebuild canonical details from a durable row.

    The row's own place_id and fetched_at fill gaps in older payloads.
    """
    return LocationDetails.from_dict(
        record.payload or {},
        fallback_place_id=record.place_id,
        fallback_fetched_at=record.fetched_at,
    )


def _address_component(components: Optional[List[Dict[str, Any]]], component_type: str) -> Optional[str]:
    for component in components or []:
        if component_type in (component.get("types") or []):
            return component.get("longText") or component.get("shortText")
    return None


def build_location_draft(
    payload: Dict[str, Any],
    details: LocationDetails,
    fallback_name: Optional[str] = None,
) -> LocationDraft:
    """Assemble a draft location from a full-mask details payload."""
    components = payload.get("addressComponents")
    mapping = map_google_type_to_category(details.google_primary_type, details.google_types)

    return LocationDraft(
        place_id=details.place_id,
        name=_text(payload.get("displayName")) or fallback_name or details.place_id,
        city=_address_component(components, "locality"),
        region=_address_component(components, "administrative_area_level_1"),
        category=mapping.category,
        sub_type=mapping.sub_type,
        coordinates=details.coordinates,
        rating=details.rating,
        review_count=details.user_rating_count,
        primary_photo_url=details.photos[0].proxy_url if details.photos else None,
        editorial_summary=details.editorial_summary,
        google_primary_type=details.google_primary_type,
        google_types=list(details.google_types),
        business_status=details.business_status,
        price_level=details.price_level,
        accessibility_options=details.accessibility_options,
    )
