"""Application constants that never change across environments.

Field masks are part of the provider contract: every field listed here is billed,
so call sites pick the smallest mask that covers what they render.
"""
from enum import Enum

# ===== Provider Headers =====
HEADER_API_KEY = "X-Goog-Api-Key"
HEADER_FIELD_MASK = "X-Goog-FieldMask"

# ===== Field Masks =====
SEARCH_FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.formattedAddress",
])

AUTOCOMPLETE_FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.formattedAddress",
    "places.location",
])

COORDINATES_FIELD_MASK = ",".join([
    "id",
    "displayName",
    "formattedAddress",
    "location",
])

SLIM_DETAILS_FIELDS = [
    "id",
    "displayName",
    "formattedAddress",
    "shortFormattedAddress",
    "rating",
    "userRatingCount",
    "editorialSummary",
    "websiteUri",
    "internationalPhoneNumber",
    "googleMapsUri",
    "regularOpeningHours.weekdayDescriptions",
    "currentOpeningHours.weekdayDescriptions",
    "reviews.authorAttribution",
    "reviews.rating",
    "reviews.relativePublishTimeDescription",
    "reviews.publishTime",
    "reviews.text",
    "photos.name",
    "photos.widthPx",
    "photos.heightPx",
    "photos.authorAttributions",
]

# Batch enrichment also needs categorization, geometry and amenities.
FULL_DETAILS_FIELDS = SLIM_DETAILS_FIELDS + [
    "location",
    "addressComponents",
    "primaryType",
    "types",
    "businessStatus",
    "priceLevel",
    "accessibilityOptions",
    "servesVegetarianFood",
]


class FieldMask(str, Enum):
    """Details field mask sized to the call site."""
    SLIM = ",".join(SLIM_DETAILS_FIELDS)
    FULL = ",".join(FULL_DETAILS_FIELDS)


# ===== Review Defaults =====
DEFAULT_REVIEW_AUTHOR = "Google user"

# ===== Category Fallback =====
FALLBACK_CATEGORY = "point_of_interest"
