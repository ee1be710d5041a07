"""Maps Google Places types to the internal category system.

The provider's taxonomy is large and grows without notice, so lookups are
table-driven and total: an unknown type falls through to the generic
`point_of_interest` category instead of failing ingestion.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from places_backend.constants import FALLBACK_CATEGORY


@dataclass(frozen=True)
class CategoryMapping:
    """Internal category with an optional finer sub type."""
    category: str
    sub_type: Optional[str] = None


def _group(category: str, sub_type: Optional[str], types: Iterable[str]) -> Dict[str, CategoryMapping]:
    mapping = CategoryMapping(category, sub_type)
    return {t: mapping for t in types}


# Exact matches on the lower-cased primary type.
PRIMARY_TYPE_TABLE: Dict[str, CategoryMapping] = {
    # Accommodation
    **_group("hotel", "hotel", [
        "lodging", "hotel", "motel", "resort_hotel", "extended_stay_hotel",
        "bed_and_breakfast", "hostel", "guest_house", "ryokan", "capsule_hotel",
    ]),
    # Transportation
    **_group("transport", "airport", ["airport", "international_airport", "domestic_airport"]),
    **_group("transport", "station", [
        "train_station", "transit_station", "subway_station", "light_rail_station", "bus_station",
    ]),
    # Culture
    **_group("culture", "shrine", ["shinto_shrine"]),
    **_group("culture", "temple", ["buddhist_temple", "hindu_temple"]),
    **_group("culture", "museum", ["museum", "art_gallery"]),
    **_group("culture", "landmark", ["castle", "historical_landmark", "monument", "palace"]),
    **_group("culture", "performing_arts", ["performing_arts_theater", "concert_hall", "cultural_center"]),
    **_group("culture", None, ["place_of_worship", "church", "mosque", "synagogue"]),
    # Food & Drink
    **_group("restaurant", "restaurant", [
        "restaurant", "japanese_restaurant", "sushi_restaurant", "ramen_restaurant",
        "italian_restaurant", "chinese_restaurant", "korean_restaurant", "thai_restaurant",
        "indian_restaurant", "american_restaurant", "french_restaurant", "seafood_restaurant",
        "steak_house", "barbecue_restaurant", "pizza_restaurant", "fast_food_restaurant",
        "meal_takeaway", "meal_delivery",
    ]),
    **_group("restaurant", "cafe", ["cafe", "coffee_shop", "bakery", "ice_cream_shop"]),
    **_group("bar", "bar", ["bar", "night_club", "wine_bar", "cocktail_bar"]),
    **_group("market", "market", ["market", "supermarket", "grocery_store", "food_store"]),
    # Nature
    **_group("nature", "park", ["park", "city_park", "dog_park", "playground", "national_park", "state_park"]),
    **_group("nature", "garden", ["botanical_garden"]),
    **_group("nature", "beach", ["beach"]),
    **_group("nature", "mountain", ["hiking_area", "campground"]),
    **_group("nature", "onsen", ["spa", "hot_spring"]),
    # Shopping
    **_group("shopping", "mall", ["shopping_mall", "department_store"]),
    **_group("shopping", "specialty", [
        "store", "gift_shop", "clothing_store", "jewelry_store",
        "electronics_store", "book_store", "convenience_store",
    ]),
    # Views
    **_group("view", "viewpoint", ["tourist_attraction", "scenic_spot", "observation_deck"]),
    **_group("view", "tower", ["tower"]),
    # Entertainment
    **_group("entertainment", None, [
        "amusement_park", "theme_park", "aquarium", "zoo",
        "bowling_alley", "movie_theater", "casino",
    ]),
}

# Substring anchors for primary types the table does not list (e.g. "inari_shrine").
PRIMARY_KEYWORD_ANCHORS: List[Tuple[str, CategoryMapping]] = [
    ("shrine", CategoryMapping("culture", "shrine")),
    ("temple", CategoryMapping("culture", "temple")),
]

# Broad anchors recognized in the secondary `types` list, first hit wins.
SECONDARY_TYPE_ANCHORS: Dict[str, CategoryMapping] = {
    "lodging": CategoryMapping("hotel", "hotel"),
    "restaurant": CategoryMapping("restaurant", "restaurant"),
    "food": CategoryMapping("restaurant", "restaurant"),
    "tourist_attraction": CategoryMapping("view"),
    "park": CategoryMapping("nature", "park"),
    "store": CategoryMapping("shopping"),
    "shopping_mall": CategoryMapping("shopping"),
}

FALLBACK_MAPPING = CategoryMapping(FALLBACK_CATEGORY)


def map_google_type_to_category(
    primary_type: Optional[str],
    types: Optional[Iterable[str]] = None,
) -> CategoryMapping:
    """Map a provider primaryType (plus its types list) to an internal category.

    Order: exact primary match, primary keyword anchor, first recognized
    secondary type, generic fallback. Never raises.
    """
    if isinstance(primary_type, str) and primary_type:
        key = primary_type.strip().lower()
        exact = PRIMARY_TYPE_TABLE.get(key)
        if exact:
            return exact
        for keyword, mapping in PRIMARY_KEYWORD_ANCHORS:
            if keyword in key:
                return mapping

    for t in types or []:
        if not isinstance(t, str):
            continue
        anchor = SECONDARY_TYPE_ANCHORS.get(t.strip().lower())
        if anchor:
            return anchor

    return FALLBACK_MAPPING
