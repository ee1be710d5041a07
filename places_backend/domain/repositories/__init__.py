"""Repository interfaces."""
from places_backend.domain.repositories.place_details_repository import (
    PlaceDetailsRecord,
    PlaceDetailsRepository,
)

__all__ = [
    "PlaceDetailsRecord",
    "PlaceDetailsRepository",
]
