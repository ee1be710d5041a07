"""Places API routes - thin layer delegating to the places services.
Only HTTP concerns live here: parsing, status codes and streaming."""
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from places_backend.api.v1.schemas.place_schemas import (
    AutocompletePlaceSchema,
    AutocompleteResponseSchema,
    LocationDetailsSchema,
    LocationDraftSchema,
    LocationRequestSchema,
    PlaceCoordinatesResponseSchema,
    PlaceLookupResponseSchema,
    ResolvableResponseSchema,
)
from places_backend.application.services.photo_proxy import PhotoProxy
from places_backend.application.services.place_details_service import PlaceDetailsService
from places_backend.constants import FieldMask
from places_backend.core.dependencies import get_photo_proxy, get_place_details_service
from places_backend.core.exceptions import (
    ConfigurationError,
    InvalidPhotoReference,
    PlacesServiceError,
    ResolutionFailed,
    TransportError,
)
from places_backend.domain.entities.place_search import AutocompleteBias
from places_backend.domain.value_objects.coordinates import Coordinates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["places"])


def _error(status_code: int, message: str, code: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": message, "code": code})


def _raise_for(e: PlacesServiceError) -> NoReturn:
    """Translate a places error into an HTTP error."""
    if isinstance(e, ResolutionFailed):
        raise _error(404, str(e), "PLACE_NOT_FOUND")
    if isinstance(e, ConfigurationError):
        logger.error(f"Places configuration error: {e}")
        raise _error(500, "Places service is not configured", "CONFIGURATION_ERROR")
    if isinstance(e, InvalidPhotoReference):
        raise _error(400, str(e), "BAD_REQUEST")
    if isinstance(e, TransportError):
        raise _error(502, "Upstream place provider failed", "UPSTREAM_ERROR")
    raise _error(500, "Internal server error", "INTERNAL_ERROR")


@router.post("/places/details", response_model=LocationDetailsSchema)
async def get_location_details(
    location: LocationRequestSchema,
    full: bool = Query(False, description="Request the full field mask (batch enrichment)"),
    service: PlaceDetailsService = Depends(get_place_details_service),
):
    """
    Get place details for an internal location.

    Served from the in-process cache or the durable store when fresh;
    otherwise resolved and fetched from Google Places.
    """
    field_mask = FieldMask.FULL if full else FieldMask.SLIM
    try:
        details = await service.get_details(location.to_entity(), field_mask=field_mask)
    except PlacesServiceError as e:
        _raise_for(e)
    return LocationDetailsSchema(**details.to_dict())


@router.post("/places/resolvable", response_model=ResolvableResponseSchema)
async def check_location_resolvable(
    location: LocationRequestSchema,
    service: PlaceDetailsService = Depends(get_place_details_service),
):
    """Report whether a location has a resolvable Google Place ID."""
    resolvable = await service.can_resolve_identifier(location.to_entity())
    return ResolvableResponseSchema(location_id=location.id, resolvable=resolvable)


@router.get("/places/photo")
async def get_place_photo(
    photo_name: Optional[str] = Query(None, alias="photoName"),
    max_width_px: Optional[int] = Query(None, alias="maxWidthPx"),
    max_height_px: Optional[int] = Query(None, alias="maxHeightPx"),
    proxy: PhotoProxy = Depends(get_photo_proxy),
):
    """
    Photo proxy that streams Google Places photo media.

    Keeps the API key server-side and relays the upstream content headers.
    """
    if not photo_name:
        raise _error(400, "Missing required query parameter 'photoName'", "BAD_REQUEST")

    try:
        stream = await proxy.stream_photo(photo_name, max_width_px=max_width_px, max_height_px=max_height_px)
    except PlacesServiceError as e:
        _raise_for(e)

    headers = {k: v for k, v in stream.headers.items() if k != "content-type"}
    return StreamingResponse(
        stream.iter_bytes(),
        status_code=stream.status_code,
        headers=headers,
        media_type=stream.media_type,
        # Closes the upstream response even if the client leaves before the first chunk
        background=BackgroundTask(stream.response.aclose),
    )


@router.get("/places/autocomplete", response_model=AutocompleteResponseSchema)
async def autocomplete_places(
    input_text: str = Query(..., alias="input", min_length=1),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, le=50000),
    types: Optional[List[str]] = Query(None),
    service: PlaceDetailsService = Depends(get_place_details_service),
):
    """Suggest places for free text, optionally biased to a circle."""
    bias = None
    if lat is not None and lng is not None and radius:
        bias = AutocompleteBias(center=Coordinates(latitude=lat, longitude=lng), radius_meters=radius)

    try:
        places = await service.resolve_autocomplete(input_text, bias=bias, included_primary_types=types)
    except PlacesServiceError as e:
        _raise_for(e)

    return AutocompleteResponseSchema(
        places=[AutocompletePlaceSchema(**p.to_dict()) for p in places],
        count=len(places),
    )


@router.get("/places/{place_id}/coordinates", response_model=PlaceCoordinatesResponseSchema)
async def get_place_coordinates(
    place_id: str,
    service: PlaceDetailsService = Depends(get_place_details_service),
):
    """Get the coordinates of a place selected from autocomplete."""
    try:
        place = await service.fetch_coordinates_by_identifier(place_id)
    except PlacesServiceError as e:
        _raise_for(e)

    if not place:
        raise _error(404, f"No coordinates found for place '{place_id}'", "PLACE_NOT_FOUND")

    return PlaceCoordinatesResponseSchema(
        place_id=place.place_id,
        display_name=place.display_name,
        formatted_address=place.formatted_address,
        coordinates=place.coordinates.to_dict(),
    )


@router.get("/places/{place_id}/lookup", response_model=PlaceLookupResponseSchema)
async def lookup_place(
    place_id: str,
    name: Optional[str] = Query(None, description="Fallback name if the provider returns none"),
    service: PlaceDetailsService = Depends(get_place_details_service),
):
    """Full details and a draft location for a place with no internal record."""
    try:
        result = await service.fetch_full_details_by_identifier(place_id, fallback_name=name)
    except PlacesServiceError as e:
        _raise_for(e)

    if not result:
        raise _error(404, f"Place '{place_id}' not found", "PLACE_NOT_FOUND")

    return PlaceLookupResponseSchema(
        location=LocationDraftSchema(**result.location.to_dict()),
        details=LocationDetailsSchema(**result.details.to_dict()),
    )
