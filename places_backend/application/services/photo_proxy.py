"""Authenticated relay for provider photo media.

Browsers only ever see our proxy URL; the API key and the provider's media
endpoint stay server-side.
"""
import logging
import re
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

import httpx

from places_backend.config import settings
from places_backend.core.exceptions import InvalidPhotoReference
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient

logger = logging.getLogger(__name__)

PHOTO_NAME_PATTERN = re.compile(r"places/[A-Za-z0-9_-]+/photos/[A-Za-z0-9_-]+")

# Upstream headers relayed unchanged to the client.
PASSTHROUGH_HEADERS = (
    "content-type",
    "content-length",
    "content-encoding",
    "cache-control",
    "etag",
    "last-modified",
)


@dataclass
class PhotoStream:
    """Open upstream photo response. Iterate it exactly once."""
    status_code: int
    headers: Dict[str, str]
    response: httpx.Response

    @property
    def media_type(self) -> Optional[str]:
        return self.headers.get("content-type")

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield raw upstream bytes, closing the response when done."""
        try:
            async for chunk in self.response.aiter_raw():
                yield chunk
        finally:
            await self.response.aclose()


def sanitize_dimension(value: Optional[int]) -> Optional[int]:
    """Drop resize hints the provider would reject."""
    if value is None:
        return None
    if settings.PHOTO_DIMENSION_MIN <= value <= settings.PHOTO_DIMENSION_MAX:
        return value
    return None


class PhotoProxy:
    """Streams provider photos referenced by opaque photo names."""

    def __init__(self, client: GooglePlacesClient):
        self.client = client

    async def stream_photo(
        self,
        photo_name: str,
        max_width_px: Optional[int] = None,
        max_height_px: Optional[int] = None,
    ) -> PhotoStream:
        """Open the upstream media stream for a photo.

        Raises:
            InvalidPhotoReference: malformed photo name (checked before any call)
            UpstreamError: the provider answered with a non-2xx status
            TransportError: timeout or network failure
        """
        if not photo_name or not PHOTO_NAME_PATTERN.fullmatch(photo_name):
            raise InvalidPhotoReference(f"Invalid photoName: {photo_name!r}")

        response = await self.client.open_photo_media(
            photo_name,
            max_width_px=sanitize_dimension(max_width_px),
            max_height_px=sanitize_dimension(max_height_px),
        )
        headers = {
            name: response.headers[name]
            for name in PASSTHROUGH_HEADERS
            if name in response.headers
        }
        return PhotoStream(status_code=response.status_code, headers=headers, response=response)
