"""Google Places API (New) client: text search, place details and photo media."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from places_backend.config import settings as cache_settings
from places_backend.constants import HEADER_API_KEY, HEADER_FIELD_MASK
from places_backend.core.exceptions import ConfigurationError, TransportError, UpstreamError
from places_backend.core.settings import settings
from places_backend.infrastructure.external_apis.http_client import get_shared_client

logger = logging.getLogger(__name__)


class GooglePlacesClient:
    """Thin async wrapper over the Places v1 endpoints.

    Returns raw payloads; shaping happens in the application layer. Every
    failure surfaces as an exception, never as None, so callers cannot
    mistake an outage for "no such place".
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key or settings.GOOGLE_PLACES_API_KEY
        self.base_url = (base_url or settings.PLACES_API_BASE_URL).rstrip("/")
        self._http_client = http_client
        if not self.api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not set")

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http_client if self._http_client is not None else get_shared_client()

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "Missing Google Places API key. Set GOOGLE_PLACES_API_KEY in your environment."
            )
        return self.api_key

    def _headers(self, field_mask: Optional[str] = None) -> Dict[str, str]:
        headers = {HEADER_API_KEY: self._require_api_key()}
        if field_mask:
            headers[HEADER_FIELD_MASK] = field_mask
        return headers

    @staticmethod
    def _truncate(body: str) -> str:
        limit = cache_settings.ERROR_BODY_TRUNCATION_LENGTH
        return body if len(body) <= limit else body[:limit] + "..."

    async def _send(self, request: httpx.Request, description: str, stream: bool = False) -> httpx.Response:
        try:
            # Photo media answers with a redirect to the image bytes
            return await self.http.send(request, stream=stream, follow_redirects=True)
        except httpx.TimeoutException as e:
            logger.error(f"Timed out {description}: {e}")
            raise TransportError(f"Timed out {description}") from e
        except httpx.HTTPError as e:
            logger.error(f"Network error {description}: {e}")
            raise TransportError(f"Network error {description}: {e}") from e

    async def _request_json(self, request: httpx.Request, description: str) -> Dict[str, Any]:
        response = await self._send(request, description)
        if not response.is_success:
            body = self._truncate(response.text)
            logger.error(f"Google Places API error {description}: {response.status_code} - {body}")
            raise TransportError(
                f"Failed {description}. Status {response.status_code}. Body: {body}",
                status_code=response.status_code,
                body=body,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON {description}") from e

    async def search_text(
        self,
        query: str,
        field_mask: str,
        language_code: Optional[str] = None,
        region_code: Optional[str] = None,
        page_size: int = 1,
        extra: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Run places:searchText and return the raw `places` list (possibly empty)."""
        body: Dict[str, Any] = {
            "textQuery": query,
            "languageCode": language_code or cache_settings.PROVIDER_LANGUAGE_CODE,
            "regionCode": region_code or cache_settings.PROVIDER_REGION_CODE,
            "pageSize": page_size,
        }
        if extra:
            body.update(extra)

        request = self.http.build_request(
            "POST",
            f"{self.base_url}/places:searchText",
            headers={**self._headers(field_mask), "Content-Type": "application/json"},
            json=body,
        )
        data = await self._request_json(request, f'searching place for "{query}"')
        places = data.get("places") or []
        logger.info(f'Text search for "{query}" returned {len(places)} place(s)')
        return places

    async def get_place_details(
        self,
        place_id: str,
        field_mask: str,
        language_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch a place by id, limited to the given field mask."""
        request = self.http.build_request(
            "GET",
            f"{self.base_url}/places/{place_id}",
            headers=self._headers(field_mask),
            params={"languageCode": language_code or cache_settings.PROVIDER_LANGUAGE_CODE},
        )
        return await self._request_json(request, f"fetching details for place {place_id}")

    async def open_photo_media(
        self,
        photo_name: str,
        max_width_px: Optional[int] = None,
        max_height_px: Optional[int] = None,
    ) -> httpx.Response:
        """Open a streamed photo media response. The caller must close it."""
        params: Dict[str, Any] = {}
        if max_width_px:
            params["maxWidthPx"] = max_width_px
        if max_height_px:
            params["maxHeightPx"] = max_height_px

        request = self.http.build_request(
            "GET",
            f"{self.base_url}/{photo_name}/media",
            headers=self._headers(),
            params=params,
        )
        description = f'fetching photo "{photo_name}"'
        response = await self._send(request, description, stream=True)
        if not response.is_success:
            await response.aread()
            body = self._truncate(response.text)
            await response.aclose()
            logger.error(f"Google Places photo error: {response.status_code} - {body}")
            raise UpstreamError(
                f"Failed {description}. Status {response.status_code}. Body: {body}",
                status_code=response.status_code,
                body=body,
            )
        return response
