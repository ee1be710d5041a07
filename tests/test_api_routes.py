"""Tests for the places and health HTTP routes."""
import httpx
import pytest

from places_backend.api.v1.routes.places import get_place_photo
from places_backend.application.services.photo_proxy import PhotoProxy
from places_backend.constants import FieldMask
from places_backend.core.exceptions import ConfigurationError, TransportError, UpstreamError

from conftest import KINKAKUJI_PLACE_ID, make_details_payload, make_search_result

CURATED_BODY = {"id": "loc-1", "name": "Kinkaku-ji", "city": "Kyoto", "place_id": KINKAKUJI_PLACE_ID}
UNRESOLVED_BODY = {"id": "loc-2", "name": "Kinkaku-ji", "city": "Kyoto", "region": "Kyoto Prefecture"}


class TestDetailsEndpoint:

    def test_returns_details(self, client, mock_places_client):
        mock_places_client.get_place_details.return_value = make_details_payload(photos=12, reviews=9)

        response = client.post("/api/v1/places/details", json=CURATED_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["place_id"] == KINKAKUJI_PLACE_ID
        assert len(data["photos"]) == 8
        assert len(data["reviews"]) == 5
        assert data["photos"][0]["proxy_url"].startswith("/api/v1/places/photo?photoName=")
        assert data["fetched_at"].startswith("2026-04-01T09:00:00")

    def test_full_flag_selects_full_mask(self, client, mock_places_client):
        mock_places_client.get_place_details.return_value = make_details_payload(
            primaryType="buddhist_temple", location={"latitude": 35.0394, "longitude": 135.7292}
        )

        response = client.post("/api/v1/places/details?full=true", json=CURATED_BODY)

        assert response.status_code == 200
        mock_places_client.get_place_details.assert_awaited_once_with(
            KINKAKUJI_PLACE_ID, field_mask=FieldMask.FULL.value
        )
        data = response.json()
        assert data["category"] == "culture"
        assert data["coordinates"] == {"lat": 35.0394, "lng": 135.7292}

    def test_unresolvable_location_is_404(self, client, mock_places_client):
        mock_places_client.search_text.return_value = []

        response = client.post("/api/v1/places/details", json=UNRESOLVED_BODY)

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "PLACE_NOT_FOUND"

    def test_provider_failure_is_502(self, client, mock_places_client):
        mock_places_client.get_place_details.side_effect = TransportError("Failed", status_code=503)

        response = client.post("/api/v1/places/details", json=CURATED_BODY)

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "UPSTREAM_ERROR"

    def test_missing_api_key_is_500(self, client, mock_places_client):
        mock_places_client.get_place_details.side_effect = ConfigurationError("no key")

        response = client.post("/api/v1/places/details", json=CURATED_BODY)

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "CONFIGURATION_ERROR"

    def test_body_validation(self, client):
        response = client.post("/api/v1/places/details", json={"id": "loc-1"})
        assert response.status_code == 422


class TestResolvableEndpoint:

    def test_resolvable(self, client, mock_places_client):
        mock_places_client.search_text.return_value = make_search_result()

        response = client.post("/api/v1/places/resolvable", json=UNRESOLVED_BODY)

        assert response.status_code == 200
        assert response.json() == {"location_id": "loc-2", "resolvable": True}

    def test_not_resolvable(self, client, mock_places_client):
        mock_places_client.search_text.return_value = []

        response = client.post("/api/v1/places/resolvable", json=UNRESOLVED_BODY)

        assert response.json()["resolvable"] is False


class TestPhotoEndpoint:

    def test_streams_photo(self, client, mock_places_client):
        mock_places_client.open_photo_media.return_value = httpx.Response(
            200,
            headers={"content-type": "image/jpeg", "cache-control": "public, max-age=86400"},
            stream=httpx.ByteStream(b"jpeg-bytes"),
        )

        response = client.get(
            "/api/v1/places/photo",
            params={"photoName": "places/abc/photos/ref1", "maxWidthPx": 1600},
        )

        assert response.status_code == 200
        assert response.content == b"jpeg-bytes"
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["cache-control"] == "public, max-age=86400"
        mock_places_client.open_photo_media.assert_awaited_once_with(
            "places/abc/photos/ref1", max_width_px=1600, max_height_px=None
        )

    def test_missing_photo_name_is_400(self, client):
        response = client.get("/api/v1/places/photo")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "BAD_REQUEST"

    def test_path_traversal_is_400(self, client, mock_places_client):
        response = client.get("/api/v1/places/photo", params={"photoName": "../../etc/passwd"})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "BAD_REQUEST"
        mock_places_client.open_photo_media.assert_not_awaited()

    def test_upstream_failure_is_502(self, client, mock_places_client):
        mock_places_client.open_photo_media.side_effect = UpstreamError("Failed", status_code=404)

        response = client.get("/api/v1/places/photo", params={"photoName": "places/abc/photos/ref1"})

        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_response_closes_upstream_without_streaming(self, mock_places_client):
        upstream = httpx.Response(200, headers={"content-type": "image/jpeg"}, stream=httpx.ByteStream(b"img"))
        mock_places_client.open_photo_media.return_value = upstream

        response = await get_place_photo(
            photo_name="places/abc/photos/ref1",
            max_width_px=None,
            max_height_px=None,
            proxy=PhotoProxy(mock_places_client),
        )

        assert response.background is not None
        assert not upstream.is_closed
        # Starlette runs the background task once the response ends, disconnects included
        await response.background()
        assert upstream.is_closed


class TestSearchEndpoints:

    def test_autocomplete(self, client, mock_places_client):
        mock_places_client.search_text.return_value = [{
            "id": "p1",
            "displayName": {"text": "Kinkaku-ji"},
            "formattedAddress": "Kyoto",
            "location": {"latitude": 35.0394, "longitude": 135.7292},
        }]

        response = client.get(
            "/api/v1/places/autocomplete",
            params={"input": "kinkaku", "lat": 35.0, "lng": 135.7, "radius": 5000},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["places"][0]["coordinates"] == {"lat": 35.0394, "lng": 135.7292}
        extra = mock_places_client.search_text.call_args.kwargs["extra"]
        assert extra["locationBias"]["circle"]["radius"] == 5000

    def test_coordinates(self, client, mock_places_client):
        mock_places_client.get_place_details.return_value = {
            "id": "p1",
            "displayName": {"text": "Kinkaku-ji"},
            "location": {"latitude": 35.0394, "longitude": 135.7292},
        }

        response = client.get("/api/v1/places/p1/coordinates")

        assert response.status_code == 200
        assert response.json()["coordinates"] == {"lat": 35.0394, "lng": 135.7292}

    def test_coordinates_not_found(self, client, mock_places_client):
        mock_places_client.get_place_details.side_effect = TransportError("Not found", status_code=404)

        response = client.get("/api/v1/places/missing/coordinates")

        assert response.status_code == 404

    def test_lookup(self, client, mock_places_client):
        mock_places_client.get_place_details.return_value = make_details_payload(
            primaryType="buddhist_temple", types=["buddhist_temple"]
        )

        response = client.get(f"/api/v1/places/{KINKAKUJI_PLACE_ID}/lookup")

        assert response.status_code == 200
        data = response.json()
        assert data["location"]["category"] == "culture"
        assert data["location"]["sub_type"] == "temple"
        assert data["details"]["place_id"] == KINKAKUJI_PLACE_ID

    def test_lookup_not_found(self, client, mock_places_client):
        mock_places_client.get_place_details.side_effect = TransportError("Not found", status_code=404)

        response = client.get("/api/v1/places/missing/lookup")

        assert response.status_code == 404


class TestHealthEndpoints:

    def test_simple_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/api/v1/health").json() == {"status": "ok"}

    def test_detailed_health_reports_store_and_cache(self, client, mock_places_client):
        mock_places_client.get_place_details.return_value = make_details_payload()
        client.post("/api/v1/places/details", json=CURATED_BODY)

        data = client.get("/api/v1/health/detailed").json()

        assert data["durable_store"]["active"] == "memory"
        assert data["cache"]["details"] == 1
        assert data["cache"]["details_max"] == 1000
