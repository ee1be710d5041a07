"""Tests for the photo proxy: name validation, resize hints and streaming."""
import httpx
import pytest

from places_backend.application.services.photo_proxy import PhotoProxy, sanitize_dimension
from places_backend.core.exceptions import InvalidPhotoReference
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient

VALID_NAME = "places/ChIJvUbrwCCoAWARX2QiHCsn5A4/photos/AUc7tXW-abc_123"


@pytest.mark.parametrize("photo_name", [
    "",
    "../../etc/passwd",
    "places/abc/photos/../../secret",
    "places/abc",
    "places/abc/photos/ref/media",
    "https://evil.example/places/abc/photos/ref",
    "places/abc/photos/ref?key=x",
])
@pytest.mark.asyncio
async def test_rejects_malformed_names_before_any_call(mock_places_client, photo_name):
    proxy = PhotoProxy(mock_places_client)

    with pytest.raises(InvalidPhotoReference):
        await proxy.stream_photo(photo_name)

    mock_places_client.open_photo_media.assert_not_awaited()


def test_invalid_reference_is_a_value_error():
    assert issubclass(InvalidPhotoReference, ValueError)


@pytest.mark.parametrize("value,expected", [
    (None, None),
    (0, None),
    (-5, None),
    (1, 1),
    (800, 800),
    (4800, 4800),
    (4801, None),
])
def test_sanitize_dimension(value, expected):
    assert sanitize_dimension(value) == expected


@pytest.mark.asyncio
async def test_out_of_range_hints_are_dropped(mock_places_client):
    mock_places_client.open_photo_media.return_value = httpx.Response(
        200, headers={"content-type": "image/jpeg"}, stream=httpx.ByteStream(b"img")
    )
    proxy = PhotoProxy(mock_places_client)

    await proxy.stream_photo(VALID_NAME, max_width_px=99999, max_height_px=600)

    mock_places_client.open_photo_media.assert_awaited_once_with(
        VALID_NAME, max_width_px=None, max_height_px=600
    )


@pytest.mark.asyncio
async def test_streams_bytes_and_relays_content_headers():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={
                "content-type": "image/webp",
                "cache-control": "public, max-age=86400",
                "etag": '"abc"',
                "set-cookie": "tracking=1",
            },
            content=b"webp-bytes",
        )

    client = GooglePlacesClient(
        api_key="test-key",
        base_url="https://places.googleapis.com/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    stream = await PhotoProxy(client).stream_photo(VALID_NAME, max_width_px=1600)

    chunks = [chunk async for chunk in stream.iter_bytes()]

    assert b"".join(chunks) == b"webp-bytes"
    assert stream.status_code == 200
    assert stream.media_type == "image/webp"
    assert stream.headers["cache-control"] == "public, max-age=86400"
    assert stream.headers["etag"] == '"abc"'
    assert "set-cookie" not in stream.headers
    assert stream.response.is_closed
