"""
Pytest configuration and shared fixtures for backend tests.

This module provides test fixtures for:
- Cache tiers driven by a controllable clock
- Durable stores (in-memory, SQLite via SQLAlchemy, mocked Redis)
- Mock Google Places client
- FastAPI test client
- Test data factories
"""

import os

# Settings are read at import time; pin them before importing the package.
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "test-api-key")
os.environ["DURABLE_STORE_BACKEND"] = "none"

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from places_backend.application.services.photo_proxy import PhotoProxy
from places_backend.application.services.place_details_service import PlaceDetailsService
from places_backend.application.services.place_resolver import PlaceResolver
from places_backend.core.dependencies import (
    get_photo_proxy,
    get_place_cache,
    get_place_details_repository,
    get_place_details_service,
)
from places_backend.infrastructure.cache.place_cache import PlaceCacheService
from places_backend.infrastructure.external_apis.google_places_client import GooglePlacesClient
from places_backend.infrastructure.persistence.db import Base, init_db
from places_backend.infrastructure.persistence.repositories.in_memory_place_details_repository import (
    InMemoryPlaceDetailsRepository,
)
from places_backend.infrastructure.persistence.repositories.sqlalchemy_place_details_repository import (
    SQLAlchemyPlaceDetailsRepository,
)
from places_backend.main import app


KINKAKUJI_PLACE_ID = "ChIJvUbrwCCoAWARX2QiHCsn5A4"


# ==============================================================================
# CLOCK & CACHE FIXTURES
# ==============================================================================

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def place_cache(clock) -> PlaceCacheService:
    """Cache tiers with production TTLs and a fake clock."""
    return PlaceCacheService(
        place_id_ttl=timedelta(days=30),
        details_ttl=timedelta(hours=6),
        place_id_max_size=1000,
        details_max_size=1000,
        clock=clock,
    )


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    init_db(engine)

    yield engine

    # Drop all tables after test
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def sql_repository(test_db_engine) -> SQLAlchemyPlaceDetailsRepository:
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    return SQLAlchemyPlaceDetailsRepository(session_factory)


@pytest.fixture
def memory_repository() -> InMemoryPlaceDetailsRepository:
    return InMemoryPlaceDetailsRepository()


# ==============================================================================
# MOCK EXTERNAL API FIXTURES
# ==============================================================================

@pytest.fixture
def mock_redis():
    """Mock Redis client for cache tests."""
    redis_mock = MagicMock()
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.setex = AsyncMock(return_value=True)
    redis_mock.delete = AsyncMock(return_value=1)
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.aclose = AsyncMock(return_value=None)
    return redis_mock


@pytest.fixture
def mock_places_client():
    """Mock Google Places client. Every call returns empty results by default."""
    client = MagicMock(spec=GooglePlacesClient)
    client.search_text = AsyncMock(return_value=[])
    client.get_place_details = AsyncMock(return_value={})
    client.open_photo_media = AsyncMock()
    return client


# ==============================================================================
# SERVICE FIXTURES
# ==============================================================================

@pytest.fixture
def resolver(mock_places_client, place_cache) -> PlaceResolver:
    return PlaceResolver(mock_places_client, place_cache, country_hint="Japan")


@pytest.fixture
def details_service(mock_places_client, place_cache, memory_repository, resolver) -> PlaceDetailsService:
    """Details service that persists inline so tests can assert on the store."""
    return PlaceDetailsService(
        client=mock_places_client,
        cache=place_cache,
        repository=memory_repository,
        resolver=resolver,
        persist_in_background=False,
    )


@pytest.fixture
def client(details_service, place_cache, memory_repository, mock_places_client) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client wired to the mocked provider."""
    app.dependency_overrides[get_place_details_service] = lambda: details_service
    app.dependency_overrides[get_photo_proxy] = lambda: PhotoProxy(mock_places_client)
    app.dependency_overrides[get_place_cache] = lambda: place_cache
    app.dependency_overrides[get_place_details_repository] = lambda: memory_repository

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==============================================================================
# TEST DATA FACTORIES
# ==============================================================================

def make_review(index: int, author: Optional[str] = "Visitor") -> Dict[str, Any]:
    attribution = {"uri": f"https://maps.google.com/contrib/{index}", "photoUri": f"https://lh3.example/{index}.jpg"}
    if author:
        attribution["displayName"] = f"{author} {index}"
    return {
        "authorAttribution": attribution,
        "rating": 5,
        "text": {"text": f"Review number {index}", "languageCode": "en"},
        "relativePublishTimeDescription": "a month ago",
        "publishTime": "2026-03-01T10:00:00Z",
    }


def make_photo(index: int, place_id: str = KINKAKUJI_PLACE_ID) -> Dict[str, Any]:
    return {
        "name": f"places/{place_id}/photos/photo{index}",
        "widthPx": 4032,
        "heightPx": 3024,
        "authorAttributions": [{"displayName": f"Photographer {index}", "uri": "https://maps.google.com/contrib/p"}],
    }


def make_details_payload(
    place_id: str = KINKAKUJI_PLACE_ID,
    photos: int = 3,
    reviews: int = 2,
    **overrides: Any,
) -> Dict[str, Any]:
    """Places v1 details payload shaped like a slim field mask response."""
    payload: Dict[str, Any] = {
        "id": place_id,
        "displayName": {"text": "Kinkaku-ji", "languageCode": "en"},
        "formattedAddress": "1 Kinkakujicho, Kita Ward, Kyoto, 603-8361, Japan",
        "shortFormattedAddress": "1 Kinkakujicho, Kita Ward, Kyoto",
        "rating": 4.6,
        "userRatingCount": 61234,
        "editorialSummary": {"text": "Zen temple covered in gold leaf.", "languageCode": "en"},
        "websiteUri": "https://www.shokoku-ji.jp/kinkakuji/",
        "internationalPhoneNumber": "+81 75-461-0013",
        "googleMapsUri": "https://maps.google.com/?cid=1",
        "regularOpeningHours": {"weekdayDescriptions": [
            "Monday: 9:00 AM – 5:00 PM",
            "Tuesday: 9:00 AM – 5:00 PM",
        ]},
        "reviews": [make_review(i) for i in range(reviews)],
        "photos": [make_photo(i, place_id) for i in range(photos)],
    }
    payload.update(overrides)
    return payload


def make_search_result(place_id: str = KINKAKUJI_PLACE_ID, name: str = "Kinkaku-ji") -> List[Dict[str, Any]]:
    return [{
        "id": place_id,
        "displayName": {"text": name, "languageCode": "en"},
        "formattedAddress": "1 Kinkakujicho, Kita Ward, Kyoto, 603-8361, Japan",
    }]


# ==============================================================================
# MARKERS
# ==============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: Mark test as an integration test"
    )
