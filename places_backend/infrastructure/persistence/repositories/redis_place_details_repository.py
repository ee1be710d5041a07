"""Redis-backed PlaceDetailsRepository for deployments without a SQL database."""
import json
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from places_backend.config import settings as cache_settings
from places_backend.core.exceptions import PersistenceWarning
from places_backend.core.settings import settings
from places_backend.domain.repositories.place_details_repository import (
    PlaceDetailsRecord,
    PlaceDetailsRepository,
)
from places_backend.utils.time_utils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

KEY_PREFIX = "place_details"


class RedisPlaceDetailsRepository(PlaceDetailsRepository):
    """Stores one JSON document per location under `place_details:{location_id}`.

    Keys expire with the identifier TTL: a row older than that is no longer
    useful even as a source of the place id.
    """

    backend_name = "redis"

    def __init__(self, client: redis.Redis, ttl_seconds: Optional[int] = None):
        self._redis = client
        self._ttl_seconds = ttl_seconds or cache_settings.PLACE_ID_CACHE_TTL_SECONDS

    @classmethod
    def from_settings(cls) -> "RedisPlaceDetailsRepository":
        client = redis.from_url(
            settings.get_redis_cache_url(),
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info(f"Redis place store initialized: {settings.REDIS_CACHE_HOST}:{settings.REDIS_CACHE_PORT}/{settings.REDIS_CACHE_DB}")
        return cls(client)

    def _make_key(self, location_id: str) -> str:
        return f"{KEY_PREFIX}:{location_id}"

    async def get(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        try:
            value = await self._redis.get(self._make_key(location_id))
        except RedisError as e:
            raise PersistenceWarning(f"Redis get error for {location_id}: {e}") from e

        if not value:
            return None

        try:
            data = json.loads(value)
            return PlaceDetailsRecord(
                location_id=location_id,
                place_id=data["place_id"],
                payload=data.get("payload") or {},
                fetched_at=parse_timestamp(data.get("fetched_at")),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise PersistenceWarning(f"Corrupt place details document for {location_id}: {e}") from e

    async def upsert(self, record: PlaceDetailsRecord) -> None:
        serialized = json.dumps({
            "place_id": record.place_id,
            "payload": record.payload,
            "fetched_at": format_timestamp(record.fetched_at),
        })
        try:
            await self._redis.setex(self._make_key(record.location_id), self._ttl_seconds, serialized)
        except RedisError as e:
            raise PersistenceWarning(f"Redis set error for {record.location_id}: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        await self._redis.aclose()
        logger.info("Redis place store connection closed")
