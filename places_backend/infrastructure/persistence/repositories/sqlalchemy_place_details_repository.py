"""SQLAlchemy implementation of PlaceDetailsRepository.

The ORM calls are blocking, so each one runs in a worker thread.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from places_backend.core.exceptions import PersistenceWarning
from places_backend.domain.repositories.place_details_repository import (
    PlaceDetailsRecord,
    PlaceDetailsRepository,
)
from places_backend.infrastructure.persistence import models
from places_backend.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)


def _to_record(row: models.PlaceDetails) -> PlaceDetailsRecord:
    """Map ORM model to repository record."""
    return PlaceDetailsRecord(
        location_id=row.location_id,
        place_id=row.place_id,
        payload=dict(row.payload or {}),
        # SQLite hands back naive datetimes
        fetched_at=parse_timestamp(row.fetched_at),
    )


class SQLAlchemyPlaceDetailsRepository(PlaceDetailsRepository):
    """Place details repository using SQLAlchemy, one session per call."""

    backend_name = "database"

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def get(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        return await asyncio.to_thread(self._get_sync, location_id)

    async def upsert(self, record: PlaceDetailsRecord) -> None:
        await asyncio.to_thread(self._upsert_sync, record)

    def _get_sync(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        session = self.session_factory()
        try:
            row = session.get(models.PlaceDetails, location_id)
            return _to_record(row) if row else None
        except SQLAlchemyError as e:
            raise PersistenceWarning(f"Failed to read place details for {location_id}: {e}") from e
        finally:
            session.close()

    def _upsert_sync(self, record: PlaceDetailsRecord) -> None:
        session = self.session_factory()
        try:
            session.merge(models.PlaceDetails(
                location_id=record.location_id,
                place_id=record.place_id,
                payload=record.payload,
                fetched_at=record.fetched_at,
            ))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceWarning(f"Failed to persist place details for {record.location_id}: {e}") from e
        finally:
            session.close()
