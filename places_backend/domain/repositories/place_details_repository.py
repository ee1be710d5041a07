"""Durable place details store interface - the cross-process cache tier."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PlaceDetailsRecord:
    """One stored row per internal location."""
    location_id: str
    place_id: str
    payload: Dict[str, Any]
    fetched_at: datetime


class PlaceDetailsRepository(ABC):
    """Repository interface for persisted place details.

    Implementations wrap driver errors in PersistenceWarning so the caller can
    degrade to in-process caching without knowing the backend.
    """

    backend_name: str = "unknown"

    @abstractmethod
    async def get(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        """Get the stored row for a location, if any."""
        pass

    @abstractmethod
    async def upsert(self, record: PlaceDetailsRecord) -> None:
        """Insert or replace the row for record.location_id."""
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        return None
