"""In-memory implementation of PlaceDetailsRepository for testing and local dev.
Shares nothing across processes - use it where no database is available."""
from typing import Dict, Optional

from places_backend.domain.repositories.place_details_repository import (
    PlaceDetailsRecord,
    PlaceDetailsRepository,
)


class InMemoryPlaceDetailsRepository(PlaceDetailsRepository):
    """Dict-backed store keyed by location id."""

    backend_name = "memory"

    def __init__(self):
        self._rows: Dict[str, PlaceDetailsRecord] = {}

    async def get(self, location_id: str) -> Optional[PlaceDetailsRecord]:
        return self._rows.get(location_id)

    async def upsert(self, record: PlaceDetailsRecord) -> None:
        self._rows[record.location_id] = record

    def count(self) -> int:
        return len(self._rows)
