"""SQLAlchemy models for the durable place details tier."""
from sqlalchemy import Column, String, DateTime, JSON, Index

from places_backend.infrastructure.persistence.db import Base


class PlaceDetails(Base):
    """Last successful provider fetch for one internal location."""
    __tablename__ = "place_details"

    location_id = Column(String(255), primary_key=True)
    place_id = Column(String(255), nullable=False)
    payload = Column(JSON, nullable=False)
    fetched_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_place_details_place_id", "place_id"),
    )

    def __repr__(self) -> str:
        return f"<PlaceDetails(location_id='{self.location_id}', place_id='{self.place_id}')>"
