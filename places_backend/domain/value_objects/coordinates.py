"""Coordinate value object - immutable and validated."""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Coordinates:
    """Immutable coordinate value object."""
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinates."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}")

    @classmethod
    def from_provider(cls, location: Optional[Dict[str, Any]]) -> Optional["Coordinates"]:
        """Build from a provider `location` object, or None if incomplete."""
        if not location:
            return None
        lat = location.get("latitude")
        lng = location.get("longitude")
        if lat is None or lng is None:
            return None
        return cls(latitude=float(lat), longitude=float(lng))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"lat": self.latitude, "lng": self.longitude}
