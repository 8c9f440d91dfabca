"""
Geographic Models

Geocoding results, coordinates and nearby station candidates.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    @classmethod
    def from_payload(cls, payload):
        """Build from an upstream ``{"latitude": .., "longitude": ..}`` object.

        Returns None when either component is missing or not numeric.
        """
        if not isinstance(payload, dict):
            return None
        lat = payload.get('latitude')
        lon = payload.get('longitude')
        if isinstance(lat, bool) or isinstance(lon, bool):
            return None
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            return None
        return cls(float(lat), float(lon))

    def to_dict(self):
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass(frozen=True)
class GeoResult:
    """A geocoded city."""
    latitude: float
    longitude: float
    display_name: str
    country_code: Optional[str] = None


@dataclass(frozen=True)
class StationCandidate:
    """A monitoring station found near the query point."""
    station_id: int
    name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    distance_meters: Optional[float] = None
