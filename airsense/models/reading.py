"""
PM2.5 Reading Model
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from airsense.models.geo import Coordinates


DEFAULT_PM25_UNIT = 'ug/m3'


@dataclass(frozen=True)
class Reading:
    """A single PM2.5 measurement taken from a station sensor."""
    value: float
    unit: str
    observed_at: datetime
    observed_utc: str
    station_id: Optional[int] = None
    sensor_id: Optional[int] = None
    station_name: Optional[str] = None
    sensor_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    def __repr__(self):
        return f'<Reading Station:{self.station_id} Sensor:{self.sensor_id} PM2.5:{self.value} at {self.observed_utc}>'
