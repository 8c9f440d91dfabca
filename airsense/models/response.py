"""
Response Models

Externally visible results of the resolution, location, forecast and advice
services, and the Outcome wrapper that tags them as resolved or not.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from airsense.models.aqi import AqiResult
from airsense.models.probe import UpstreamFailure
from airsense.models.reading import Reading


CITY_REQUIRED_MESSAGE = 'City is required.'


def _station_field(reading):
    """Coordinates when the reading carries them, otherwise the station name."""
    if reading.coordinates is not None:
        return reading.coordinates.to_dict()
    return reading.station_name


def _reading_fields(reading, aqi):
    return {
        'pm25': reading.value,
        'unit': reading.unit,
        'observedUtc': reading.observed_utc,
        'aqi': aqi.aqi,
        'aqi_category': aqi.label,
        'health_advice': aqi.advisory,
    }


@dataclass(frozen=True)
class ResolutionResponse:
    """Current AQI for a city."""
    query: str
    resolved: str
    reading: Reading
    aqi: AqiResult
    country_code: Optional[str] = None

    def to_dict(self):
        body = {'query': self.query, 'resolved': self.resolved}
        body.update(_reading_fields(self.reading, self.aqi))
        station = _station_field(self.reading)
        if station is not None:
            body['station'] = station
        if self.reading.station_id is not None:
            body['stationId'] = self.reading.station_id
        if self.reading.sensor_id is not None:
            body['sensorId'] = self.reading.sensor_id
        if self.country_code:
            body['countryCode'] = self.country_code
        return body


@dataclass(frozen=True)
class LocationResponse:
    """Current AQI for a single monitoring station."""
    location_id: int
    reading: Reading
    aqi: AqiResult

    def to_dict(self):
        body = {'locationId': self.location_id}
        body.update(_reading_fields(self.reading, self.aqi))
        station = _station_field(self.reading)
        if station is not None:
            body['station'] = station
        if self.reading.station_name:
            body['locationName'] = self.reading.station_name
        if self.reading.sensor_id is not None:
            body['sensorId'] = self.reading.sensor_id
        return body


@dataclass(frozen=True)
class ForecastPoint:
    t: str
    pm25: float
    aqi: int

    def to_dict(self):
        return {'t': self.t, 'pm25': self.pm25, 'aqi': self.aqi}


@dataclass(frozen=True)
class ForecastResponse:
    query: str
    resolved: str
    points: Tuple[ForecastPoint, ...]

    def to_dict(self):
        return {
            'query': self.query,
            'resolved': self.resolved,
            'points': [p.to_dict() for p in self.points],
        }


@dataclass(frozen=True)
class AdviceResponse:
    city: str
    aqi: int
    band: str
    color: str
    public_advice: str
    sensitive_advice: str
    pollutant_note: str

    def to_dict(self):
        return {
            'city': self.city,
            'aqi': self.aqi,
            'band': self.band,
            'color': self.color,
            'publicAdvice': self.public_advice,
            'sensitiveAdvice': self.sensitive_advice,
            'pollutantNote': self.pollutant_note,
        }


class OutcomeKind(Enum):
    RESOLVED = 'resolved'
    CITY_REQUIRED = 'city_required'
    NOT_FOUND = 'not_found'
    UPSTREAM_FAILURE = 'upstream_failure'


@dataclass(frozen=True)
class Outcome:
    """Tagged result of a service call.

    Only RESOLVED outcomes carry a response object and only they may be
    cached. The other kinds carry a human-readable message.
    """
    kind: OutcomeKind
    response: Any = None
    message: Optional[str] = None
    failure: Optional[UpstreamFailure] = None

    @classmethod
    def resolved(cls, response):
        return cls(OutcomeKind.RESOLVED, response=response)

    @classmethod
    def city_required(cls):
        return cls(OutcomeKind.CITY_REQUIRED, message=CITY_REQUIRED_MESSAGE)

    @classmethod
    def not_found(cls, message):
        return cls(OutcomeKind.NOT_FOUND, message=message)

    @classmethod
    def upstream_failure(cls, failure):
        return cls(OutcomeKind.UPSTREAM_FAILURE, message=failure.message, failure=failure)

    @property
    def is_resolved(self):
        return self.kind is OutcomeKind.RESOLVED

    @property
    def cacheable(self):
        return self.is_resolved

    @property
    def http_status(self):
        if self.kind is OutcomeKind.RESOLVED:
            return 200
        if self.kind is OutcomeKind.CITY_REQUIRED:
            return 400
        if self.kind is OutcomeKind.UPSTREAM_FAILURE:
            return self.failure.status_code
        return 404

    def to_dict(self):
        if self.is_resolved:
            return self.response.to_dict()
        return {'message': self.message}
