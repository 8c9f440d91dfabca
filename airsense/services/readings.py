"""
Reading Selection Service

Sweeps the PM2.5 sensors of candidate stations and keeps the freshest valid
reading inside a lookback window.
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from airsense.models import Coordinates, DEFAULT_PM25_UNIT, Probe, Reading
from airsense.services.http import as_dict
from airsense.services.openaq import PM25_PARAMETER_ID

logger = logging.getLogger(__name__)


DEFAULT_SENSORS_PER_STATION = 6


def utc_now():
    return datetime.now(timezone.utc)


def parse_utc(text):
    """Parse an ISO-8601 timestamp into an aware UTC datetime, or None."""
    if not isinstance(text, str) or not text.strip():
        return None
    try:
        parsed = datetime.fromisoformat(text.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def concentration(value):
    """A finite, non-negative numeric value, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _measurement_utc(measurement):
    period = as_dict(measurement.get('period'))
    for key in ('datetimeTo', 'datetimeFrom'):
        utc = as_dict(period.get(key)).get('utc')
        if utc:
            return utc
    return as_dict(measurement.get('datetime')).get('utc')


def _is_pm25(sensor):
    return as_dict(sensor.get('parameter')).get('id') == PM25_PARAMETER_ID


class ReadingSelector:
    """Freshest-wins PM2.5 reading selection across stations and sensors.

    Candidates are examined in order and a reading only replaces the running
    best when it is strictly newer, so ties go to the first one examined.
    A FATAL probe from any sensor aborts the sweep and is returned as is.
    """

    def __init__(self, client, sensors_per_station=DEFAULT_SENSORS_PER_STATION, clock=utc_now):
        self.client = client
        self.sensors_per_station = sensors_per_station
        self.clock = clock

    def select_latest(self, candidates, lookback_days):
        threshold = self.clock() - timedelta(days=lookback_days)
        best = None

        for candidate in candidates:
            probe = self._latest_for_station(candidate, threshold)
            if probe.is_fatal:
                return probe
            if probe.is_ok and (best is None or probe.value.observed_at > best.observed_at):
                best = probe.value

        if best is None:
            logger.debug('No PM2.5 reading newer than %s across %d stations',
                         threshold.isoformat(), len(candidates))
            return Probe.empty(f'No reading within {lookback_days} days')
        return Probe.ok(best)

    def _latest_for_station(self, candidate, threshold):
        sensors_probe = self.client.location_sensors(candidate.station_id, limit=self.sensors_per_station)
        if not sensors_probe.is_ok:
            return sensors_probe

        best = None
        for sensor in sensors_probe.value[:self.sensors_per_station]:
            if not isinstance(sensor, dict) or not _is_pm25(sensor):
                continue
            probe = self._reading_for_sensor(sensor, candidate, threshold)
            if probe.is_fatal:
                return probe
            if probe.is_ok and (best is None or probe.value.observed_at > best.observed_at):
                best = probe.value

        if best is None:
            return Probe.empty(f'No usable sensor at station {candidate.station_id}')
        return Probe.ok(best)

    def _reading_for_sensor(self, sensor, candidate, threshold):
        reading = self._from_snapshot(sensor, candidate)
        if reading is not None and reading.observed_at >= threshold:
            return Probe.ok(reading)

        sensor_id = sensor.get('id')
        if not isinstance(sensor_id, int) or sensor_id <= 0:
            return Probe.empty('Sensor without id')

        probe = self.client.latest_measurement(sensor_id, date_from=threshold)
        if not probe.is_ok:
            return probe

        reading = self._from_measurement(probe.value, sensor, candidate)
        if reading is None or reading.observed_at < threshold:
            logger.debug('Sensor %s has no PM2.5 measurement since %s', sensor_id, threshold.isoformat())
            return Probe.empty('Stale sensor')
        return Probe.ok(reading)

    def _from_snapshot(self, sensor, candidate):
        latest = as_dict(sensor.get('latest'))
        utc = as_dict(latest.get('datetime')).get('utc')
        return self._build(sensor, candidate, latest.get('value'), utc, latest.get('coordinates'))

    def _from_measurement(self, measurement, sensor, candidate):
        if not isinstance(measurement, dict):
            return None
        parameter = as_dict(measurement.get('parameter'))
        return self._build(
            sensor, candidate,
            measurement.get('value'),
            _measurement_utc(measurement),
            measurement.get('coordinates'),
            unit=parameter.get('units'),
        )

    def _build(self, sensor, candidate, raw_value, utc, raw_coordinates, unit=None):
        value = concentration(raw_value)
        observed_at = parse_utc(utc)
        if value is None or observed_at is None:
            return None

        parameter = as_dict(sensor.get('parameter'))
        coordinates = Coordinates.from_payload(raw_coordinates) or candidate.coordinates
        sensor_id = sensor.get('id')
        unit = next((u for u in (unit, parameter.get('units')) if isinstance(u, str) and u), DEFAULT_PM25_UNIT)
        return Reading(
            value=value,
            unit=unit,
            observed_at=observed_at,
            observed_utc=utc,
            station_id=candidate.station_id,
            sensor_id=sensor_id if isinstance(sensor_id, int) else None,
            station_name=candidate.name or sensor.get('locationName'),
            sensor_name=sensor.get('name'),
            coordinates=coordinates,
        )
