"""
OpenAQ v3 Client

Locations near a point, the PM2.5 sensors of a location, and the most recent
measurement of a sensor.
"""

from airsense.models import Probe
from airsense.services.http import JsonApiClient, DEFAULT_TIMEOUT_SECONDS


OPENAQ_BASE_URL = 'https://api.openaq.org/v3'
PM25_PARAMETER_ID = 2


def format_coordinates(lat, lon):
    return f'{lat:.6f},{lon:.6f}'


def format_bbox(min_lon, min_lat, max_lon, max_lat):
    return f'{min_lon:.6f},{min_lat:.6f},{max_lon:.6f},{max_lat:.6f}'


class OpenAQClient(JsonApiClient):

    source = 'OpenAQ'

    def __init__(self, api_key, base_url=OPENAQ_BASE_URL, timeout=DEFAULT_TIMEOUT_SECONDS, http=None):
        super().__init__(
            base_url,
            timeout=timeout,
            http=http,
            headers={'Accept': 'application/json', 'X-API-Key': api_key.strip()},
        )

    def locations_near(self, lat, lon, radius_meters, limit=60):
        return self.get_results('/locations', {
            'coordinates': format_coordinates(lat, lon),
            'radius': radius_meters,
            'limit': limit,
            'parameters_id': PM25_PARAMETER_ID,
            'order_by': 'distance',
            'sort': 'asc',
        })

    def locations_in_bbox(self, bbox, limit=60):
        """Locations inside ``(min_lon, min_lat, max_lon, max_lat)``."""
        return self.get_results('/locations', {
            'bbox': format_bbox(*bbox),
            'limit': limit,
            'parameters_id': PM25_PARAMETER_ID,
        })

    def location_sensors(self, location_id, limit=6):
        return self.get_results(f'/locations/{location_id}/sensors', {
            'parameter_id': PM25_PARAMETER_ID,
            'limit': limit,
        })

    def latest_measurement(self, sensor_id, date_from=None):
        """Most recent measurement of a sensor at or after ``date_from``.

        Returns a probe wrapping the single measurement object.
        """
        params = {'limit': 1, 'order_by': 'datetime', 'sort': 'desc'}
        if date_from is not None:
            params['date_from'] = date_from.strftime('%Y-%m-%dT%H:%M:%SZ')
        probe = self.get_results(f'/sensors/{sensor_id}/measurements', params)
        if not probe.is_ok:
            return probe
        return Probe.ok(probe.value[0])
