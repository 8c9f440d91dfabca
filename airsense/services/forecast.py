"""
Forecast Service

Hourly PM2.5 forecast for a city from the Open-Meteo air quality API,
converted point by point to AQI.
"""

import logging

from airsense.models import ForecastPoint, ForecastResponse, Outcome, Probe
from airsense.services.aqi import calculate_aqi
from airsense.services.cache import normalize_key
from airsense.services.http import JsonApiClient, DEFAULT_TIMEOUT_SECONDS
from airsense.services.readings import concentration, parse_utc, utc_now
from airsense.services.resolution import GEOCODE_FAILED_MESSAGE

logger = logging.getLogger(__name__)


OPEN_METEO_AIR_QUALITY_URL = 'https://air-quality-api.open-meteo.com/v1/air-quality'
DEFAULT_FORECAST_DAYS = 2
FORECAST_UNAVAILABLE_MESSAGE = 'Forecast unavailable for this city.'


class OpenMeteoClient(JsonApiClient):

    source = 'Open-Meteo'
    auth_message = 'Forecast request rejected by {source} ({status}).'

    def __init__(self, url=OPEN_METEO_AIR_QUALITY_URL, timeout=DEFAULT_TIMEOUT_SECONDS, http=None):
        super().__init__(url, timeout=timeout, http=http, headers={'Accept': 'application/json'})

    def hourly_pm25(self, lat, lon, forecast_days=DEFAULT_FORECAST_DAYS):
        """Probe wrapping a list of ``(time_text, value)`` pairs."""
        probe = self.get_json('', {
            'latitude': lat,
            'longitude': lon,
            'hourly': 'pm2_5',
            'forecast_days': forecast_days,
            'timezone': 'UTC',
        })
        if not probe.is_ok:
            return probe

        hourly = probe.value.get('hourly') if isinstance(probe.value, dict) else None
        if not isinstance(hourly, dict):
            return Probe.empty('No hourly data')
        times = hourly.get('time')
        values = hourly.get('pm2_5')
        if not isinstance(times, list):
            return Probe.empty('No hourly data')
        if not isinstance(values, list):
            values = []
        pairs = [(t, values[idx] if idx < len(values) else None) for idx, t in enumerate(times)]
        if not pairs:
            return Probe.empty('No hourly data')
        return Probe.ok(pairs)


class ForecastService:

    def __init__(self, geocoder, client, cache, forecast_days=DEFAULT_FORECAST_DAYS, clock=utc_now):
        self.geocoder = geocoder
        self.client = client
        self.cache = cache
        self.forecast_days = forecast_days
        self.clock = clock

    def forecast(self, city_text):
        query = (city_text or '').strip()
        if not query:
            return Outcome.city_required()

        key = normalize_key(query)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        outcome = self._forecast_uncached(query)
        self.cache.put(key, outcome)
        return outcome

    def _forecast_uncached(self, query):
        geo_probe = self.geocoder.resolve(query)
        if geo_probe.is_fatal:
            return Outcome.upstream_failure(geo_probe.failure)
        if not geo_probe.is_ok:
            return Outcome.not_found(GEOCODE_FAILED_MESSAGE)
        geo = geo_probe.value

        probe = self.client.hourly_pm25(geo.latitude, geo.longitude, forecast_days=self.forecast_days)
        if probe.is_fatal:
            return Outcome.upstream_failure(probe.failure)
        if not probe.is_ok:
            logger.debug('No forecast for %r: %s', query, probe.reason)
            return Outcome.not_found(FORECAST_UNAVAILABLE_MESSAGE)

        current_hour = self.clock().replace(minute=0, second=0, microsecond=0)
        points = []
        for time_text, raw_value in probe.value:
            observed_at = parse_utc(time_text)
            value = concentration(raw_value)
            if observed_at is None or value is None or observed_at < current_hour:
                continue
            points.append(ForecastPoint(
                t=observed_at.strftime('%Y-%m-%dT%H:%M:%SZ'),
                pm25=value,
                aqi=calculate_aqi(value),
            ))

        if not points:
            return Outcome.not_found(FORECAST_UNAVAILABLE_MESSAGE)
        return Outcome.resolved(ForecastResponse(query=query, resolved=geo.display_name, points=tuple(points)))
