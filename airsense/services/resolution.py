"""
Resolution Service

City name in, current PM2.5 AQI out: geocode, find nearby stations, pick the
freshest reading (widening the lookback window once if needed), convert to
AQI and cache successful results.
"""

import logging

from airsense.models import LocationResponse, Outcome, Probe, ResolutionResponse, StationCandidate
from airsense.services.aqi import to_aqi
from airsense.services.cache import normalize_key

logger = logging.getLogger(__name__)


LOOKBACK_DAYS_PRIMARY = 60
LOOKBACK_DAYS_FALLBACK = 120

GEOCODE_FAILED_MESSAGE = 'Unable to geocode the requested city.'
NO_CITY_DATA_MESSAGE = 'No PM2.5 data available for this city.'
NO_LOCATION_DATA_MESSAGE = 'No PM2.5 data available for this location.'


class ResolutionService:

    def __init__(self, geocoder, locator, selector, cache,
                 lookback_days=(LOOKBACK_DAYS_PRIMARY, LOOKBACK_DAYS_FALLBACK)):
        self.geocoder = geocoder
        self.locator = locator
        self.selector = selector
        self.cache = cache
        self.lookback_days = tuple(lookback_days)

    def resolve(self, city_text):
        """Resolve a city name to an Outcome wrapping a ResolutionResponse.

        Blank input returns CITY_REQUIRED without touching the cache or any
        upstream source. Only RESOLVED outcomes are cached.
        """
        query = (city_text or '').strip()
        if not query:
            return Outcome.city_required()

        key = normalize_key(query)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug('Cache hit for %r', key)
            return cached

        outcome = self._resolve_uncached(query)
        self.cache.put(key, outcome)
        logger.info('Resolved %r: %s', query, outcome.kind.value)
        return outcome

    def _resolve_uncached(self, query):
        geo_probe = self.geocoder.resolve(query)
        if geo_probe.is_fatal:
            return Outcome.upstream_failure(geo_probe.failure)
        if not geo_probe.is_ok:
            return Outcome.not_found(GEOCODE_FAILED_MESSAGE)
        geo = geo_probe.value

        reading_probe = self._sweep(lambda: self.locator.find_candidates(geo.latitude, geo.longitude))
        if reading_probe.is_fatal:
            return Outcome.upstream_failure(reading_probe.failure)
        if not reading_probe.is_ok:
            return Outcome.not_found(NO_CITY_DATA_MESSAGE)

        reading = reading_probe.value
        return Outcome.resolved(ResolutionResponse(
            query=query,
            resolved=geo.display_name,
            reading=reading,
            aqi=to_aqi(reading.value),
            country_code=geo.country_code,
        ))

    def resolve_location(self, location_id):
        """Current AQI for a single station id. Not cached."""
        candidate = StationCandidate(station_id=location_id)
        reading_probe = self._sweep(lambda: Probe.ok([candidate]))
        if reading_probe.is_fatal:
            return Outcome.upstream_failure(reading_probe.failure)
        if not reading_probe.is_ok:
            return Outcome.not_found(NO_LOCATION_DATA_MESSAGE)

        reading = reading_probe.value
        return Outcome.resolved(LocationResponse(
            location_id=location_id,
            reading=reading,
            aqi=to_aqi(reading.value),
        ))

    def _sweep(self, find_candidates):
        """Run station discovery and reading selection once per lookback window.

        Each window is a full, independent sweep; the first window that
        yields a reading wins and a FATAL probe stops everything.
        """
        probe = Probe.empty('No lookback windows configured')
        for days in self.lookback_days:
            candidates_probe = find_candidates()
            if candidates_probe.is_fatal:
                return candidates_probe
            if not candidates_probe.is_ok:
                probe = candidates_probe
                continue

            probe = self.selector.select_latest(candidates_probe.value, days)
            if probe.is_fatal or probe.is_ok:
                return probe
            logger.debug('No reading within %d days, widening lookback', days)
        return probe
