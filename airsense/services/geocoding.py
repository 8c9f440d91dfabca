"""
Geocoding Service

Resolves free-text city names to coordinates through OpenStreetMap Nominatim.
A city that cannot be geocoded is an EMPTY probe, not an error.
"""

import logging

from airsense.models import GeoResult, Probe
from airsense.services.http import JsonApiClient, DEFAULT_TIMEOUT_SECONDS, as_dict

logger = logging.getLogger(__name__)


NOMINATIM_URL = 'https://nominatim.openstreetmap.org'
DEFAULT_USER_AGENT = 'EarthDataAQI/1.0 (contact@example.com)'


class NominatimGeocoder(JsonApiClient):

    source = 'Nominatim'
    auth_message = 'Geocoding request rejected by {source} ({status}). Check GEOCODING_USER_AGENT.'

    def __init__(self, base_url=NOMINATIM_URL, user_agent=DEFAULT_USER_AGENT,
                 timeout=DEFAULT_TIMEOUT_SECONDS, http=None):
        super().__init__(
            base_url,
            timeout=timeout,
            http=http,
            headers={'Accept': 'application/json', 'User-Agent': user_agent},
        )

    def resolve(self, city):
        probe = self.get_json('/search', {
            'q': city,
            'format': 'json',
            'limit': 1,
            'addressdetails': 1,
        })
        if not probe.is_ok:
            return probe

        matches = probe.value
        if not isinstance(matches, list) or not matches:
            logger.debug('No geocoding match for %r', city)
            return Probe.empty(f'City {city} not found')

        match = matches[0]
        try:
            lat = float(match['lat'])
            lon = float(match['lon'])
        except (KeyError, TypeError, ValueError):
            logger.debug('Malformed geocoding match for %r: %r', city, match)
            return Probe.empty('Malformed geocoding result')

        country_code = as_dict(match.get('address')).get('country_code')
        if not isinstance(country_code, str):
            country_code = None
        display_name = match.get('display_name')
        if not isinstance(display_name, str) or not display_name:
            display_name = city
        return Probe.ok(GeoResult(
            latitude=lat,
            longitude=lon,
            display_name=display_name,
            country_code=country_code.upper() if country_code else None,
        ))
