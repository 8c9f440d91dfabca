"""
Configuration settings for the AirSense AQI service
"""
import os


def _env_int(name, default):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else default


def _env_int_list(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    return tuple(int(part) for part in value.split(',') if part.strip())


class Config:
    """Flask application configuration"""

    # OpenAQ v3 (required; the app factory refuses to start without it)
    OPENAQ_API_KEY = os.environ.get('OPENAQ_API_KEY', '')
    OPENAQ_BASE_URL = os.environ.get('OPENAQ_BASE_URL') or 'https://api.openaq.org/v3'

    # Geocoding (Nominatim asks every client for an identifying User-Agent)
    NOMINATIM_URL = os.environ.get('NOMINATIM_URL') or 'https://nominatim.openstreetmap.org'
    GEOCODING_USER_AGENT = os.environ.get('GEOCODING_USER_AGENT') or 'EarthDataAQI/1.0 (contact@example.com)'

    # Open-Meteo forecast endpoint
    OPEN_METEO_AIR_QUALITY_URL = os.environ.get('OPEN_METEO_AIR_QUALITY_URL') or \
        'https://air-quality-api.open-meteo.com/v1/air-quality'
    FORECAST_DAYS = _env_int('FORECAST_DAYS', 2)

    HTTP_TIMEOUT_SECONDS = _env_int('HTTP_TIMEOUT_SECONDS', 6)

    # Caches
    AQI_CACHE_TTL_SECONDS = _env_int('AQI_CACHE_TTL_SECONDS', 300)
    FORECAST_CACHE_TTL_SECONDS = _env_int('FORECAST_CACHE_TTL_SECONDS', 600)
    CACHE_MAX_SIZE = _env_int('CACHE_MAX_SIZE', 500)

    # Search policy
    LOOKBACK_DAYS_PRIMARY = _env_int('LOOKBACK_DAYS_PRIMARY', 60)
    LOOKBACK_DAYS_FALLBACK = _env_int('LOOKBACK_DAYS_FALLBACK', 120)
    SEARCH_RADII_METERS = _env_int_list('SEARCH_RADII_METERS', (25_000, 75_000, 150_000))
    PROVIDER_RADIUS_CAP_METERS = _env_int('PROVIDER_RADIUS_CAP_METERS', 25_000)
    LOCATIONS_LIMIT = _env_int('LOCATIONS_LIMIT', 60)
    SENSORS_PER_STATION = _env_int('SENSORS_PER_STATION', 6)

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    OPENAQ_API_KEY = 'test-openaq-key'
