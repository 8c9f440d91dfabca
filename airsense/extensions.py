"""
Flask Extensions

The AQI extension builds the upstream clients, caches and services once per
application and keeps them in ``app.extensions['aqi']``. The caches live as
long as the application and are never reset implicitly.
"""

import logging
from dataclasses import dataclass

from flask import current_app

from airsense.services import (
    AdviceService,
    ForecastService,
    NominatimGeocoder,
    OpenAQClient,
    OpenMeteoClient,
    ReadingSelector,
    ResolutionService,
    ResultCache,
    StationLocator,
)

logger = logging.getLogger(__name__)


@dataclass
class AqiServices:
    resolver: ResolutionService
    forecaster: ForecastService
    advisor: AdviceService
    aqi_cache: ResultCache
    forecast_cache: ResultCache


class AqiExtension:
    """Flask extension wiring the resolution pipeline into an app."""

    key = 'aqi'

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        config = app.config
        api_key = (config.get('OPENAQ_API_KEY') or '').strip()
        if not api_key:
            raise RuntimeError('OPENAQ_API_KEY environment variable is required.')

        timeout = config['HTTP_TIMEOUT_SECONDS']
        openaq = OpenAQClient(api_key, base_url=config['OPENAQ_BASE_URL'], timeout=timeout)
        geocoder = NominatimGeocoder(
            base_url=config['NOMINATIM_URL'],
            user_agent=config['GEOCODING_USER_AGENT'],
            timeout=timeout,
        )

        aqi_cache = ResultCache(
            ttl_seconds=config['AQI_CACHE_TTL_SECONDS'],
            max_size=config['CACHE_MAX_SIZE'],
            name='aqiByCity',
        )
        forecast_cache = ResultCache(
            ttl_seconds=config['FORECAST_CACHE_TTL_SECONDS'],
            max_size=config['CACHE_MAX_SIZE'],
            name='forecastByCity',
        )

        resolver = ResolutionService(
            geocoder,
            StationLocator(
                openaq,
                radii=config['SEARCH_RADII_METERS'],
                radius_cap=config['PROVIDER_RADIUS_CAP_METERS'],
                limit=config['LOCATIONS_LIMIT'],
            ),
            ReadingSelector(openaq, sensors_per_station=config['SENSORS_PER_STATION']),
            aqi_cache,
            lookback_days=(config['LOOKBACK_DAYS_PRIMARY'], config['LOOKBACK_DAYS_FALLBACK']),
        )
        forecaster = ForecastService(
            geocoder,
            OpenMeteoClient(config['OPEN_METEO_AIR_QUALITY_URL'], timeout=timeout),
            forecast_cache,
            forecast_days=config['FORECAST_DAYS'],
        )

        app.extensions[self.key] = AqiServices(
            resolver=resolver,
            forecaster=forecaster,
            advisor=AdviceService(resolver),
            aqi_cache=aqi_cache,
            forecast_cache=forecast_cache,
        )
        logger.debug('AQI services initialised (radii=%s, lookback=%s/%s days)',
                     config['SEARCH_RADII_METERS'],
                     config['LOOKBACK_DAYS_PRIMARY'], config['LOOKBACK_DAYS_FALLBACK'])

    @property
    def services(self):
        return current_app.extensions[self.key]


# AQI services (per-app state lives in app.extensions)
aqi = AqiExtension()
