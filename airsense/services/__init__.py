"""
Services Package

Exports all services for easy importing.
"""

from airsense.services.advice import AdviceService, band_of, stricter_band, pollutant_note
from airsense.services.aqi import calculate_aqi, aqi_category, health_advice, to_aqi
from airsense.services.cache import ResultCache, normalize_key
from airsense.services.forecast import ForecastService, OpenMeteoClient
from airsense.services.geocoding import NominatimGeocoder
from airsense.services.openaq import OpenAQClient
from airsense.services.readings import ReadingSelector
from airsense.services.resolution import ResolutionService
from airsense.services.stations import StationLocator

__all__ = [
    'AdviceService',
    'band_of',
    'stricter_band',
    'pollutant_note',
    'calculate_aqi',
    'aqi_category',
    'health_advice',
    'to_aqi',
    'ResultCache',
    'normalize_key',
    'ForecastService',
    'OpenMeteoClient',
    'NominatimGeocoder',
    'OpenAQClient',
    'ReadingSelector',
    'ResolutionService',
    'StationLocator'
]
