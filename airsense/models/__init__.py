"""
Models Package

Exports all models for easy importing.
"""

from airsense.models.aqi import AqiCategory, AqiResult
from airsense.models.geo import Coordinates, GeoResult, StationCandidate
from airsense.models.probe import Probe, ProbeStatus, UpstreamFailure
from airsense.models.reading import DEFAULT_PM25_UNIT, Reading
from airsense.models.response import (
    AdviceResponse,
    ForecastPoint,
    ForecastResponse,
    LocationResponse,
    Outcome,
    OutcomeKind,
    ResolutionResponse,
)

__all__ = [
    'AqiCategory',
    'AqiResult',
    'Coordinates',
    'GeoResult',
    'StationCandidate',
    'Probe',
    'ProbeStatus',
    'UpstreamFailure',
    'DEFAULT_PM25_UNIT',
    'Reading',
    'AdviceResponse',
    'ForecastPoint',
    'ForecastResponse',
    'LocationResponse',
    'Outcome',
    'OutcomeKind',
    'ResolutionResponse',
]
