"""
AQI Calculation Services

US EPA PM2.5 breakpoint interpolation and the category step function.
"""

import math
from decimal import Decimal, ROUND_FLOOR

from airsense.models import AqiCategory, AqiResult


# (C_low, C_high, I_low, I_high)
PM25_BREAKPOINTS = [
    (0.0, 12.0, 0, 50),
    (12.1, 35.4, 51, 100),
    (35.5, 55.4, 101, 150),
    (55.5, 150.4, 151, 200),
    (150.5, 250.4, 201, 300),
    (250.5, 350.4, 301, 400),
    (350.5, 500.4, 401, 500)
]

SATURATION_CONCENTRATION = 500.5
AQI_MIN = 0
AQI_MAX = 500

_TENTH = Decimal('0.1')


def truncate_concentration(pm25):
    """Floor a concentration to 0.1 as the EPA reference algorithm does.

    Goes through the decimal text of the float so that values such as 2.3
    (stored as 2.2999...) are not pushed down a tenth.
    """
    return float(Decimal(repr(float(pm25))).quantize(_TENTH, rounding=ROUND_FLOOR))


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def calculate_aqi(pm25):
    """Calculate AQI from a PM2.5 concentration (ug/m3) using the EPA formula."""
    if pm25 is None or isinstance(pm25, bool):
        raise ValueError('PM2.5 concentration must be a number')
    pm25 = float(pm25)
    if not math.isfinite(pm25):
        raise ValueError(f'PM2.5 concentration must be finite, got {pm25}')

    if pm25 >= SATURATION_CONCENTRATION:
        return AQI_MAX

    c = truncate_concentration(max(pm25, 0.0))

    for bp_lo, bp_hi, aqi_lo, aqi_hi in PM25_BREAKPOINTS:
        if c <= bp_hi:
            aqi = ((aqi_hi - aqi_lo) / (bp_hi - bp_lo)) * (c - bp_lo) + aqi_lo
            return max(AQI_MIN, min(AQI_MAX, _round_half_up(aqi)))

    return AQI_MAX


def category_for_aqi(aqi):
    if aqi <= 50:
        return AqiCategory.GOOD
    if aqi <= 100:
        return AqiCategory.MODERATE
    if aqi <= 150:
        return AqiCategory.UNHEALTHY_SENSITIVE
    if aqi <= 200:
        return AqiCategory.UNHEALTHY
    if aqi <= 300:
        return AqiCategory.VERY_UNHEALTHY
    return AqiCategory.HAZARDOUS


def aqi_category(aqi):
    """Human-readable category label for an AQI value."""
    return category_for_aqi(aqi).label


def health_advice(aqi):
    """One-sentence public health advisory for an AQI value."""
    return category_for_aqi(aqi).advisory


def to_aqi(pm25):
    """Convert a PM2.5 concentration to an AqiResult."""
    aqi = calculate_aqi(pm25)
    category = category_for_aqi(aqi)
    return AqiResult(aqi=aqi, category=category, advisory=category.advisory)
