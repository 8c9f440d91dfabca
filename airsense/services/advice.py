"""
Health Advice Services

AQI band metadata (colour, public and sensitive-group advice) and the
advice lookup built on top of a city resolution.
"""

import logging
from collections import namedtuple

from airsense.models import AdviceResponse, Outcome

logger = logging.getLogger(__name__)


Band = namedtuple('Band', 'min max name color public_advice sensitive_advice')

BANDS = [
    Band(0, 50, 'Good', '#00B050',
         'Air quality is satisfactory; outdoor activities are safe.',
         'Enjoy outdoor activities.'),
    Band(51, 100, 'Moderate', '#92D050',
         'Air quality is acceptable; watch for symptoms if unusually sensitive.',
         'Sensitive groups should limit prolonged outdoor exertion.'),
    Band(101, 150, 'Unhealthy for Sensitive Groups', '#FFC000',
         'Members of sensitive groups should reduce prolonged outdoor exertion.',
         'Sensitive groups should avoid strenuous activities outdoors.'),
    Band(151, 200, 'Unhealthy', '#FF0000',
         'Everyone should reduce prolonged outdoor exertion.',
         'Sensitive groups should stay indoors and keep activity light.'),
    Band(201, 300, 'Very Unhealthy', '#7030A0',
         'Everyone should avoid outdoor exertion.',
         'Sensitive groups should remain indoors with clean air.'),
    Band(301, None, 'Hazardous', '#7F0000',
         'Health warning of emergency conditions; avoid all outdoor activity.',
         'Sensitive groups should seek shelter in cleaner air immediately.'),
]

POLLUTANT_NOTES = {
    'NO2': 'Traffic-related irritant; can trigger asthma.',
    'O3': 'Often peaks in afternoon; irritates lungs during exercise.',
    'PM2_5': 'Fine particles; higher risk for heart/lung conditions.',
    'PM2.5': 'Fine particles; higher risk for heart/lung conditions.',
    'SO2': 'Industrial emissions; can cause breathing discomfort.',
    'CO': 'Reduces oxygen delivery; avoid heavy exertion.',
}
DEFAULT_POLLUTANT_NOTE = 'Monitor local guidance for pollutant impacts.'


def band_of(aqi):
    """Return the Band an AQI value falls in (values past the table are Hazardous)."""
    for band in BANDS:
        if aqi >= band.min and (band.max is None or aqi <= band.max):
            return band
    return BANDS[-1]


def band_by_name(name):
    for band in BANDS:
        if band.name.lower() == name.lower():
            return band
    raise ValueError(f'Unknown band: {name}')


def stricter_band(name):
    """The next band up from ``name``, saturating at Hazardous."""
    names = [b.name.lower() for b in BANDS]
    try:
        index = names.index(name.lower())
    except ValueError:
        return name
    return BANDS[min(index + 1, len(BANDS) - 1)].name


def pollutant_note(pollutant):
    return POLLUTANT_NOTES.get(pollutant.upper(), DEFAULT_POLLUTANT_NOTE)


class AdviceService:
    """Health advice for a city, stricter for people with asthma."""

    POLLUTANT = 'PM2.5'

    def __init__(self, resolver):
        self.resolver = resolver

    def advise(self, city, asthma=False):
        outcome = self.resolver.resolve(city)
        if not outcome.is_resolved:
            return outcome

        resolution = outcome.response
        aqi = resolution.aqi.aqi
        band = band_of(aqi)
        advisory = band_by_name(stricter_band(band.name)) if asthma else band
        logger.debug('Advice for %r: band=%s advisory_band=%s', city, band.name, advisory.name)

        return Outcome.resolved(AdviceResponse(
            city=resolution.resolved,
            aqi=aqi,
            band=band.name,
            color=band.color,
            public_advice=advisory.public_advice,
            sensitive_advice=advisory.sensitive_advice,
            pollutant_note=pollutant_note(self.POLLUTANT),
        ))
