"""
AQI Result Models
"""

from dataclasses import dataclass
from enum import Enum


class AqiCategory(Enum):
    """EPA AQI categories with their canonical label and advisory text."""

    GOOD = ('Good', 'Good - air quality is satisfactory.')
    MODERATE = ('Moderate', 'Moderate - unusually sensitive people should consider limiting prolonged exertion.')
    UNHEALTHY_SENSITIVE = ('Unhealthy for Sensitive Groups', 'USG - sensitive groups should reduce prolonged or heavy exertion.')
    UNHEALTHY = ('Unhealthy', 'Unhealthy - everyone should consider limiting outdoor activities.')
    VERY_UNHEALTHY = ('Very Unhealthy', 'Very Unhealthy - avoid strenuous outdoor activities.')
    HAZARDOUS = ('Hazardous', 'Hazardous - remain indoors and follow health guidance.')

    def __init__(self, label, advisory):
        self.label = label
        self.advisory = advisory


@dataclass(frozen=True)
class AqiResult:
    aqi: int
    category: AqiCategory
    advisory: str

    @property
    def label(self):
        return self.category.label
