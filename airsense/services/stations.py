"""
Station Discovery Service

Finds PM2.5 monitoring stations near a point, widening the search radius
tier by tier until one tier yields any station.
"""

import logging
import math

from airsense.models import Coordinates, Probe, StationCandidate

logger = logging.getLogger(__name__)


DEFAULT_RADII_METERS = (25_000, 75_000, 150_000)
PROVIDER_RADIUS_CAP_METERS = 25_000
EARTH_RADIUS_METERS = 6_371_000
METERS_PER_DEGREE_LAT = 111_320


def haversine_meters(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters."""
    p1 = math.radians(lat1)
    p2 = math.radians(lat2)
    dp = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bounding_box(lat, lon, radius_meters):
    """(min_lon, min_lat, max_lon, max_lat) enclosing a circle around the point."""
    dlat = radius_meters / METERS_PER_DEGREE_LAT
    dlon = radius_meters / (METERS_PER_DEGREE_LAT * max(math.cos(math.radians(lat)), 0.01))
    return (
        max(lon - dlon, -180.0),
        max(lat - dlat, -90.0),
        min(lon + dlon, 180.0),
        min(lat + dlat, 90.0),
    )


class StationLocator:
    """Radius-escalating station search.

    Tiers are tried smallest first and never merged: the first tier that
    returns a station is the answer. Tiers within the provider's radius cap
    are radius queries; wider tiers are bounding-box queries trimmed to the
    tier radius.
    """

    def __init__(self, client, radii=DEFAULT_RADII_METERS,
                 radius_cap=PROVIDER_RADIUS_CAP_METERS, limit=60):
        self.client = client
        self.radii = tuple(sorted(radii))
        self.radius_cap = radius_cap
        self.limit = limit

    def find_candidates(self, lat, lon):
        for radius in self.radii:
            probe = self._search_tier(lat, lon, radius)
            if probe.is_fatal:
                return probe
            if probe.is_ok:
                trim_to = radius if radius > self.radius_cap else None
                candidates = self._to_candidates(probe.value, lat, lon, trim_to)
                if candidates:
                    logger.debug('Found %d stations within %d m of (%.4f, %.4f)',
                                 len(candidates), radius, lat, lon)
                    return Probe.ok(candidates)
            logger.debug('No stations within %d m of (%.4f, %.4f)', radius, lat, lon)
        return Probe.empty('No stations found nearby')

    def _search_tier(self, lat, lon, radius):
        if radius <= self.radius_cap:
            return self.client.locations_near(lat, lon, radius, limit=self.limit)
        return self.client.locations_in_bbox(bounding_box(lat, lon, radius), limit=self.limit)

    def _to_candidates(self, locations, lat, lon, trim_to=None):
        candidates = []
        for loc in locations:
            if not isinstance(loc, dict):
                continue
            station_id = loc.get('id')
            if not isinstance(station_id, int) or isinstance(station_id, bool) or station_id <= 0:
                continue

            coordinates = Coordinates.from_payload(loc.get('coordinates'))
            distance = None
            if coordinates is not None:
                distance = haversine_meters(lat, lon, coordinates.latitude, coordinates.longitude)
                if trim_to is not None and distance > trim_to:
                    continue

            candidates.append(StationCandidate(
                station_id=station_id,
                name=loc.get('name'),
                coordinates=coordinates,
                distance_meters=distance,
            ))

        # Stable: provider order is kept among equal distances.
        candidates.sort(key=lambda c: (c.distance_meters is None, c.distance_meters or 0.0))
        return candidates
