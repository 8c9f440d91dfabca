"""
Tests for ForecastService.
"""

from airsense.models import OutcomeKind, Probe, UpstreamFailure
from airsense.services.cache import ResultCache
from airsense.services.forecast import FORECAST_UNAVAILABLE_MESSAGE, ForecastService
from airsense.services.resolution import GEOCODE_FAILED_MESSAGE

from fakes import PARIS, FakeClock, FakeGeocoder, fixed_clock


class FakeOpenMeteo:

    def __init__(self, result):
        self.result = result
        self.calls = []

    def hourly_pm25(self, lat, lon, forecast_days=2):
        self.calls.append((lat, lon, forecast_days))
        if isinstance(self.result, Probe):
            return self.result
        return Probe.ok(self.result)


def make_service(hourly, geo=PARIS):
    geocoder = FakeGeocoder(geo)
    client = FakeOpenMeteo(hourly)
    cache = ResultCache(ttl_seconds=600, max_size=10, clock=FakeClock())
    return ForecastService(geocoder, client, cache, clock=fixed_clock), geocoder, client


HOURLY = [
    ('2025-10-05T10:00', 50.0),
    ('2025-10-05T11:00', 45.0),
    ('2025-10-05T12:00', 12.0),
    ('2025-10-05T13:00', None),
    ('2025-10-05T14:00', 35.4),
    ('2025-10-05T15:00', -1.0),
    ('2025-10-05T16:00', 40.0),
]


class TestForecast:

    def test_points_from_current_hour_with_aqi(self):
        service, _, client = make_service(HOURLY)
        outcome = service.forecast('Paris')

        assert outcome.is_resolved
        body = outcome.to_dict()
        assert body['query'] == 'Paris'
        assert body['resolved'] == PARIS.display_name
        assert body['points'] == [
            {'t': '2025-10-05T12:00:00Z', 'pm25': 12.0, 'aqi': 50},
            {'t': '2025-10-05T14:00:00Z', 'pm25': 35.4, 'aqi': 100},
            {'t': '2025-10-05T16:00:00Z', 'pm25': 40.0, 'aqi': 112},
        ]
        assert client.calls == [(PARIS.latitude, PARIS.longitude, 2)]

    def test_blank_city(self):
        service, geocoder, _ = make_service(HOURLY)
        assert service.forecast('  ').kind is OutcomeKind.CITY_REQUIRED
        assert geocoder.calls == []

    def test_geocode_miss(self):
        service, _, client = make_service(HOURLY, geo=None)
        outcome = service.forecast('Atlantis')
        assert outcome.to_dict() == {'message': GEOCODE_FAILED_MESSAGE}
        assert client.calls == []

    def test_no_future_points(self):
        service, _, _ = make_service(HOURLY[:2])
        outcome = service.forecast('Paris')
        assert outcome.kind is OutcomeKind.NOT_FOUND
        assert outcome.message == FORECAST_UNAVAILABLE_MESSAGE

    def test_transient_upstream_failure_is_not_found(self):
        service, _, _ = make_service(Probe.empty('Open-Meteo error 502'))
        assert service.forecast('Paris').http_status == 404

    def test_rate_limit_passes_through(self):
        failure = UpstreamFailure.from_status('Open-Meteo', 429)
        service, _, _ = make_service(Probe.fatal(failure))
        outcome = service.forecast('Paris')
        assert outcome.kind is OutcomeKind.UPSTREAM_FAILURE
        assert outcome.http_status == 429

    def test_results_are_cached_by_normalized_city(self):
        service, geocoder, client = make_service(HOURLY)
        service.forecast('Paris')
        service.forecast(' paris')
        assert len(geocoder.calls) == 1
        assert len(client.calls) == 1

    def test_failures_are_not_cached(self):
        service, geocoder, _ = make_service(HOURLY, geo=None)
        service.forecast('Atlantis')
        service.forecast('Atlantis')
        assert len(geocoder.calls) == 2

    def test_glitched_huge_value_saturates(self):
        service, _, _ = make_service([('2025-10-05T12:00', 1e30)])
        outcome = service.forecast('Paris')
        assert outcome.to_dict()['points'] == [{'t': '2025-10-05T12:00:00Z', 'pm25': 1e30, 'aqi': 500}]
