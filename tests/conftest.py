"""
Pytest configuration for AirSense tests.

Provides the Flask app/client fixtures and a resolver built on in-memory
fakes so that no test ever reaches a real upstream.
"""

import pytest

from airsense import create_app
from airsense.config import TestConfig
from airsense.services import ReadingSelector, ResolutionService, ResultCache, StationLocator

from fakes import FakeClock, FakeGeocoder, FakeOpenAQ, PARIS, fixed_clock


@pytest.fixture()
def app():
    return create_app(TestConfig)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def services(app):
    return app.extensions['aqi']


@pytest.fixture()
def cache_clock():
    return FakeClock()


@pytest.fixture()
def make_resolver(cache_clock):
    """Factory building a ResolutionService over fakes.

    Returns ``(resolver, geocoder, openaq)`` so tests can script and inspect
    the fakes.
    """
    def _make(openaq=None, geo=PARIS, ttl_seconds=300):
        openaq = openaq if openaq is not None else FakeOpenAQ()
        geocoder = FakeGeocoder(geo)
        resolver = ResolutionService(
            geocoder,
            StationLocator(openaq),
            ReadingSelector(openaq, clock=fixed_clock),
            ResultCache(ttl_seconds=ttl_seconds, max_size=50, clock=cache_clock),
        )
        return resolver, geocoder, openaq
    return _make
