"""
Tests for ReadingSelector freshest-wins sweeps.
"""

from datetime import timedelta

import pytest

from airsense.models import Coordinates, Probe, StationCandidate
from airsense.services.readings import ReadingSelector, concentration, parse_utc

from fakes import NOW, FakeOpenAQ, days_ago, fixed_clock, measurement, openaq_failure, sensor


def station(station_id, name=None, coordinates=None):
    return StationCandidate(station_id=station_id, name=name or f'Station {station_id}', coordinates=coordinates)


def selector(openaq):
    return ReadingSelector(openaq, clock=fixed_clock)


class TestHelpers:

    def test_parse_utc_accepts_z_suffix(self):
        parsed = parse_utc('2025-10-05T10:00:00Z')
        assert parsed == NOW - timedelta(hours=2)

    def test_parse_utc_treats_naive_as_utc(self):
        assert parse_utc('2025-10-05T12:00:00') == NOW

    def test_parse_utc_converts_offsets(self):
        assert parse_utc('2025-10-05T14:00:00+02:00') == NOW

    @pytest.mark.parametrize('text', [None, '', '   ', 'yesterday', 42])
    def test_parse_utc_rejects_garbage(self, text):
        assert parse_utc(text) is None

    @pytest.mark.parametrize('raw, expected', [(12, 12.0), (0, 0.0), (8.5, 8.5)])
    def test_concentration_accepts_numbers(self, raw, expected):
        assert concentration(raw) == expected

    @pytest.mark.parametrize('raw', [-1, float('nan'), float('inf'), True, '12', None])
    def test_concentration_rejects_invalid(self, raw):
        assert concentration(raw) is None


class TestSnapshot:

    def test_fresh_snapshot_is_used_without_measurement_query(self):
        openaq = FakeOpenAQ(sensors={1: [sensor(11, value=14.2, utc=days_ago(0, hours=3))]})
        probe = selector(openaq).select_latest([station(1, name='Central')], 60)

        assert probe.is_ok
        reading = probe.value
        assert reading.value == 14.2
        assert reading.unit == 'µg/m³'
        assert reading.station_id == 1
        assert reading.sensor_id == 11
        assert reading.station_name == 'Central'
        assert reading.observed_utc == days_ago(0, hours=3)
        assert openaq.count('measurement') == 0

    def test_stale_snapshot_falls_back_to_measurement(self):
        openaq = FakeOpenAQ(
            sensors={1: [sensor(11, value=30.0, utc=days_ago(90))]},
            measurements={11: [measurement(9.0, days_ago(2))]},
        )
        probe = selector(openaq).select_latest([station(1)], 60)

        assert probe.value.value == 9.0
        assert probe.value.observed_utc == days_ago(2)
        assert openaq.calls[-1] == ('measurement', 11, NOW - timedelta(days=60))

    def test_measurement_older_than_window_is_rejected(self):
        openaq = FakeOpenAQ(
            sensors={1: [sensor(11)]},
            measurements={11: [measurement(9.0, days_ago(61))]},
        )
        probe = selector(openaq).select_latest([station(1)], 60)
        assert probe.is_empty

    def test_reading_exactly_at_threshold_is_accepted(self):
        openaq = FakeOpenAQ(sensors={1: [sensor(11, value=5.0, utc=days_ago(60))]})
        assert selector(openaq).select_latest([station(1)], 60).is_ok

    def test_snapshot_coordinates_win_over_station(self):
        openaq = FakeOpenAQ(sensors={1: [sensor(
            11, value=5.0, utc=days_ago(1),
            coordinates={'latitude': 1.5, 'longitude': 2.5},
        )]})
        probe = selector(openaq).select_latest([station(1, coordinates=Coordinates(9.0, 9.0))], 60)
        assert probe.value.coordinates == Coordinates(1.5, 2.5)

    def test_station_coordinates_used_when_sensor_has_none(self):
        openaq = FakeOpenAQ(sensors={1: [sensor(11, value=5.0, utc=days_ago(1))]})
        probe = selector(openaq).select_latest([station(1, coordinates=Coordinates(9.0, 9.0))], 60)
        assert probe.value.coordinates == Coordinates(9.0, 9.0)

    def test_missing_unit_falls_back_to_default(self):
        openaq = FakeOpenAQ(sensors={1: [sensor(11, value=5.0, utc=days_ago(1), units='')]})
        probe = selector(openaq).select_latest([station(1)], 60)
        assert probe.value.unit == 'ug/m3'


class TestFreshestWins:

    def test_newer_reading_from_later_station_replaces_best(self):
        openaq = FakeOpenAQ(sensors={
            1: [sensor(11, value=10.0, utc=days_ago(3))],
            2: [sensor(21, value=20.0, utc=days_ago(1))],
        })
        probe = selector(openaq).select_latest([station(1), station(2)], 60)
        assert probe.value.station_id == 2
        assert probe.value.value == 20.0

    def test_older_reading_from_later_station_is_ignored(self):
        openaq = FakeOpenAQ(sensors={
            1: [sensor(11, value=10.0, utc=days_ago(1))],
            2: [sensor(21, value=20.0, utc=days_ago(3))],
        })
        probe = selector(openaq).select_latest([station(1), station(2)], 60)
        assert probe.value.station_id == 1

    def test_tie_keeps_first_examined(self):
        same = days_ago(1)
        openaq = FakeOpenAQ(sensors={
            1: [sensor(11, value=10.0, utc=same)],
            2: [sensor(21, value=20.0, utc=same)],
        })
        probe = selector(openaq).select_latest([station(1), station(2)], 60)
        assert probe.value.station_id == 1

    def test_freshest_sensor_within_station(self):
        openaq = FakeOpenAQ(sensors={1: [
            sensor(11, value=10.0, utc=days_ago(4)),
            sensor(12, value=11.0, utc=days_ago(0, hours=1)),
            sensor(13, value=12.0, utc=days_ago(2)),
        ]})
        probe = selector(openaq).select_latest([station(1)], 60)
        assert probe.value.sensor_id == 12

    def test_non_pm25_sensors_are_skipped(self):
        openaq = FakeOpenAQ(sensors={1: [
            sensor(11, value=99.0, utc=days_ago(0, hours=1), parameter_id=1),
            sensor(12, value=8.0, utc=days_ago(1)),
        ]})
        probe = selector(openaq).select_latest([station(1)], 60)
        assert probe.value.sensor_id == 12

    def test_negative_values_are_discarded(self):
        openaq = FakeOpenAQ(sensors={
            1: [sensor(11, value=-4.0, utc=days_ago(0, hours=1))],
            2: [sensor(21, value=6.0, utc=days_ago(1))],
        })
        probe = selector(openaq).select_latest([station(1), station(2)], 60)
        assert probe.value.station_id == 2

    def test_only_first_sensors_per_station_are_examined(self):
        sensors = [sensor(100 + i) for i in range(6)] + [sensor(200, value=5.0, utc=days_ago(1))]
        openaq = FakeOpenAQ(sensors={1: sensors})
        probe = selector(openaq).select_latest([station(1)], 60)

        assert probe.is_empty
        assert openaq.count('measurement') == 6


class TestFailures:

    def test_transient_sensor_failures_are_skipped(self):
        openaq = FakeOpenAQ(
            sensors={
                1: Probe.empty('OpenAQ error 500'),
                2: [sensor(21)],
                3: [sensor(31, value=7.0, utc=days_ago(5))],
            },
            measurements={21: Probe.empty('timeout')},
        )
        probe = selector(openaq).select_latest([station(1), station(2), station(3)], 60)
        assert probe.value.station_id == 3

    @pytest.mark.parametrize('status', [401, 403, 429])
    def test_fatal_station_lookup_aborts_sweep(self, status):
        openaq = FakeOpenAQ(sensors={
            1: [sensor(11, value=10.0, utc=days_ago(1))],
            2: openaq_failure(status),
            3: [sensor(31, value=20.0, utc=days_ago(0, hours=1))],
        })
        probe = selector(openaq).select_latest([station(1), station(2), station(3)], 60)

        assert probe.is_fatal
        assert probe.failure.status_code == status
        assert ('sensors', 3) not in openaq.calls

    def test_fatal_measurement_aborts_sweep(self):
        openaq = FakeOpenAQ(
            sensors={
                1: [sensor(11)],
                2: [sensor(21, value=20.0, utc=days_ago(1))],
            },
            measurements={11: openaq_failure(429)},
        )
        probe = selector(openaq).select_latest([station(1), station(2)], 60)

        assert probe.is_fatal
        assert probe.failure.is_rate_limit
        assert openaq.count('sensors') == 1

    def test_no_candidates(self):
        assert selector(FakeOpenAQ()).select_latest([], 60).is_empty


class TestMalformedPayloads:

    @pytest.mark.parametrize('bad_sensor', [
        {'id': 11, 'parameter': 'pm25', 'latest': {'value': 50.0, 'datetime': {'utc': days_ago(0, hours=1)}}},
        {'id': 11, 'parameter': {'id': 2}, 'latest': {'value': 50.0, 'datetime': days_ago(0, hours=1)}},
        {'id': 11, 'parameter': {'id': 2}, 'latest': 'stale'},
        {'id': 11, 'parameter': {'id': 2}, 'latest': {'value': 50.0, 'datetime': {'utc': 20251005}}},
        {'id': 11, 'parameter': {'id': 2, 'units': 3}, 'latest': {'value': 'high', 'datetime': {'utc': days_ago(1)}}},
        'not a sensor',
    ])
    def test_bad_sensor_is_skipped(self, bad_sensor):
        openaq = FakeOpenAQ(sensors={
            1: [bad_sensor],
            2: [sensor(21, value=6.0, utc=days_ago(2))],
        })
        probe = selector(openaq).select_latest([station(1), station(2)], 60)

        assert probe.is_ok
        assert probe.value.station_id == 2

    @pytest.mark.parametrize('bad_measurement', [
        {'value': 9.0, 'period': 'last hour'},
        {'value': 9.0, 'period': {'datetimeTo': days_ago(1), 'datetimeFrom': None}},
        {'value': 9.0, 'period': {'datetimeTo': ['x']}, 'datetime': 'yesterday'},
        {'value': 9.0, 'parameter': 'pm25', 'period': {'datetimeTo': {'utc': None}}},
        'not a measurement',
    ])
    def test_bad_measurement_is_skipped(self, bad_measurement):
        openaq = FakeOpenAQ(
            sensors={1: [sensor(11)], 2: [sensor(21, value=6.0, utc=days_ago(2))]},
            measurements={11: [bad_measurement]},
        )
        probe = selector(openaq).select_latest([station(1), station(2)], 60)

        assert probe.value.station_id == 2
        assert ('measurement', 11, NOW - timedelta(days=60)) in openaq.calls

    def test_non_string_units_fall_back_to_default(self):
        openaq = FakeOpenAQ(sensors={1: [{
            'id': 11,
            'parameter': {'id': 2, 'units': ['ug']},
            'latest': {'value': 5.0, 'datetime': {'utc': days_ago(1)}},
        }]})
        assert selector(openaq).select_latest([station(1)], 60).value.unit == 'ug/m3'

    def test_bad_measurement_parameter_keeps_sensor_unit(self):
        openaq = FakeOpenAQ(
            sensors={1: [sensor(11, units='ppm')]},
            measurements={11: [{'value': 9.0, 'parameter': 'pm25', 'period': {'datetimeTo': {'utc': days_ago(1)}}}]},
        )
        probe = selector(openaq).select_latest([station(1)], 60)
        assert probe.value.value == 9.0
        assert probe.value.unit == 'ppm'
