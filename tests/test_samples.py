"""Tests for sample parsing and cleaning in ``trip_segmentation.samples``."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trip_segmentation import analyze_trip
from trip_segmentation.models import PositionSample, Thresholds
from trip_segmentation.samples import (
    normalize_speed,
    parse_position_sample,
    prepare_samples,
)

from traces import T0, at, north, sample


class TestNormalizeSpeed:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, None),
            ("fast", None),
            (float("nan"), None),
            (-5.0, 0.0),
            (42.5, 42.5),
            ("60", 60.0),
            (1000.0, 1000.0),
            (45000.0, 45.0),
        ],
    )
    def test_values(self, raw, expected):
        assert normalize_speed(raw) == expected


class TestParsePositionSample:
    def test_tracker_row_with_iso_time(self):
        row = {
            "latitude": 6.45,
            "longitude": 3.39,
            "gps_time": "2025-01-01T08:00:00Z",
            "speed": 32.0,
        }
        parsed = parse_position_sample(row)
        assert parsed == PositionSample(6.45, 3.39, T0, 32.0)

    def test_alternative_keys_and_epoch_millis(self):
        row = {"lat": "1.5", "lng": "2.5", "timestamp": T0.timestamp() * 1000}
        parsed = parse_position_sample(row)
        assert parsed is not None
        assert parsed.coordinate == (1.5, 2.5)
        assert parsed.timestamp == T0
        assert parsed.reported_speed_kmh is None

    def test_epoch_seconds(self):
        parsed = parse_position_sample({"lat": 0, "lon": 0, "time": T0.timestamp()})
        assert parsed is not None
        assert parsed.timestamp == T0

    def test_naive_datetime_is_taken_as_utc(self):
        parsed = parse_position_sample(
            {"lat": 0, "lon": 0, "gps_time": datetime(2025, 1, 1, 8, 0)}
        )
        assert parsed is not None
        assert parsed.timestamp.tzinfo is timezone.utc
        assert parsed.timestamp == T0

    @pytest.mark.parametrize(
        "row",
        [
            {"latitude": None, "longitude": 3.0, "gps_time": "2025-01-01T08:00:00Z"},
            {"latitude": 1.0, "longitude": 3.0},
            {"latitude": 1.0, "longitude": 3.0, "gps_time": "not a date"},
            {"latitude": 91.0, "longitude": 3.0, "gps_time": "2025-01-01T08:00:00Z"},
            {"latitude": "nan", "longitude": 3.0, "gps_time": "2025-01-01T08:00:00Z"},
            "not a mapping",
            None,
        ],
    )
    def test_malformed_rows_are_rejected(self, row):
        assert parse_position_sample(row) is None

    def test_sample_objects_are_revalidated(self):
        bad = PositionSample(float("nan"), 0.0, T0)
        assert parse_position_sample(bad) is None
        good = PositionSample(1.0, 2.0, datetime(2025, 1, 1, 8, 0), -3.0)
        parsed = parse_position_sample(good)
        assert parsed == PositionSample(1.0, 2.0, T0, 0.0)


class TestPrepareSamples:
    def test_orders_by_time_and_keeps_first_duplicate(self):
        first = sample(north(0.0), 0, speed=1.0)
        duplicate = sample(north(0.001), 0, speed=2.0)
        later = sample(north(0.5), 1)
        prepared = prepare_samples([later, first, duplicate])
        assert prepared.samples == [first, later]
        assert prepared.duplicates == 1
        assert prepared.dropped == 1

    def test_invalid_rows_are_counted(self):
        rows = [
            sample(north(0.0), 0),
            {"latitude": None, "longitude": 0.0, "gps_time": at(1)},
            PositionSample(float("nan"), 0.0, at(2)),
        ]
        prepared = prepare_samples(rows)
        assert len(prepared.samples) == 1
        assert prepared.invalid == 2

    def test_empty_input(self):
        prepared = prepare_samples([])
        assert prepared.samples == []
        assert prepared.dropped == 0

    def test_out_and_back_spike_is_dropped(self):
        spike = sample(north(50.0), 1)
        rows = [sample(north(0.0), 0), spike, sample(north(0.5), 2), sample(north(1.0), 3)]
        prepared = prepare_samples(rows)
        assert spike not in prepared.samples
        assert prepared.spikes == 1
        assert len(prepared.samples) == 3

    def test_spike_filter_can_be_disabled(self):
        rows = [sample(north(0.0), 0), sample(north(50.0), 1), sample(north(0.5), 2)]
        prepared = prepare_samples(rows, Thresholds(spike_filter_enabled=False))
        assert len(prepared.samples) == 3
        assert prepared.spikes == 0

    def test_endpoints_are_never_treated_as_spikes(self):
        rows = [sample(north(0.0), 0), sample(north(0.5), 1), sample(north(80.0), 2)]
        prepared = prepare_samples(rows)
        assert len(prepared.samples) == 3

    def test_sustained_fast_travel_is_kept(self):
        # 100 km/h for several minutes is driving, not a spike.
        rows = [sample(north(km), minute) for minute, km in enumerate([0.0, 1.67, 3.33, 5.0])]
        prepared = prepare_samples(rows)
        assert prepared.spikes == 0

    def test_run_of_spikes_at_the_same_far_spot_is_dropped(self):
        kms = [0.0, 0.5, 60.0, 60.0, 1.5, 2.0]
        rows = [sample(north(km), minute) for minute, km in enumerate(kms)]
        prepared = prepare_samples(rows)
        assert prepared.spikes == 2
        assert [s.timestamp for s in prepared.samples] == [at(0), at(1), at(4), at(5)]
        analysis = analyze_trip(rows)
        assert analysis.summary.total_distance_km == pytest.approx(2.0)

    def test_jump_that_never_comes_back_is_kept(self):
        kms = [0.0, 0.5, 80.0, 80.5]
        rows = [sample(north(km), minute) for minute, km in enumerate(kms)]
        prepared = prepare_samples(rows)
        assert prepared.spikes == 0
        assert len(prepared.samples) == 4
