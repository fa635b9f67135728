"""Tests for the great-circle helpers in ``trip_segmentation.geo``."""

from __future__ import annotations

import math

import numpy as np
import pytest

from trip_segmentation.geo import (
    bearing_deg,
    distance_km,
    distances_from_km,
    hop_distances_km,
    is_valid_coordinate,
    speed_kmh,
)

from traces import north

COORDS = [
    (0.0, 0.0),
    (51.5007, -0.1246),
    (-33.8568, 151.2153),
    (40.6892, -74.0445),
    (89.9, 179.9),
    (-89.9, -179.9),
    (6.5244, 3.3792),
]


@pytest.mark.parametrize("coord", COORDS)
def test_distance_to_self_is_zero(coord):
    assert distance_km(coord, coord) == 0.0


@pytest.mark.parametrize("a", COORDS)
@pytest.mark.parametrize("b", COORDS)
def test_distance_is_symmetric(a, b):
    assert distance_km(a, b) == pytest.approx(distance_km(b, a), abs=1e-12)


def test_distance_along_meridian_matches_arc_length():
    assert distance_km(north(0.0), north(10.0)) == pytest.approx(10.0, rel=1e-9)


def test_known_city_pair_distance():
    london = (51.5074, -0.1278)
    paris = (48.8566, 2.3522)
    assert distance_km(london, paris) == pytest.approx(343.5, abs=1.0)


def test_distance_across_antimeridian_is_short():
    assert distance_km((0.0, 179.9), (0.0, -179.9)) == pytest.approx(22.24, abs=0.05)


def test_antipodal_points_stay_finite():
    d = distance_km((0.0, 0.0), (0.0, 180.0))
    assert math.isfinite(d)
    assert d == pytest.approx(math.pi * 6371.0, rel=1e-9)


@pytest.mark.parametrize("hours", [0.0, -1.0])
def test_speed_is_zero_without_positive_duration(hours):
    assert speed_kmh(10.0, hours) == 0.0


def test_speed_divides_distance_by_hours():
    assert speed_kmh(30.0, 0.5) == pytest.approx(60.0)


@pytest.mark.parametrize(
    "target, expected",
    [
        ((1.0, 0.0), 0.0),
        ((0.0, 1.0), 90.0),
        ((-1.0, 0.0), 180.0),
        ((0.0, -1.0), 270.0),
    ],
)
def test_bearing_cardinal_directions(target, expected):
    assert bearing_deg((0.0, 0.0), target) == pytest.approx(expected, abs=1e-9)


def test_bearing_identical_points_is_zero():
    assert bearing_deg((10.0, 10.0), (10.0, 10.0)) == 0.0


def test_hop_distances_match_scalar_version():
    lats = [0.0, 0.05, 0.1, 0.1]
    lons = [0.0, 0.0, 0.05, 0.05]
    hops = hop_distances_km(lats, lons)
    expected = [
        distance_km((lats[i], lons[i]), (lats[i + 1], lons[i + 1]))
        for i in range(len(lats) - 1)
    ]
    assert hops.shape == (3,)
    np.testing.assert_allclose(hops, expected, rtol=1e-9, atol=1e-12)
    assert hops[-1] == 0.0


def test_hop_distances_short_inputs():
    assert hop_distances_km([], []).size == 0
    assert hop_distances_km([1.0], [2.0]).size == 0


def test_hop_distances_length_mismatch():
    with pytest.raises(ValueError):
        hop_distances_km([0.0, 1.0], [0.0])


def test_distances_from_origin_match_scalar_version():
    origin = (51.5074, -0.1278)
    lats = [51.5074, 48.8566, 40.7128]
    lons = [-0.1278, 2.3522, -74.0060]
    expected = [distance_km(origin, point) for point in zip(lats, lons)]
    np.testing.assert_allclose(
        distances_from_km(origin, lats, lons), expected, rtol=1e-9, atol=1e-12
    )
    assert distances_from_km(origin, [], []).size == 0


@pytest.mark.parametrize(
    "lat, lon, ok",
    [
        (0.0, 0.0, True),
        (90.0, 180.0, True),
        (90.1, 0.0, False),
        (0.0, -180.5, False),
        (float("nan"), 0.0, False),
        (0.0, float("inf"), False),
        ("abc", 0.0, False),
        (None, 0.0, False),
    ],
)
def test_is_valid_coordinate(lat, lon, ok):
    assert is_valid_coordinate(lat, lon) is ok
