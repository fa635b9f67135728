"""Global pytest fixtures & helpers.

Adds project root to path and provides synthetic GPS traces shared by the
segmentation, summary and service tests.
"""
from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from trip_segmentation.models import Thresholds
from traces import north, sample


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def thresholds():
    return Thresholds(
        jitter_floor_m=15.0,
        motion_threshold_kmh=2.0,
        stop_threshold_min=3.0,
        spike_filter_enabled=True,
        spike_speed_kmh=250.0,
        continuity_warning_distance_km=0.5,
        continuity_error_distance_km=2.0,
        continuity_error_max_gap_min=15.0,
    )


@pytest.fixture
def stop_trace():
    """10 km in 10 min, parked 5 min, then 5 km in 5 min."""
    return [
        sample(north(0.0), 0),
        sample(north(10.0), 10),
        sample(north(10.0), 15),
        sample(north(15.0), 20),
    ]


@pytest.fixture
def red_light_trace():
    """5 km in 5 min, 1 min at a light, then 5 km in 5 min."""
    return [
        sample(north(0.0), 0),
        sample(north(5.0), 5),
        sample(north(5.0), 6),
        sample(north(10.0), 11),
    ]


@pytest.fixture
def stationary_trace():
    return [sample(north(1.0), minute, speed=0.0) for minute in range(0, 30, 2)]
