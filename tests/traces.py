"""Synthetic GPS trace builders shared by the test modules."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from trip_segmentation.models import PositionSample, TripRecord

T0 = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
KM_PER_DEG_LAT = 6371.0 * math.pi / 180.0


def north(km, lon=0.0):
    """Coordinate ``km`` kilometres north of the equator on meridian ``lon``."""
    return (km / KM_PER_DEG_LAT, lon)


def at(minutes):
    return T0 + timedelta(minutes=minutes)


def sample(coord, minutes, speed=None):
    lat, lon = coord
    return PositionSample(latitude=lat, longitude=lon, timestamp=at(minutes), reported_speed_kmh=speed)


def trip(trip_id, start, start_min, end, end_min):
    return TripRecord(trip_id=trip_id, start_time=at(start_min), end_time=at(end_min), start=start, end=end)
