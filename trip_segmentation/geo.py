"""Great-circle primitives shared by the splitter and the continuity checks."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .config import EARTH_RADIUS_KM
from .models import LatLon

FloatArray = NDArray[np.float64]


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Return True for finite coordinates inside the WGS84 range."""

    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lon_f <= 180.0


def distance_km(first: LatLon, second: LatLon) -> float:
    """Haversine distance between two (lat, lon) points in kilometres.

    The terms are arranged symmetrically so ``distance_km(a, b)`` and
    ``distance_km(b, a)`` agree bit for bit, and identical points give 0.
    """

    lat1, lon1 = first
    lat2, lon2 = second
    sin = math.sin
    cos = math.cos
    radians = math.radians
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    sin_half_lat = sin(abs(lat2_rad - lat1_rad) / 2.0)
    sin_half_lon = sin(radians(abs(lon2 - lon1)) / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    a = min(max(a, 0.0), 1.0)
    return 2.0 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def speed_kmh(distance: float, duration_hours: float) -> float:
    """Return distance / duration, or 0 when the duration is not positive."""

    if duration_hours <= 0:
        return 0.0
    return distance / duration_hours


def bearing_deg(first: LatLon, second: LatLon) -> float:
    """Initial great-circle bearing from ``first`` to ``second`` in [0, 360)."""

    lat1, lon1 = first
    lat2, lon2 = second
    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)
    x = math.sin(delta_lon) * math.cos(lat2_rad)
    y = math.cos(lat1_rad) * math.sin(lat2_rad) - math.sin(lat1_rad) * math.cos(
        lat2_rad
    ) * math.cos(delta_lon)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def hop_distances_km(
    latitudes: Sequence[float] | FloatArray,
    longitudes: Sequence[float] | FloatArray,
) -> FloatArray:
    """Vectorised haversine distances between consecutive points.

    Returns an array one shorter than the inputs (empty for fewer than two
    points). Uses the same formula as :func:`distance_km`.
    """

    lats = np.radians(np.asarray(latitudes, dtype=float))
    lons = np.radians(np.asarray(longitudes, dtype=float))
    if lats.shape != lons.shape:
        raise ValueError("latitudes and longitudes must be the same length")
    if lats.size < 2:
        return np.zeros(0, dtype=float)
    d_lat = np.abs(np.diff(lats))
    d_lon = np.abs(np.diff(lons))
    a = (
        np.sin(d_lat / 2.0) ** 2
        + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(d_lon / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(a))


def distances_from_km(
    origin: LatLon,
    latitudes: Sequence[float] | FloatArray,
    longitudes: Sequence[float] | FloatArray,
) -> FloatArray:
    """Vectorised haversine distances from ``origin`` to every given point."""

    lats = np.radians(np.asarray(latitudes, dtype=float))
    lons = np.radians(np.asarray(longitudes, dtype=float))
    if lats.shape != lons.shape:
        raise ValueError("latitudes and longitudes must be the same length")
    lat0 = math.radians(origin[0])
    lon0 = math.radians(origin[1])
    a = (
        np.sin(np.abs(lats - lat0) / 2.0) ** 2
        + math.cos(lat0) * np.cos(lats) * np.sin(np.abs(lons - lon0) / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(a))


__all__ = [
    "bearing_deg",
    "distance_km",
    "distances_from_km",
    "hop_distances_km",
    "is_valid_coordinate",
    "speed_kmh",
]
