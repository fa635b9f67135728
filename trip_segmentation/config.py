"""Thresholds and limits for trip segmentation.

Each value has a sensible default for vehicle trackers and can be tuned
with a ``TRIP_*`` environment variable. A ``.env`` file in the working
directory or a parent is read first when python-dotenv is installed.
"""

from __future__ import annotations

import importlib
import os
from typing import Callable, TypeVar

_T = TypeVar("_T")


def _env(key: str, default: _T, parse: Callable[[str], _T]) -> _T:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


def _parse_bool(raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _env_float(key: str, default: float) -> float:
    return _env(key, default, float)


def _env_int(key: str, default: int) -> int:
    return _env(key, default, int)


def _env_bool(key: str, default: bool) -> bool:
    return _env(key, default, _parse_bool)


def _load_env_file() -> None:
    try:
        dotenv = importlib.import_module("dotenv")
    except ImportError:
        return
    path = dotenv.find_dotenv(usecwd=True)
    if path:
        dotenv.load_dotenv(path)


_load_env_file()


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------
# Mean Earth radius used by every haversine computation.
EARTH_RADIUS_KM = 6371.0


# ---------------------------------------------------------------------------
# Segmentation thresholds
# ---------------------------------------------------------------------------
# Movement shorter than this (metres) while the vehicle is standing still is
# treated as GPS jitter and contributes no distance.
JITTER_FLOOR_M = _env_float("TRIP_JITTER_FLOOR_M", 15.0)

# Hops slower than this (km/h) count as idle; at or above it they are moving.
MOTION_THRESHOLD_KMH = _env_float("TRIP_MOTION_THRESHOLD_KMH", 2.0)

# Idle runs of at least this many minutes end a segment. Shorter idles
# (traffic lights, queues) stay inside the current segment.
STOP_THRESHOLD_MIN = _env_float("TRIP_STOP_THRESHOLD_MIN", 3.0)


# ---------------------------------------------------------------------------
# Sample cleaning
# ---------------------------------------------------------------------------
# Fixes reached from the last kept fix faster than this (km/h) are position
# spikes when the track later comes back within reach. They are dropped.
SPIKE_FILTER_ENABLED = _env_bool("TRIP_SPIKE_FILTER_ENABLED", True)
SPIKE_SPEED_KMH = _env_float("TRIP_SPIKE_SPEED_KMH", 250.0)

# Some trackers report speed in metres/hour. Values above this are divided
# by 1000 before use.
SPEED_UNIT_HEURISTIC_LIMIT = _env_float("TRIP_SPEED_UNIT_HEURISTIC_LIMIT", 1000.0)


# ---------------------------------------------------------------------------
# Continuity thresholds
# ---------------------------------------------------------------------------
# Gaps below this distance (km) between one trip's end and the next trip's
# start are considered parking drift and never flagged.
CONTINUITY_WARNING_DISTANCE_KM = _env_float("TRIP_CONTINUITY_WARNING_DISTANCE_KM", 0.5)

# Gaps at least this far apart that also happen within the short time window
# below imply movement that was never recorded (tracking dropout).
CONTINUITY_ERROR_DISTANCE_KM = _env_float("TRIP_CONTINUITY_ERROR_DISTANCE_KM", 2.0)
CONTINUITY_ERROR_MAX_GAP_MIN = _env_float("TRIP_CONTINUITY_ERROR_MAX_GAP_MIN", 15.0)


# ---------------------------------------------------------------------------
# Batch analysis
# ---------------------------------------------------------------------------
# Threads used when analysing many independent trip windows. 1 runs inline.
ANALYSIS_MAX_WORKERS = _env_int("TRIP_ANALYSIS_MAX_WORKERS", 4)

# Maximum number of trip analyses kept by the caller-side result cache.
RESULT_CACHE_SIZE = _env_int("TRIP_RESULT_CACHE_SIZE", 256)
