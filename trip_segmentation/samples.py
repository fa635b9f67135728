"""Input boundary for GPS samples.

Turns loosely typed tracker rows into validated :class:`PositionSample`
objects and cleans a window before segmentation: invalid fixes are dropped,
samples are ordered by time, duplicate timestamps keep the first fix and
position spikes are removed. Nothing here raises for bad data;
partial GPS data is the normal case for field trackers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .config import SPEED_UNIT_HEURISTIC_LIMIT
from .geo import distance_km, distances_from_km, is_valid_coordinate, speed_kmh
from .models import PositionSample, Thresholds
from .utils import coerce_float, parse_timestamp

_LOG = logging.getLogger(__name__)

_LAT_KEYS = ("latitude", "lat")
_LON_KEYS = ("longitude", "lon", "lng")
_TIME_KEYS = ("gps_time", "timestamp", "time", "recorded_at")
_SPEED_KEYS = ("speed_kmh", "speed", "reported_speed_kmh")

SampleInput = PositionSample | Mapping[str, Any]


@dataclass(slots=True)
class PreparedSamples:
    """Cleaned, time-ordered samples plus counts of what was removed."""

    samples: List[PositionSample] = field(default_factory=list)
    invalid: int = 0
    duplicates: int = 0
    spikes: int = 0

    @property
    def dropped(self) -> int:
        return self.invalid + self.duplicates + self.spikes


def normalize_speed(value: Any) -> float | None:
    """Return a usable km/h speed or ``None``.

    Negative readings clamp to 0. Readings above the unit heuristic limit
    come from trackers reporting metres per hour and are divided by 1000.
    """

    speed = coerce_float(value)
    if speed is None:
        return None
    speed = max(0.0, speed)
    if speed > SPEED_UNIT_HEURISTIC_LIMIT:
        return speed / 1000.0
    return speed


def _first_present(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def parse_position_sample(row: SampleInput) -> Optional[PositionSample]:
    """Build a validated sample from a tracker row, or ``None`` if unusable."""

    if isinstance(row, PositionSample):
        return _validated(row)
    if not isinstance(row, Mapping):
        _LOG.debug("Skipping sample of unsupported type %s", type(row).__name__)
        return None
    lat = coerce_float(_first_present(row, _LAT_KEYS))
    lon = coerce_float(_first_present(row, _LON_KEYS))
    timestamp = parse_timestamp(_first_present(row, _TIME_KEYS))
    if lat is None or lon is None or timestamp is None:
        _LOG.debug("Skipping sample with missing fields: %s", row)
        return None
    if not is_valid_coordinate(lat, lon):
        _LOG.debug("Skipping sample with out-of-range coordinate (%s, %s)", lat, lon)
        return None
    return PositionSample(
        latitude=lat,
        longitude=lon,
        timestamp=timestamp,
        reported_speed_kmh=normalize_speed(_first_present(row, _SPEED_KEYS)),
    )


def _validated(sample: PositionSample) -> Optional[PositionSample]:
    if not is_valid_coordinate(sample.latitude, sample.longitude):
        return None
    timestamp = parse_timestamp(sample.timestamp)
    if timestamp is None:
        return None
    return PositionSample(
        latitude=float(sample.latitude),
        longitude=float(sample.longitude),
        timestamp=timestamp,
        reported_speed_kmh=normalize_speed(sample.reported_speed_kmh),
    )


def prepare_samples(
    rows: Iterable[SampleInput],
    thresholds: Optional[Thresholds] = None,
) -> PreparedSamples:
    """Validate, order and de-duplicate a window of samples.

    Args:
        rows: Samples or tracker rows for a single device and time window.
        thresholds: Spike filter settings. Defaults to the configured values.

    Returns:
        The cleaned samples together with drop counts.
    """

    thresholds = thresholds or Thresholds()
    result = PreparedSamples()
    valid: List[PositionSample] = []
    for row in rows:
        sample = parse_position_sample(row)
        if sample is None:
            result.invalid += 1
            continue
        valid.append(sample)

    # sorted() is stable, so the first of several equal timestamps survives.
    valid.sort(key=lambda s: s.timestamp)
    deduped: List[PositionSample] = []
    for sample in valid:
        if deduped and sample.timestamp == deduped[-1].timestamp:
            result.duplicates += 1
            continue
        deduped.append(sample)

    if thresholds.spike_filter_enabled:
        result.samples = _drop_spikes(deduped, thresholds.spike_speed_kmh)
        result.spikes = len(deduped) - len(result.samples)
    else:
        result.samples = deduped

    if result.dropped:
        _LOG.debug(
            "Prepared %d samples (invalid=%d duplicates=%d spikes=%d)",
            len(result.samples),
            result.invalid,
            result.duplicates,
            result.spikes,
        )
    return result


def _implied_speed(first: PositionSample, second: PositionSample) -> float:
    hours = (second.timestamp - first.timestamp).total_seconds() / 3600.0
    return speed_kmh(distance_km(first.coordinate, second.coordinate), hours)


def _drop_spikes(
    samples: Sequence[PositionSample], max_speed_kmh: float
) -> List[PositionSample]:
    """Remove runs of fixes that jump off the track and come back.

    Every fix is measured from the last kept fix. A fix reached faster than
    ``max_speed_kmh`` opens a run that is dropped when a later fix is again
    reachable from the last kept fix at or below that speed. Without such a
    fix the jump is taken as real and kept. Endpoints are never dropped.
    """

    if len(samples) < 3:
        return list(samples)
    lats = np.asarray([s.latitude for s in samples], dtype=float)
    lons = np.asarray([s.longitude for s in samples], dtype=float)
    epochs = np.asarray([s.timestamp.timestamp() for s in samples], dtype=float)

    last = len(samples) - 1
    kept: List[PositionSample] = [samples[0]]
    anchor = 0
    idx = 1
    while idx < last:
        if _implied_speed(samples[anchor], samples[idx]) <= max_speed_kmh:
            kept.append(samples[idx])
            anchor = idx
            idx += 1
            continue
        resume = _first_reachable(anchor, idx + 1, lats, lons, epochs, max_speed_kmh)
        if resume is None:
            kept.append(samples[idx])
            anchor = idx
            idx += 1
            continue
        for spike in samples[idx:resume]:
            _LOG.debug(
                "Dropping position spike at %s (%.5f, %.5f)",
                spike.timestamp.isoformat(),
                spike.latitude,
                spike.longitude,
            )
        idx = resume
    kept.append(samples[last])
    return kept


def _first_reachable(
    anchor: int,
    start: int,
    lats: np.ndarray,
    lons: np.ndarray,
    epochs: np.ndarray,
    max_speed_kmh: float,
) -> Optional[int]:
    """Index of the first fix from ``start`` on reachable from ``anchor``."""

    distances = distances_from_km(
        (float(lats[anchor]), float(lons[anchor])), lats[start:], lons[start:]
    )
    hours = (epochs[start:] - epochs[anchor]) / 3600.0
    reachable = np.flatnonzero((hours > 0) & (distances <= max_speed_kmh * hours))
    if reachable.size == 0:
        return None
    return start + int(reachable[0])


__all__ = [
    "PositionSample",
    "PreparedSamples",
    "normalize_speed",
    "parse_position_sample",
    "prepare_samples",
]
