"""Split a trip window's position stream into movement segments.

Every consecutive pair of samples is a *hop*. A hop is moving when its
speed (post jitter floor) reaches the motion threshold, otherwise idle.
Moving hops accumulate into the current segment. A run of idle hops that
lasts at least the stop threshold closes the segment and becomes its
``idle_minutes_before_next``; shorter idle runs (traffic lights, queues)
are folded into the segment once movement resumes.

Idle time before the first movement and after the last movement belongs to
no segment. A window that never moves yields a single zero-length segment
anchored at its first sample.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .geo import distance_km, hop_distances_km, speed_kmh
from .models import PositionSample, RawSegment, Thresholds, TrackPoint
from .samples import SampleInput, prepare_samples

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Hop:
    """Movement between two consecutive samples."""

    distance_km: float
    minutes: float
    speed_kmh: float
    moving: bool


def split_segments(
    samples: Iterable[SampleInput],
    thresholds: Optional[Thresholds] = None,
) -> List[RawSegment]:
    """Partition a window of samples into raw movement segments.

    Args:
        samples: Position samples (or tracker rows) for one trip window.
            Invalid fixes are dropped and the rest re-ordered by time.
        thresholds: Segmentation thresholds. Defaults to the configured values.

    Returns:
        Raw segments in time order; empty when no valid sample remains.
    """

    thresholds = (thresholds or Thresholds()).validate()
    prepared = prepare_samples(samples, thresholds)
    return split_prepared(prepared.samples, thresholds)


def split_prepared(
    samples: Sequence[PositionSample],
    thresholds: Thresholds,
) -> List[RawSegment]:
    """Split samples that have already been through :func:`prepare_samples`."""

    if not samples:
        return []
    points = [_track_point(s) for s in samples]
    if len(points) == 1:
        return [RawSegment(points=points)]

    hops = classify_hops(samples, thresholds)
    segments: List[RawSegment] = []
    current_points: List[TrackPoint] = [points[0]]
    current_hops: List[Hop] = []
    pending_points: List[TrackPoint] = []
    pending_hops: List[Hop] = []
    pending_idle_min = 0.0
    has_motion = False

    for idx, hop in enumerate(hops):
        start, end = points[idx], points[idx + 1]
        if not hop.moving:
            if has_motion:
                pending_points.append(end)
                pending_hops.append(hop)
                pending_idle_min += hop.minutes
            continue

        if not has_motion:
            # Movement starts here; any leading idle is left out.
            current_points = [start]
            has_motion = True
        elif pending_hops:
            if pending_idle_min >= thresholds.stop_threshold_min:
                segments.append(
                    _build_raw(current_points, current_hops, pending_idle_min)
                )
                current_points = [start]
                current_hops = []
            else:
                current_points.extend(pending_points)
                current_hops.extend(pending_hops)
            pending_points = []
            pending_hops = []
            pending_idle_min = 0.0

        current_points.append(end)
        current_hops.append(hop)

    if not has_motion:
        return [RawSegment(points=[points[0]])]

    segments.append(_build_raw(current_points, current_hops, 0.0))
    _LOG.debug(
        "Split %d samples into %d segments (trailing idle %.1f min)",
        len(points),
        len(segments),
        pending_idle_min,
    )
    return segments


def classify_hops(
    samples: Sequence[PositionSample],
    thresholds: Thresholds,
) -> List[Hop]:
    """Return one :class:`Hop` per consecutive sample pair.

    When the hop's end sample reports a speed, a hop shorter than the jitter
    floor contributes no distance if that speed is below the motion
    threshold.

    Without a reported speed, hop-by-hop speeds are meaningless for jitter
    (4 m at 1 Hz is already 14 km/h), so displacement is measured from the
    last sample that counted instead. Hops stay at zero until that
    displacement reaches the jitter floor; it is then shared out over the hops
    since the anchor in proportion to their raw length and the anchor moves on.
    """

    if len(samples) < 2:
        return []
    raw_km = hop_distances_km(
        [s.latitude for s in samples], [s.longitude for s in samples]
    )
    seconds = np.diff(
        np.asarray([s.timestamp.timestamp() for s in samples], dtype=float)
    )
    jitter_floor_km = thresholds.jitter_floor_m / 1000.0

    hops: List[Hop] = []
    anchor = 0
    for idx in range(len(samples) - 1):
        minutes = max(float(seconds[idx]), 0.0) / 60.0
        reported = samples[idx + 1].reported_speed_kmh
        if reported is not None:
            distance = float(raw_km[idx])
            if (
                distance < jitter_floor_km
                and reported < thresholds.motion_threshold_kmh
            ):
                distance = 0.0
            hops.append(_make_hop(distance, minutes, thresholds))
            anchor = idx + 1
            continue

        hops.append(_make_hop(0.0, minutes, thresholds))
        displacement = distance_km(
            samples[anchor].coordinate, samples[idx + 1].coordinate
        )
        if displacement < jitter_floor_km:
            continue
        run = range(anchor, idx + 1)
        run_km = float(raw_km[anchor : idx + 1].sum())
        for i in run:
            if run_km > 0:
                share = float(raw_km[i]) / run_km
            else:
                share = 1.0 if i == idx else 0.0
            hops[i] = _make_hop(displacement * share, hops[i].minutes, thresholds)
        anchor = idx + 1
    return hops


def _make_hop(distance: float, minutes: float, thresholds: Thresholds) -> Hop:
    speed = speed_kmh(distance, minutes / 60.0)
    return Hop(
        distance_km=distance,
        minutes=minutes,
        speed_kmh=speed,
        moving=speed >= thresholds.motion_threshold_kmh,
    )


def _build_raw(
    points: List[TrackPoint],
    hops: List[Hop],
    idle_minutes_before_next: float,
) -> RawSegment:
    return RawSegment(
        points=list(points),
        hop_distances_km=[h.distance_km for h in hops],
        hop_speeds_kmh=[h.speed_kmh for h in hops],
        hop_moving=[h.moving for h in hops],
        idle_minutes_before_next=idle_minutes_before_next,
    )


def _track_point(sample: PositionSample) -> TrackPoint:
    return TrackPoint(
        latitude=sample.latitude,
        longitude=sample.longitude,
        timestamp=sample.timestamp,
    )


__all__ = ["Hop", "classify_hops", "split_prepared", "split_segments"]
