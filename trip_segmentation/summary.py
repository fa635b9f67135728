"""Segment and trip kinematics.

Pure transformation: raw segments from the splitter become :class:`Segment`
objects with distance/duration/speed metrics, and a list of segments folds
into one :class:`TripSummary`. Nothing is cached; summaries are always
recomputed from their segments.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .geo import speed_kmh
from .models import RawSegment, Segment, Thresholds, TripSummary
from .utils import minutes_between


def summarize_segment(raw: RawSegment) -> Segment:
    """Attach metrics to a raw segment.

    ``avg_speed_kmh`` is distance over time spent on moving hops. It is not an
    average of point speeds, which would be skewed by uneven sampling.
    """

    points = raw.points
    start_time = raw.start_time
    end_time = raw.end_time
    distance = float(sum(raw.hop_distances_km))
    duration = max(minutes_between(start_time, end_time), 0.0)

    moving_min = 0.0
    idle_min = 0.0
    for idx, moving in enumerate(raw.hop_moving):
        hop_min = max(
            minutes_between(points[idx].timestamp, points[idx + 1].timestamp), 0.0
        )
        if moving:
            moving_min += hop_min
        else:
            idle_min += hop_min

    return Segment(
        points=list(points),
        start_time=start_time,
        end_time=end_time,
        distance_km=max(distance, 0.0),
        duration_min=duration,
        avg_speed_kmh=speed_kmh(distance, moving_min / 60.0),
        max_speed_kmh=max(raw.hop_speeds_kmh, default=0.0),
        idle_minutes_before_next=max(raw.idle_minutes_before_next, 0.0),
        moving_min=moving_min,
        idle_min=idle_min,
    )


def summarize_segments(raws: Iterable[RawSegment]) -> List[Segment]:
    return [summarize_segment(raw) for raw in raws]


def summarize_trip(
    segments: Sequence[Segment],
    thresholds: Optional[Thresholds] = None,
) -> TripSummary:
    """Fold segments into trip totals.

    ``total_duration_min`` is driving time: the sum of segment durations,
    which excludes the stops between segments. A segment counts as a stop
    when its ``idle_minutes_before_next`` is at or above the stop threshold,
    the same rule the splitter uses to close segments. For splitter output
    ``stop_count`` is therefore ``segment_count - 1``.
    """

    if not segments:
        return TripSummary()
    stop_threshold = (thresholds or Thresholds()).stop_threshold_min

    total_distance = 0.0
    total_duration = 0.0
    total_idle = 0.0
    longest_idle = 0.0
    max_speed = 0.0
    stops = 0
    for segment in segments:
        total_distance += segment.distance_km
        total_duration += segment.duration_min
        idle = segment.idle_minutes_before_next
        total_idle += idle
        longest_idle = max(longest_idle, idle)
        max_speed = max(max_speed, segment.max_speed_kmh)
        if idle >= stop_threshold:
            stops += 1

    return TripSummary(
        total_distance_km=total_distance,
        total_duration_min=total_duration,
        avg_speed_kmh=speed_kmh(total_distance, total_duration / 60.0),
        stop_count=stops,
        longest_idle_min=longest_idle,
        segment_count=len(segments),
        max_speed_kmh=max_speed,
        total_idle_min=total_idle,
    )


__all__ = ["summarize_segment", "summarize_segments", "summarize_trip"]
