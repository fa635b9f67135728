"""Report helpers.

Pure functions that turn segments, trip summaries and continuity issues into
DataFrames for a report generator or UI table. Kept separate from the
computation modules so the core stays free of presentation concerns.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

import pandas as pd

from .geo import bearing_deg
from .models import ContinuityIssue, Segment, TripAnalysis
from .utils import format_minutes

SEGMENT_COL = "Segment"
START_COL = "Start"
END_COL = "End"
DISTANCE_COL = "Distance (km)"
DURATION_COL = "Duration (min)"
MOVING_COL = "Moving (min)"
AVG_SPEED_COL = "Avg Speed (km/h)"
MAX_SPEED_COL = "Max Speed (km/h)"
IDLE_AFTER_COL = "Idle After (min)"
HEADING_COL = "Heading (deg)"

SEGMENT_COLUMNS = [
    SEGMENT_COL,
    START_COL,
    END_COL,
    DISTANCE_COL,
    DURATION_COL,
    MOVING_COL,
    AVG_SPEED_COL,
    MAX_SPEED_COL,
    IDLE_AFTER_COL,
    HEADING_COL,
]

TRIP_COL = "Trip"
SEGMENTS_COL = "Segments"
TOTAL_DISTANCE_COL = "Total Distance (km)"
TOTAL_DURATION_COL = "Driving Time"
STOPS_COL = "Stops"
LONGEST_IDLE_COL = "Longest Idle (min)"

TRIP_COLUMNS = [
    TRIP_COL,
    SEGMENTS_COL,
    TOTAL_DISTANCE_COL,
    TOTAL_DURATION_COL,
    AVG_SPEED_COL,
    MAX_SPEED_COL,
    STOPS_COL,
    LONGEST_IDLE_COL,
]

PREVIOUS_TRIP_COL = "Previous Trip"
SEVERITY_COL = "Severity"
GAP_KM_COL = "Gap (km)"
GAP_MIN_COL = "Gap (min)"
GAP_LABEL_COL = "Gap"

ISSUE_COLUMNS = [
    TRIP_COL,
    PREVIOUS_TRIP_COL,
    SEVERITY_COL,
    GAP_KM_COL,
    GAP_MIN_COL,
    GAP_LABEL_COL,
]


def _segment_row(index: int, segment: Segment) -> dict:
    return {
        SEGMENT_COL: index,
        START_COL: segment.start_time,
        END_COL: segment.end_time,
        DISTANCE_COL: round(segment.distance_km, 2),
        DURATION_COL: round(segment.duration_min, 1),
        MOVING_COL: round(segment.moving_min, 1),
        AVG_SPEED_COL: round(segment.avg_speed_kmh, 1),
        MAX_SPEED_COL: round(segment.max_speed_kmh, 1),
        IDLE_AFTER_COL: round(segment.idle_minutes_before_next, 1),
        HEADING_COL: round(bearing_deg(segment.start, segment.end), 0),
    }


def segments_frame(segments: Sequence[Segment]) -> pd.DataFrame:
    """One row per segment, numbered from 1."""

    rows = [_segment_row(idx, seg) for idx, seg in enumerate(segments, start=1)]
    return pd.DataFrame(rows, columns=SEGMENT_COLUMNS)


def trip_summary_row(analysis: TripAnalysis) -> dict:
    summary = analysis.summary
    return {
        TRIP_COL: analysis.trip_id,
        SEGMENTS_COL: summary.segment_count,
        TOTAL_DISTANCE_COL: round(summary.total_distance_km, 2),
        TOTAL_DURATION_COL: format_minutes(summary.total_duration_min),
        AVG_SPEED_COL: round(summary.avg_speed_kmh, 1),
        MAX_SPEED_COL: round(summary.max_speed_kmh, 1),
        STOPS_COL: summary.stop_count,
        LONGEST_IDLE_COL: round(summary.longest_idle_min, 1),
    }


def trips_frame(analyses: Iterable[TripAnalysis]) -> pd.DataFrame:
    """One summary row per analysed trip, in input order.

    Trips without any valid sample are left out so that "no data" does not
    show up as a zero-kilometre trip.
    """

    rows = [trip_summary_row(a) for a in analyses if a.has_data]
    return pd.DataFrame(rows, columns=TRIP_COLUMNS)


def gap_label(issue: ContinuityIssue) -> str:
    return f"Gap {issue.distance_gap_km:.1f}km/{format_minutes(issue.time_gap_minutes)}"


def issues_frame(issues: Sequence[ContinuityIssue]) -> pd.DataFrame:
    """Continuity issues with errors listed before warnings."""

    rows: List[Mapping[str, object]] = [
        {
            TRIP_COL: issue.trip_id,
            PREVIOUS_TRIP_COL: issue.previous_trip_id,
            SEVERITY_COL: issue.severity.value,
            GAP_KM_COL: round(issue.distance_gap_km, 2),
            GAP_MIN_COL: round(issue.time_gap_minutes, 1),
            GAP_LABEL_COL: gap_label(issue),
        }
        for issue in issues
    ]
    df = pd.DataFrame(rows, columns=ISSUE_COLUMNS)
    if not df.empty:
        df["_order"] = (df[SEVERITY_COL] != "error").astype(int)
        df = df.sort_values(by=["_order"], kind="stable").drop(columns=["_order"])
        df = df.reset_index(drop=True)
    return df


__all__ = [
    "gap_label",
    "issues_frame",
    "segments_frame",
    "trip_summary_row",
    "trips_frame",
]
