"""Dataclasses describing GPS samples, segments, trips and continuity results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from . import config
from .errors import ThresholdConfigError

LatLon = Tuple[float, float]
TripId = int | str


@dataclass(frozen=True, slots=True)
class PositionSample:
    """A single GPS fix as delivered by the tracker.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp: Fix time. Timezone-aware UTC after boundary parsing.
        reported_speed_kmh: Device-reported speed, ``None`` when absent.
    """

    latitude: float
    longitude: float
    timestamp: datetime
    reported_speed_kmh: Optional[float] = None

    @property
    def coordinate(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A point kept inside a segment (speed is not carried past splitting)."""

    latitude: float
    longitude: float
    timestamp: datetime

    @property
    def coordinate(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(slots=True)
class Thresholds:
    """Numeric thresholds used by segmentation and continuity validation.

    Defaults are snapshotted from :mod:`trip_segmentation.config` when the
    instance is created.
    """

    jitter_floor_m: float = field(default_factory=lambda: config.JITTER_FLOOR_M)
    motion_threshold_kmh: float = field(
        default_factory=lambda: config.MOTION_THRESHOLD_KMH
    )
    stop_threshold_min: float = field(default_factory=lambda: config.STOP_THRESHOLD_MIN)
    spike_filter_enabled: bool = field(
        default_factory=lambda: config.SPIKE_FILTER_ENABLED
    )
    spike_speed_kmh: float = field(default_factory=lambda: config.SPIKE_SPEED_KMH)
    continuity_warning_distance_km: float = field(
        default_factory=lambda: config.CONTINUITY_WARNING_DISTANCE_KM
    )
    continuity_error_distance_km: float = field(
        default_factory=lambda: config.CONTINUITY_ERROR_DISTANCE_KM
    )
    continuity_error_max_gap_min: float = field(
        default_factory=lambda: config.CONTINUITY_ERROR_MAX_GAP_MIN
    )

    def validate(self) -> "Thresholds":
        """Return ``self`` after checking every threshold is finite and usable."""

        non_negative = {"jitter_floor_m": self.jitter_floor_m}
        positive = {
            "motion_threshold_kmh": self.motion_threshold_kmh,
            "stop_threshold_min": self.stop_threshold_min,
            "spike_speed_kmh": self.spike_speed_kmh,
            "continuity_warning_distance_km": self.continuity_warning_distance_km,
            "continuity_error_distance_km": self.continuity_error_distance_km,
            "continuity_error_max_gap_min": self.continuity_error_max_gap_min,
        }
        for name, value in non_negative.items():
            if not math.isfinite(value) or value < 0:
                raise ThresholdConfigError(f"{name} must be a finite value >= 0")
        for name, value in positive.items():
            if not math.isfinite(value) or value <= 0:
                raise ThresholdConfigError(f"{name} must be a finite value > 0")
        if self.continuity_error_distance_km < self.continuity_warning_distance_km:
            raise ThresholdConfigError(
                "continuity_error_distance_km must not be below "
                "continuity_warning_distance_km"
            )
        return self


@dataclass(slots=True)
class RawSegment:
    """Point group produced by the splitter, before metrics are attached.

    ``hop_*`` lists have one entry per consecutive point pair, so they are
    always one shorter than ``points``.
    """

    points: List[TrackPoint]
    hop_distances_km: List[float] = field(default_factory=list)
    hop_speeds_kmh: List[float] = field(default_factory=list)
    hop_moving: List[bool] = field(default_factory=list)
    idle_minutes_before_next: float = 0.0

    @property
    def start_time(self) -> datetime:
        return self.points[0].timestamp

    @property
    def end_time(self) -> datetime:
        return self.points[-1].timestamp


@dataclass(slots=True)
class Segment:
    """A contiguous stretch of movement with its kinematics."""

    points: List[TrackPoint]
    start_time: datetime
    end_time: datetime
    distance_km: float = 0.0
    duration_min: float = 0.0
    avg_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0
    idle_minutes_before_next: float = 0.0
    moving_min: float = 0.0
    idle_min: float = 0.0

    @property
    def start(self) -> LatLon:
        return self.points[0].coordinate

    @property
    def end(self) -> LatLon:
        return self.points[-1].coordinate


@dataclass(slots=True)
class TripSummary:
    """Trip-level totals, always recomputed from segments."""

    total_distance_km: float = 0.0
    total_duration_min: float = 0.0
    avg_speed_kmh: float = 0.0
    stop_count: int = 0
    longest_idle_min: float = 0.0
    segment_count: int = 0
    max_speed_kmh: float = 0.0
    total_idle_min: float = 0.0


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class TripRecord:
    """Trip endpoints as needed for continuity checks. Any field may be missing."""

    trip_id: TripId
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    start: Optional[LatLon] = None
    end: Optional[LatLon] = None

    @property
    def has_endpoints(self) -> bool:
        return (
            self.start_time is not None
            and self.end_time is not None
            and self.start is not None
            and self.end is not None
        )


@dataclass(frozen=True, slots=True)
class ContinuityIssue:
    """Suspected coverage gap detected before ``trip_id``."""

    trip_id: TripId
    distance_gap_km: float
    time_gap_minutes: float
    severity: Severity
    previous_trip_id: Optional[TripId] = None
    implied_speed_kmh: float = 0.0  # inf when the gap took no time


@dataclass(slots=True)
class TripAnalysis:
    """Segments and summary for one trip window.

    ``sample_count`` is the number of samples that survived cleaning, so a
    caller can tell an empty window from a window with zero movement.
    """

    trip_id: Optional[TripId]
    segments: List[Segment] = field(default_factory=list)
    summary: TripSummary = field(default_factory=TripSummary)
    sample_count: int = 0
    dropped_samples: int = 0

    @property
    def has_data(self) -> bool:
        return self.sample_count > 0


__all__ = [
    "LatLon",
    "TripId",
    "PositionSample",
    "TrackPoint",
    "Thresholds",
    "RawSegment",
    "Segment",
    "TripSummary",
    "Severity",
    "TripRecord",
    "ContinuityIssue",
    "TripAnalysis",
]
