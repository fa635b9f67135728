"""Trip segmentation core: GPS fixes in, segments, summaries and gaps out."""

from .analysis import analyze_trip
from .continuity import validate_continuity
from .errors import ThresholdConfigError, TripSegmentationError
from .geo import bearing_deg, distance_km, speed_kmh
from .models import (
    ContinuityIssue,
    PositionSample,
    Segment,
    Severity,
    Thresholds,
    TripAnalysis,
    TripRecord,
    TripSummary,
)
from .segmentation import split_segments
from .summary import summarize_segment, summarize_segments, summarize_trip

__all__ = [
    "analyze_trip",
    "bearing_deg",
    "distance_km",
    "speed_kmh",
    "split_segments",
    "summarize_segment",
    "summarize_segments",
    "summarize_trip",
    "validate_continuity",
    "ContinuityIssue",
    "PositionSample",
    "Segment",
    "Severity",
    "Thresholds",
    "TripAnalysis",
    "TripRecord",
    "TripSummary",
    "ThresholdConfigError",
    "TripSegmentationError",
]
