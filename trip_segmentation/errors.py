"""Central error types used across the package.

Bad GPS data is never an error here: malformed samples and trip rows are
filtered at the boundary. Exceptions are reserved for misconfiguration.
"""

from __future__ import annotations


class TripSegmentationError(RuntimeError):
    """Base error for the trip segmentation core."""


class ThresholdConfigError(TripSegmentationError, ValueError):
    """Raised when a threshold set contains non-finite or out-of-range values."""


__all__ = [
    "TripSegmentationError",
    "ThresholdConfigError",
]
