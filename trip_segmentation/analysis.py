"""One-call trip analysis: clean samples, split, summarise, aggregate."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import Thresholds, TripAnalysis, TripId
from .samples import SampleInput, prepare_samples
from .segmentation import split_prepared
from .summary import summarize_segments, summarize_trip

_LOG = logging.getLogger(__name__)


def analyze_trip(
    samples: Iterable[SampleInput],
    thresholds: Optional[Thresholds] = None,
    *,
    trip_id: Optional[TripId] = None,
) -> TripAnalysis:
    """Return segments and the trip summary for one window of samples.

    Empty or fully invalid input gives an analysis with no segments and a
    zero-valued summary; check :attr:`TripAnalysis.has_data` to tell that
    apart from a window that simply never moved.
    """

    thresholds = (thresholds or Thresholds()).validate()
    prepared = prepare_samples(samples, thresholds)
    raws = split_prepared(prepared.samples, thresholds)
    segments = summarize_segments(raws)
    summary = summarize_trip(segments, thresholds)
    _LOG.debug(
        "Trip %s: %d samples, %d segments, %.2f km",
        trip_id,
        len(prepared.samples),
        len(segments),
        summary.total_distance_km,
    )
    return TripAnalysis(
        trip_id=trip_id,
        segments=segments,
        summary=summary,
        sample_count=len(prepared.samples),
        dropped_samples=prepared.dropped,
    )


__all__ = ["analyze_trip"]
