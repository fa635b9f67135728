"""Trip analysis service.

Runs the pure :func:`analyze_trip` pipeline over many independent trip
windows, optionally fanning out over a thread pool, and consults a
caller-provided :class:`TripResultCache` when one is configured. Continuity
checks for the same device go through :func:`validate_continuity`.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from ..analysis import analyze_trip
from ..cache import TripResultCache
from ..config import ANALYSIS_MAX_WORKERS
from ..continuity import TripInput, validate_continuity
from ..models import ContinuityIssue, Severity, Thresholds, TripAnalysis, TripId
from ..samples import SampleInput

TripWindows = Mapping[TripId, Iterable[SampleInput]]


@dataclass(slots=True)
class TripAnalysisServiceConfig:
    thresholds: Optional[Thresholds] = None
    max_workers: int = ANALYSIS_MAX_WORKERS
    cache: Optional[TripResultCache] = None
    logger: logging.Logger | None = None


class TripAnalysisService:
    def __init__(self, config: TripAnalysisServiceConfig | None = None):
        self.config = config or TripAnalysisServiceConfig()
        self.thresholds = (self.config.thresholds or Thresholds()).validate()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def analyze(
        self,
        trip_id: TripId,
        samples: Iterable[SampleInput],
        *,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> TripAnalysis:
        """Analyse one trip window, reusing a cached result when present."""

        cache = self.config.cache
        key = TripResultCache.key(trip_id, window_start, window_end)
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                self._log.debug("Cache hit for trip=%s", trip_id)
                return cached
        analysis = analyze_trip(samples, self.thresholds, trip_id=trip_id)
        if cache is not None:
            cache.put(key, analysis)
        return analysis

    def analyze_many(self, windows: TripWindows) -> Dict[TripId, TripAnalysis]:
        """Analyse every trip window; the result keeps the input order."""

        if not windows:
            return {}
        trip_ids = list(windows.keys())
        # Materialise inputs up front so generators are consumed on this thread.
        payloads = {trip_id: list(windows[trip_id]) for trip_id in trip_ids}
        workers = max(1, min(self.config.max_workers, len(trip_ids)))
        self._log.info(
            "Analysing %d trip windows with %d worker(s)", len(trip_ids), workers
        )

        results: Dict[TripId, TripAnalysis] = {}
        if workers == 1:
            for trip_id in trip_ids:
                results[trip_id] = self.analyze(trip_id, payloads[trip_id])
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    trip_id: executor.submit(self.analyze, trip_id, payloads[trip_id])
                    for trip_id in trip_ids
                }
                for trip_id in trip_ids:
                    results[trip_id] = futures[trip_id].result()

        empty = [trip_id for trip_id, a in results.items() if not a.has_data]
        if empty:
            self._log.info(
                "%d trip window(s) had no usable samples: %s",
                len(empty),
                ", ".join(str(t) for t in empty),
            )
        return results

    def check_continuity(self, trips: Iterable[TripInput]) -> List[ContinuityIssue]:
        issues = validate_continuity(trips, self.thresholds)
        errors = sum(1 for issue in issues if issue.severity is Severity.ERROR)
        if issues:
            self._log.info(
                "Continuity check: %d issue(s), %d error(s)", len(issues), errors
            )
        return issues


__all__ = ["TripAnalysisService", "TripAnalysisServiceConfig"]
