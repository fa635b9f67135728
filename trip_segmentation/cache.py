"""Caller-side cache for trip analyses.

The analysis functions are stateless; callers that re-render the same trip
can keep results here keyed by trip id and window, and must invalidate a trip
explicitly when its samples change.
"""

from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import Optional, Tuple

from cachetools import LRUCache

from .config import RESULT_CACHE_SIZE
from .models import TripAnalysis, TripId

CacheKey = Tuple[TripId, Optional[datetime], Optional[datetime]]


class TripResultCache:
    """Thread-safe LRU map of ``(trip_id, window_start, window_end)`` to results."""

    def __init__(self, max_entries: int = RESULT_CACHE_SIZE) -> None:
        self._data: LRUCache[CacheKey, TripAnalysis] = LRUCache(
            maxsize=max(1, max_entries)
        )
        self._lock = RLock()

    @staticmethod
    def key(
        trip_id: TripId,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> CacheKey:
        return (trip_id, window_start, window_end)

    def get(self, key: CacheKey) -> Optional[TripAnalysis]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: CacheKey, value: TripAnalysis) -> None:
        with self._lock:
            self._data[key] = value

    def invalidate(self, trip_id: TripId) -> int:
        """Drop every window cached for ``trip_id``; return how many were removed."""
        with self._lock:
            stale = [k for k in self._data.keys() if k[0] == trip_id]
            for k in stale:
                del self._data[k]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data


__all__ = ["CacheKey", "TripResultCache"]
