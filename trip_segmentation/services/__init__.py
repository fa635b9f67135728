"""Service layer package.

Exports high-level services consumed by orchestration / presentation layers.
"""

from .trip_service import TripAnalysisService, TripAnalysisServiceConfig

__all__ = ["TripAnalysisService", "TripAnalysisServiceConfig"]
