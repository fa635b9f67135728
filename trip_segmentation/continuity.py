"""Continuity checks between consecutive trips of one device.

The end of one trip and the start of the next should be (almost) the same
place. A large jump over a short time means the vehicle moved without a
recorded trip, i.e. the tracker lost coverage. A moderate jump, or one spread
over a long time, is more likely an unlogged but real stop and is only a
warning. Validation never raises; missing data yields no issues.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional

from .geo import distance_km, is_valid_coordinate, speed_kmh
from .models import ContinuityIssue, LatLon, Severity, Thresholds, TripRecord
from .utils import coerce_float, minutes_between, parse_timestamp

_LOG = logging.getLogger(__name__)

TripInput = TripRecord | Mapping[str, Any]


def _coordinate(lat: Any, lon: Any) -> Optional[LatLon]:
    lat_f = coerce_float(lat)
    lon_f = coerce_float(lon)
    if lat_f is None or lon_f is None or not is_valid_coordinate(lat_f, lon_f):
        return None
    return (lat_f, lon_f)


def _pair(value: Any) -> Optional[LatLon]:
    if isinstance(value, Mapping):
        return _coordinate(
            value.get("lat", value.get("latitude")),
            value.get("lon", value.get("lng", value.get("longitude"))),
        )
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return _coordinate(value[0], value[1])
    return None


def parse_trip_record(row: TripInput) -> Optional[TripRecord]:
    """Build a :class:`TripRecord` from a trip row.

    Accepts the flat column layout used by trip tables (``start_latitude``,
    ``end_longitude``, ``start_time`` ...) or ``start``/``end`` coordinate
    pairs. Unreadable endpoint fields become ``None``; only a row without an
    identifier is rejected.
    """

    if isinstance(row, TripRecord):
        return TripRecord(
            trip_id=row.trip_id,
            start_time=parse_timestamp(row.start_time),
            end_time=parse_timestamp(row.end_time),
            start=_pair(row.start),
            end=_pair(row.end),
        )
    if not isinstance(row, Mapping):
        return None
    trip_id = row.get("id")
    if trip_id is None:
        trip_id = row.get("trip_id")
    if trip_id is None:
        _LOG.debug("Skipping trip row without identifier: %s", row)
        return None

    start = _pair(row.get("start"))
    if start is None:
        start = _coordinate(row.get("start_latitude"), row.get("start_longitude"))
    end = _pair(row.get("end"))
    if end is None:
        end = _coordinate(row.get("end_latitude"), row.get("end_longitude"))
    return TripRecord(
        trip_id=trip_id,
        start_time=parse_timestamp(row.get("start_time")),
        end_time=parse_timestamp(row.get("end_time")),
        start=start,
        end=end,
    )


def classify_gap(
    distance_gap_km: float,
    time_gap_minutes: float,
    thresholds: Thresholds,
) -> Optional[Severity]:
    """Return the severity for a gap, or ``None`` when it is not an issue."""

    if distance_gap_km < thresholds.continuity_warning_distance_km:
        return None
    if (
        distance_gap_km >= thresholds.continuity_error_distance_km
        and time_gap_minutes <= thresholds.continuity_error_max_gap_min
    ):
        return Severity.ERROR
    return Severity.WARNING


def _gap_speed(distance_gap_km: float, time_gap_minutes: float) -> float:
    # An instant jump has no finite speed.
    if time_gap_minutes <= 0:
        return math.inf if distance_gap_km > 0 else 0.0
    return speed_kmh(distance_gap_km, time_gap_minutes / 60.0)


def validate_continuity(
    trips: Iterable[TripInput],
    thresholds: Optional[Thresholds] = None,
) -> List[ContinuityIssue]:
    """Flag suspected coverage gaps between consecutive trips.

    Args:
        trips: One device's trips, ideally sorted by start time. Trips with a
            missing endpoint are left out of pairing without affecting their
            neighbours.
        thresholds: Continuity thresholds. Defaults to the configured values.

    Returns:
        One issue per offending pair, attributed to the later trip.
    """

    thresholds = (thresholds or Thresholds()).validate()
    records: List[TripRecord] = []
    for row in trips:
        record = parse_trip_record(row)
        if record is None or not record.has_endpoints:
            continue
        records.append(record)
    records.sort(key=lambda r: r.start_time)

    issues: List[ContinuityIssue] = []
    for previous, following in zip(records, records[1:]):
        time_gap = minutes_between(previous.end_time, following.start_time)
        if time_gap < 0:
            _LOG.debug(
                "Skipping overlapping trips %s -> %s",
                previous.trip_id,
                following.trip_id,
            )
            continue
        distance_gap = distance_km(previous.end, following.start)
        severity = classify_gap(distance_gap, time_gap, thresholds)
        if severity is None:
            continue
        issues.append(
            ContinuityIssue(
                trip_id=following.trip_id,
                distance_gap_km=distance_gap,
                time_gap_minutes=time_gap,
                severity=severity,
                previous_trip_id=previous.trip_id,
                implied_speed_kmh=_gap_speed(distance_gap, time_gap),
            )
        )
    if issues:
        _LOG.debug("Continuity check found %d issues", len(issues))
    return issues


__all__ = ["classify_gap", "parse_trip_record", "validate_continuity"]
