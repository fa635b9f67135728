"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import math
from dataclasses import fields, is_dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

# Epoch values above this are taken to be milliseconds rather than seconds
# (roughly the year 2286 expressed in seconds).
_EPOCH_MS_CUTOFF = 10_000_000_000


def coerce_float(value: Any) -> float | None:
    """Return ``value`` as a finite float, or ``None`` when it is not one."""

    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def to_utc_aware(value: datetime) -> datetime:
    """Return ``value`` as a UTC-aware datetime. Naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a datetime, ISO-8601 string or epoch seconds/milliseconds.

    Returns a UTC-aware datetime, or ``None`` when the value cannot be read.
    """

    if isinstance(value, datetime):
        return to_utc_aware(value)
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is not None:
            return to_utc_aware(parsed)
        # Numeric strings are accepted as epoch values below.
    epoch = coerce_float(value)
    if epoch is None:
        return None
    if abs(epoch) > _EPOCH_MS_CUTOFF:
        epoch /= 1000.0
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def format_minutes(minutes: float) -> str:
    """Format minutes into a ``Hh MMm`` string (``12m`` below one hour)."""

    total = int(round(max(minutes, 0.0)))
    hours, mins = divmod(total, 60)
    if hours:
        return f"{hours}h {mins:02d}m"
    return f"{mins}m"


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _normalise_value(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    if isinstance(value, set):
        return sorted(_normalise_value(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def to_serializable(value: Any) -> Any:
    """Return a plain dict/list/scalar structure for any output object."""

    return _normalise_value(value)


def json_dumps_sorted(value: Any) -> str:
    """Return canonical JSON for hashing / comparisons."""

    normalised = _normalise_value(value)
    return json.dumps(normalised, sort_keys=True, separators=(",", ":"))
