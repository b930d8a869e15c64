"""Human-readable bucket labels.

Builds tooltip titles from bucket edges and a field classification:

- numeric edges -> ``Range: [lo, hi)`` (half-open, matching the aggregation),
- temporal edges -> ``Range: 2023-11-14 22:13:20.000 – 22:13:25.250``,
- no usable edges -> ``Value: <key>``.

Nothing here raises for bad input; a bucket that cannot be described as a
range is described by its key.
"""

from __future__ import annotations

import math
import numbers
from datetime import datetime, timedelta, timezone, tzinfo
from enum import IntEnum
from functools import lru_cache
from typing import Any, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nicedistributions.distributions_widget.classifier import (
    Categorical,
    Classification,
    Numeric,
    NumericKind,
    Temporal,
)
from nicedistributions.distributions_widget.prettify import Prettifier, prettify
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

LOCAL_TIME_ZONE = "local"
RANGE_SEPARATOR = " – "
MAX_TICK_CHARS = 24

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Precision(IntEnum):
    """Date/time units, coarse to fine."""
    YEAR = 0
    MONTH = 1
    DAY = 2
    MINUTE = 3
    SECOND = 4
    MILLISECOND = 5


_DATE_FORMATS = {
    Precision.YEAR: "%Y",
    Precision.MONTH: "%Y-%m",
    Precision.DAY: "%Y-%m-%d",
}


@lru_cache(maxsize=64)
def resolve_time_zone(name: Optional[str]) -> Optional[tzinfo]:
    """Map a display time zone name to a tzinfo.

    Returns None for the host's local zone (``"local"``, empty or None), which
    ``datetime.astimezone`` interprets as local time. Unknown names fall back
    to UTC.
    """
    if not name or name == LOCAL_TIME_ZONE:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"unknown time zone {name!r}, using UTC")
        return timezone.utc


def to_datetime(millis: float, time_zone: Optional[str]) -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``time_zone``."""
    return (_EPOCH + timedelta(milliseconds=millis)).astimezone(resolve_time_zone(time_zone))


def epoch_millis(value: Any) -> Optional[float]:
    """Extract epoch milliseconds from a temporal edge or key.

    Accepts plain numbers, ``{"$date": ms}`` documents and aware datetimes.
    """
    if isinstance(value, dict):
        value = value.get("$date")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH) / timedelta(milliseconds=1)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def precision_of(dt: datetime) -> Precision:
    """Coarsest unit that represents ``dt`` exactly."""
    if dt.microsecond:
        return Precision.MILLISECOND
    if dt.second:
        return Precision.SECOND
    if dt.hour or dt.minute:
        return Precision.MINUTE
    if dt.day != 1:
        return Precision.DAY
    if dt.month != 1:
        return Precision.MONTH
    return Precision.YEAR


def _format_time(dt: datetime, precision: Precision) -> str:
    if precision is Precision.MINUTE:
        return dt.strftime("%H:%M")
    text = dt.strftime("%H:%M:%S")
    if precision is Precision.MILLISECOND:
        text += f".{dt.microsecond // 1000:03d}"
    return text


def format_datetime(dt: datetime, precision: Optional[Precision] = None) -> str:
    """Format ``dt`` down to ``precision`` (its own precision by default)."""
    if precision is None:
        precision = precision_of(dt)
    if precision <= Precision.DAY:
        return dt.strftime(_DATE_FORMATS[precision])
    return f"{dt.strftime('%Y-%m-%d')} {_format_time(dt, precision)}"


def format_temporal_range(start_millis: float, end_millis: float, time_zone: Optional[str]) -> str:
    """Format ``[start, end)`` at the precision both edges need.

    When the range stays within one calendar day and needs a time of day, the
    date is printed once ahead of the two times.
    """
    start = to_datetime(start_millis, time_zone)
    end = to_datetime(end_millis, time_zone)
    precision = max(precision_of(start), precision_of(end))

    if precision > Precision.DAY and start.date() == end.date():
        return (
            f"{start.strftime('%Y-%m-%d')} "
            f"{_format_time(start, precision)}{RANGE_SEPARATOR}{_format_time(end, precision)}"
        )
    return f"{format_datetime(start, precision)}{RANGE_SEPARATOR}{format_datetime(end, precision)}"


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return value


def format_number(value: Any, numeric_kind: NumericKind) -> str:
    if numeric_kind is NumericKind.INTEGER:
        if isinstance(value, numbers.Integral):
            return str(int(value))
        if float(value).is_integer():
            return str(int(value))
        return str(value)
    return f"{float(value):.3f}"


def value_label(key: Any) -> str:
    return f"Value: {key}"


def _two_edges(edges: Optional[Sequence[Any]]) -> Optional[tuple[Any, Any]]:
    if edges is None or isinstance(edges, (str, bytes)):
        return None
    try:
        lo, hi = edges
    except (TypeError, ValueError):
        return None
    return lo, hi


def format_bucket(
    key: Any,
    edges: Optional[Sequence[Any]],
    classification: Classification,
    prettifier: Prettifier = prettify,
) -> str:
    """Tooltip title for one bucket.

    Args:
        key: Bucket key.
        edges: ``(lower, upper)`` bucket boundaries, or None.
        classification: The field's classification.
        prettifier: Text collaborator for categorical keys.

    Returns:
        ``Range: ...`` for numeric and temporal buckets with two usable edges,
        ``Value: <key>`` otherwise.
    """
    if isinstance(classification, Categorical):
        return value_label(prettifier(key))

    pair = _two_edges(edges)
    if pair is None:
        return value_label(key)

    try:
        if isinstance(classification, Temporal):
            start, end = (epoch_millis(e) for e in pair)
            if start is None or end is None:
                logger.warning(f"non-temporal edges {pair!r} for key {key!r}")
                return value_label(key)
            return f"Range: {format_temporal_range(start, end, classification.time_zone)}"

        if isinstance(classification, Numeric):
            lo, hi = (_number(e) for e in pair)
            if lo is None or hi is None:
                logger.warning(f"non-numeric edges {pair!r} for key {key!r}")
                return value_label(key)
            kind = classification.numeric_kind
            return f"Range: [{format_number(lo, kind)}, {format_number(hi, kind)})"
    except (OverflowError, ValueError, OSError) as e:
        logger.warning(f"could not format edges {pair!r} for key {key!r}: {e}")

    return value_label(key)


def format_tick(value: Any, classification: Classification, max_chars: int = MAX_TICK_CHARS) -> str:
    """Axis tick text for a bucket key.

    Temporal keys print as date/time trimmed to their own precision, floats
    with 3 decimals, and anything longer than ``max_chars`` is elided.
    """
    if isinstance(classification, Temporal):
        millis = epoch_millis(value)
        if millis is not None:
            try:
                return format_datetime(to_datetime(millis, classification.time_zone))
            except (OverflowError, ValueError, OSError):
                logger.debug(f"tick {value!r} out of datetime range")
    if isinstance(value, float):
        return f"{value:.3f}"
    text = str(value)
    if len(text) > max_chars:
        return text[: max_chars - 3] + "..."
    return text
