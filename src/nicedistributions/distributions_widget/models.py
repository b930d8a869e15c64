"""Data records for fetched distributions.

A ``Distribution`` is one field's pre-binned histogram as returned by the
backend. Records are frozen once parsed; a new fetch produces new records.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

# Maximum number of buckets requested per field. A field that comes back with
# this many buckets is shown as truncated.
LIMIT: int = 200


@dataclass(frozen=True)
class Bucket:
    """One histogram bar.

    Attributes:
        key: Bucket label as sent by the backend (string, number, bool or None).
        count: Number of records; kept as received so the tooltip can refuse
            non-numeric counts.
        edges: ``(lower, upper)`` for ordinal fields, None for categorical ones.
            Left exactly as received; the range formatter validates arity.
    """
    key: Any
    count: Any
    edges: Optional[tuple[Any, ...]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bucket":
        edges = data.get("edges")
        if isinstance(edges, (list, tuple)):
            edges = tuple(edges)
        elif edges is not None:
            logger.debug(f"bucket edges of type {type(edges).__name__} ignored")
            edges = None
        return cls(key=data.get("key"), count=data.get("count"), edges=edges)


@dataclass(frozen=True)
class Distribution:
    """Histogram of one field.

    Attributes:
        path: Dot-separated field path, unique within a group.
        type: Declared field type tag, e.g. "IntField" or "FloatField".
        data: Buckets in server order.
        ticks: 0 for automatic tick placement, n > 0 for exactly n ticks,
            None when the backend did not send the field.
    """
    path: str
    type: str
    data: tuple[Bucket, ...] = field(default_factory=tuple)
    ticks: Optional[int] = None

    @property
    def has_more(self) -> bool:
        """True if the backend hit the bucket limit for this field."""
        return len(self.data) >= LIMIT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Distribution":
        """Tolerant loader for one entry of the ``distributions`` response.

        Raises:
            ValueError: If ``data`` is not a dict or has no ``path``.
        """
        if not isinstance(data, dict):
            raise ValueError(f"distribution must be an object, got {type(data).__name__}")
        if "path" not in data:
            raise ValueError("distribution is missing 'path'")

        raw_buckets = data.get("data") or []
        if not isinstance(raw_buckets, list):
            raise ValueError(f"'data' of {data['path']} must be a list")
        buckets = tuple(Bucket.from_dict(b) for b in raw_buckets if isinstance(b, dict))

        ticks = data.get("ticks")
        if ticks is not None:
            try:
                ticks = int(ticks)
            except (TypeError, ValueError, OverflowError):
                logger.debug(f"non-integer ticks {ticks!r} for {data['path']}, using automatic ticks")
                ticks = None

        known_keys = {"path", "type", "data", "ticks"}
        for key in data.keys():
            if key not in known_keys:
                logger.debug(f"Unknown key '{key}' in distribution {data['path']}, ignoring")

        return cls(
            path=str(data["path"]),
            type=str(data.get("type") or ""),
            data=buckets,
            ticks=ticks,
        )


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class DistributionContext:
    """Snapshot of the host state a fetch depends on.

    ``view`` and ``filters`` are opaque JSON values passed through to the
    backend untouched. ``refresh_token`` is bumped by the host to force a
    refetch with otherwise identical state.
    """
    dataset: Optional[str]
    view: Any = None
    filters: Any = None
    refresh_token: int = 0

    def cache_key(self, group: str) -> tuple[str, Optional[str], str, str, int]:
        """Hashable key identifying a fetch of ``group`` under this context."""
        return (
            group.lower(),
            self.dataset,
            _canonical(self.view),
            _canonical(self.filters),
            self.refresh_token,
        )
