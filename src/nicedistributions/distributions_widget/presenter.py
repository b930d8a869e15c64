"""Turn fetched distributions into chart-ready models.

``DistributionPresenter`` owns the load state of one group:

    LOADING -> READY | EMPTY | ERRORED

Every ``load`` call restarts at LOADING. Results are accepted only for the
most recent ``load``; an older request finishing late is dropped.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from nicedistributions.distributions_widget.classifier import (
    Classification,
    SchemaLookup,
    Temporal,
    classify,
)
from nicedistributions.distributions_widget.errors import FetchFailure
from nicedistributions.distributions_widget.fetcher import DistributionFetcher
from nicedistributions.distributions_widget.models import Distribution, DistributionContext
from nicedistributions.distributions_widget.prettify import Prettifier, prettify
from nicedistributions.distributions_widget.range_format import (
    format_bucket,
    format_tick,
    value_label,
)
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)


class PresenterState(Enum):
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERRORED = "errored"


@dataclass(frozen=True)
class AxisTicks:
    """Tick placement on the bucket axis: automatic, or exactly ``count`` ticks."""
    count: Optional[int] = None

    @classmethod
    def auto(cls) -> "AxisTicks":
        return cls(None)

    @classmethod
    def exact(cls, count: int) -> "AxisTicks":
        return cls(int(count))

    @property
    def is_auto(self) -> bool:
        return self.count is None

    @classmethod
    def from_ticks(cls, ticks: Optional[int]) -> "AxisTicks":
        """``0`` or a missing value means automatic placement."""
        if ticks is None or ticks <= 0:
            return cls.auto()
        return cls.exact(ticks)


@dataclass(frozen=True)
class ChartBucket:
    key: Any
    label: str
    count: Any


@dataclass(frozen=True)
class FieldHistogram:
    """Everything the chart needs for one field.

    Attributes:
        path: Field path.
        title: Path, suffixed with ``(first N)`` when the bucket limit was hit.
        classification: How bucket keys and edges are interpreted.
        buckets: Bars in fetch order. ``key`` is the display key (prettified
            unless temporal), ``label`` the axis tick text.
        axis_ticks: Tick placement for the bucket axis.
        edges_by_key: Display key -> bucket edges (None for categorical).
    """
    path: str
    title: str
    classification: Classification
    buckets: tuple[ChartBucket, ...]
    axis_ticks: AxisTicks
    edges_by_key: Mapping[Any, Any] = field(default_factory=dict)
    prettifier: Prettifier = prettify

    def tooltip_title(self, key: Any) -> str:
        """``Range: ...`` or ``Value: ...`` for a hovered bucket key."""
        try:
            edges = self.edges_by_key.get(key)
        except TypeError:
            edges = None
        if edges is None:
            return value_label(key)
        return format_bucket(key, edges, self.classification, self.prettifier)

    def tooltip(self, point: Optional[Mapping[str, Any]]) -> Optional[str]:
        """Tooltip text for a hovered point ``{"key": ..., "count": ...}``.

        Returns None, hiding the tooltip, when the point has no numeric count.
        A key that is not a known bucket still gets a ``Value:`` title.
        """
        count = point.get("count") if point else None
        if isinstance(count, bool) or not isinstance(count, numbers.Number):
            return None
        return f"{self.tooltip_title(point.get('key'))}\nCount: {count}"


def build_field_histogram(
    distribution: Distribution,
    schema: SchemaLookup,
    time_zone: str,
    prettifier: Prettifier = prettify,
) -> FieldHistogram:
    """Classify a distribution once and derive its chart model."""
    classification = classify(distribution.path, distribution.type, schema, time_zone)
    temporal = isinstance(classification, Temporal)

    buckets: list[ChartBucket] = []
    edges_by_key: dict[Any, Any] = {}
    for bucket in distribution.data:
        key = bucket.key if temporal else prettifier(bucket.key)
        try:
            edges_by_key[key] = bucket.edges
        except TypeError:
            # unhashable raw temporal key; tooltip falls back to Value:
            logger.debug(f"{distribution.path}: unhashable key {key!r}")
        buckets.append(ChartBucket(key=key, label=format_tick(key, classification), count=bucket.count))

    title = distribution.path
    if distribution.has_more:
        title = f"{title} (first {len(distribution.data)})"

    return FieldHistogram(
        path=distribution.path,
        title=title,
        classification=classification,
        buckets=tuple(buckets),
        axis_ticks=AxisTicks.from_ticks(distribution.ticks),
        edges_by_key=edges_by_key,
        prettifier=prettifier,
    )


@dataclass(frozen=True)
class PresenterResult:
    group: str
    state: PresenterState
    fields: tuple[FieldHistogram, ...] = ()

    @property
    def empty_text(self) -> str:
        return f"No {self.group.lower()}"


class DistributionPresenter:
    """Load a group's distributions and expose them as FieldHistograms.

    Args:
        fetcher: Source of distributions.
        schema: Schema lookup used to detect date and date-time fields.
        time_zone: Display time zone for date-time fields.
        prettifier: Text collaborator for categorical keys.
    """

    def __init__(
        self,
        fetcher: DistributionFetcher,
        *,
        schema: SchemaLookup,
        time_zone: str = "UTC",
        prettifier: Prettifier = prettify,
    ) -> None:
        self._fetcher = fetcher
        self._schema = schema
        self.time_zone = time_zone
        self._prettifier = prettifier

        self._generation = 0
        self.state = PresenterState.LOADING
        self.group: Optional[str] = None
        self.result: Optional[PresenterResult] = None
        self.error: Optional[FetchFailure] = None

    async def load(self, group: str, context: DistributionContext) -> Optional[PresenterResult]:
        """Fetch ``group`` and build its chart models.

        Returns:
            The result, or None if another ``load`` started while this one
            was waiting (the newer call owns the state).

        Raises:
            FetchFailure: The fetch failed; state is ERRORED.
        """
        self._generation += 1
        generation = self._generation
        self.group = group
        self.state = PresenterState.LOADING
        self.result = None
        self.error = None

        try:
            distributions = await self._fetcher.fetch_group(group, context)
        except FetchFailure as e:
            if generation != self._generation:
                logger.debug(f"ignoring failure of superseded load for '{group}'")
                return None
            self.state = PresenterState.ERRORED
            self.error = e
            raise

        if generation != self._generation:
            logger.debug(f"ignoring superseded result for '{group}'")
            return None

        if not distributions:
            result = PresenterResult(group=group, state=PresenterState.EMPTY)
        else:
            fields = tuple(
                build_field_histogram(d, self._schema, self.time_zone, self._prettifier)
                for d in distributions
            )
            result = PresenterResult(group=group, state=PresenterState.READY, fields=fields)

        self.state = result.state
        self.result = result
        return result
