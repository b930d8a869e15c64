"""Value classification for distribution fields.

Each field is classified once into a closed set of variants which decides how
its buckets are labeled:

- ``Temporal``: bucket edges are epoch milliseconds, formatted as dates.
- ``Numeric``: bucket edges are numbers, formatted as a half-open interval.
- ``Categorical``: buckets are raw values with no edges.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

DATE_FIELD = "DateField"
DATE_TIME_FIELD = "DateTimeField"

# Date-only values carry no time of day; shifting them to a display zone
# would move them onto the wrong day.
DATE_TIME_ZONE = "UTC"

INTEGER_TYPES = frozenset({"IntField", "FrameNumberField"})
FLOAT_TYPES = frozenset({"FloatField"})


class ValueKind(str, Enum):
    TEMPORAL = "temporal"
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class NumericKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"


@dataclass(frozen=True)
class Temporal:
    time_zone: str
    kind: ValueKind = ValueKind.TEMPORAL


@dataclass(frozen=True)
class Numeric:
    numeric_kind: NumericKind
    kind: ValueKind = ValueKind.NUMERIC


@dataclass(frozen=True)
class Categorical:
    kind: ValueKind = ValueKind.CATEGORICAL


Classification = Union[Temporal, Numeric, Categorical]


@runtime_checkable
class SchemaLookup(Protocol):
    """Read-only view of the dataset schema."""

    def meets_type(self, path: str, ftype: str) -> bool:
        """True if the field at ``path`` is declared with type ``ftype``."""
        ...


class MappingSchema:
    """SchemaLookup backed by a ``path -> type name`` mapping.

    List fields may be declared as ``"ListField(DateTimeField)"``; the
    element type is what counts for distributions.
    """

    def __init__(self, fields: Mapping[str, str]) -> None:
        self._fields = dict(fields)

    def meets_type(self, path: str, ftype: str) -> bool:
        declared = self._fields.get(path)
        if declared is None:
            return False
        if declared.startswith("ListField(") and declared.endswith(")"):
            declared = declared[len("ListField("):-1]
        return declared == ftype


def _meets_type(schema: SchemaLookup, path: str, ftype: str) -> bool:
    try:
        return bool(schema.meets_type(path, ftype))
    except Exception:
        logger.warning(f"schema lookup failed for {path} ({ftype}), treating as not {ftype}", exc_info=True)
        return False


def classify(
    path: str,
    distribution_type: str,
    schema: SchemaLookup,
    time_zone: str,
) -> Classification:
    """Classify a field for bucket labeling.

    Args:
        path: Field path.
        distribution_type: The distribution's own ``type`` tag. Decides the
            numeric kind; the schema is only consulted for temporal types.
        schema: Schema lookup capability.
        time_zone: Display time zone for date-time fields.

    Returns:
        ``Temporal`` for date and date-time fields (date fields always in UTC),
        ``Numeric`` for integer and float type tags, ``Categorical`` otherwise.
    """
    if _meets_type(schema, path, DATE_TIME_FIELD):
        return Temporal(time_zone=time_zone)
    if _meets_type(schema, path, DATE_FIELD):
        return Temporal(time_zone=DATE_TIME_ZONE)
    if distribution_type in INTEGER_TYPES:
        return Numeric(NumericKind.INTEGER)
    if distribution_type in FLOAT_TYPES:
        return Numeric(NumericKind.FLOAT)
    if distribution_type:
        logger.debug(f"{path}: type {distribution_type!r} handled as categorical")
    return Categorical()
