"""Per-field distribution histograms for dataset exploration."""

from nicedistributions.distributions_widget.classifier import (
    DATE_FIELD,
    DATE_TIME_FIELD,
    Categorical,
    Classification,
    MappingSchema,
    Numeric,
    NumericKind,
    SchemaLookup,
    Temporal,
    classify,
)
from nicedistributions.distributions_widget.distributions_config import (
    DistributionsConfig,
    DistributionsConfigData,
)
from nicedistributions.distributions_widget.distributions_widget import DistributionsWidget
from nicedistributions.distributions_widget.errors import DistributionsError, FetchFailure
from nicedistributions.distributions_widget.explorer_state import ExplorerState
from nicedistributions.distributions_widget.fetcher import DistributionFetcher
from nicedistributions.distributions_widget.models import (
    LIMIT,
    Bucket,
    Distribution,
    DistributionContext,
)
from nicedistributions.distributions_widget.presenter import (
    AxisTicks,
    DistributionPresenter,
    FieldHistogram,
    PresenterResult,
    PresenterState,
)
from nicedistributions.distributions_widget.range_format import format_bucket, format_tick

__all__ = [
    "AxisTicks",
    "Bucket",
    "Categorical",
    "Classification",
    "DATE_FIELD",
    "DATE_TIME_FIELD",
    "Distribution",
    "DistributionContext",
    "DistributionFetcher",
    "DistributionPresenter",
    "DistributionsConfig",
    "DistributionsConfigData",
    "DistributionsError",
    "DistributionsWidget",
    "ExplorerState",
    "FetchFailure",
    "FieldHistogram",
    "LIMIT",
    "MappingSchema",
    "Numeric",
    "NumericKind",
    "PresenterResult",
    "PresenterState",
    "SchemaLookup",
    "Temporal",
    "classify",
    "format_bucket",
    "format_tick",
]
