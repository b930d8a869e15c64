"""
nicedistributions: NiceGUI widget for per-field value distributions.

This package provides:
- DistributionsWidget: one Plotly bar chart per field of a group, with
  range-aware tooltips for numeric, date and date-time buckets
- DistributionFetcher / DistributionPresenter: the fetch, cache and
  labeling logic behind the widget, usable without a UI
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from nicedistributions.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from nicedistributions.utils.logging import configure_logging, get_logger

from nicedistributions.distributions_widget import (
    DistributionFetcher,
    DistributionPresenter,
    DistributionsWidget,
    ExplorerState,
    FetchFailure,
)

# NullHandler so nothing reaches the root logger until an application or
# demo calls configure_logging().
_logger = logging.getLogger("nicedistributions")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DistributionFetcher",
    "DistributionPresenter",
    "DistributionsWidget",
    "ExplorerState",
    "FetchFailure",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
