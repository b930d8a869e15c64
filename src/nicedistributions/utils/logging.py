"""
Logging utilities for the nicedistributions library.

Library code only ever asks for a logger:
    ```python
    from nicedistributions.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("cache hit for %s", group)
    ```

Standalone demos and scripts opt in to console output:
    ```python
    from nicedistributions.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When the widget is embedded in an application that has configured logging,
records flow to that application's handlers and nothing here is called.
nicedistributions never writes log files.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "nicedistributions"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Attach a stderr handler to the nicedistributions logger (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to the
        NICEDISTRIBUTIONS_LOG_LEVEL env var, or "INFO" if unset.
    fmt:
        Log message format.
    datefmt:
        Date format for %(asctime)s.
    force:
        If True, drop existing handlers first. If False, a second call is a
        no-op once a stderr handler is attached.
    """
    if level is None:
        level = os.environ.get("NICEDISTRIBUTIONS_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return logging.getLogger(name), or the package logger when name is None."""
    return logging.getLogger(name or LOGGER_NAME)
