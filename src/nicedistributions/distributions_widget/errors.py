"""Exceptions raised by the distributions widget."""

from __future__ import annotations


class DistributionsError(Exception):
    """Base class for nicedistributions errors."""


class FetchFailure(DistributionsError):
    """Fetching the distributions of a group failed.

    Raised for transport errors, non-2xx responses and undecodable or
    malformed payloads. The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, group: str, message: str) -> None:
        super().__init__(f"Failed to fetch distributions for '{group}': {message}")
        self.group = group
