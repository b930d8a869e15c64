"""Host-side explorer state consumed by the distributions widget.

The widget never reads this directly; it asks for a ``DistributionContext``
snapshot each time it loads, so the core stays free of ambient state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from nicedistributions.distributions_widget.models import DistributionContext
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

OnStateChange = Callable[["ExplorerState"], None]


@dataclass
class ExplorerState:
    """Current dataset, view and filters of the hosting app.

    Attributes:
        dataset: Dataset name.
        view: Opaque view descriptor (e.g. a list of view stages).
        filters: Opaque active filter descriptor.
        refresh_token: Bumped by ``bump_refresh()`` after external mutations.
    """
    dataset: Optional[str] = None
    view: Any = field(default_factory=list)
    filters: Any = field(default_factory=dict)
    refresh_token: int = 0
    _listeners: list[OnStateChange] = field(default_factory=list, repr=False, compare=False)

    def snapshot(self) -> DistributionContext:
        return DistributionContext(
            dataset=self.dataset,
            view=self.view,
            filters=self.filters,
            refresh_token=self.refresh_token,
        )

    def on_change(self, callback: OnStateChange) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("explorer state listener failed")

    def set_dataset(self, dataset: Optional[str]) -> None:
        self.dataset = dataset
        self._notify()

    def set_view(self, view: Any) -> None:
        self.view = view
        self._notify()

    def set_filters(self, filters: Any) -> None:
        self.filters = filters
        self._notify()

    def bump_refresh(self) -> None:
        """Force the next load to refetch even if nothing else changed."""
        self.refresh_token += 1
        logger.debug(f"refresh token bumped to {self.refresh_token}")
        self._notify()
