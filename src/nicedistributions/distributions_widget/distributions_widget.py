"""Distributions widget: one bar chart per field of a group.

Self-contained NiceGUI widget. Loads through a DistributionPresenter and
renders Plotly dicts only for ui.plotly (never go.Figure).
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from nicegui import background_tasks, ui

from nicedistributions.distributions_widget.errors import FetchFailure
from nicedistributions.distributions_widget.explorer_state import ExplorerState
from nicedistributions.distributions_widget.figure import distribution_figure_plotly
from nicedistributions.distributions_widget.models import DistributionContext
from nicedistributions.distributions_widget.presenter import (
    DistributionPresenter,
    FieldHistogram,
    PresenterResult,
    PresenterState,
)
from nicedistributions.distributions_widget.summary import fields_to_tsv
from nicedistributions.distributions_widget.theme import ThemeMode, resolve_theme
from nicedistributions.utils.clipboard import copy_to_clipboard
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

ContextProvider = Callable[[], DistributionContext]


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Call a UI function, ignoring only 'client deleted' RuntimeErrors."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


class DistributionsWidget:
    """Histograms of every field in a group.

    Shows a spinner while loading, ``No <group>`` when the group has no
    fields, and otherwise a titled, horizontally scrollable bar chart per
    field with a button copying its buckets as TSV.

    Fetch errors are not displayed here: ``refresh()`` re-raises them for
    the hosting page to handle.
    """

    def __init__(
        self,
        *,
        group: str,
        presenter: DistributionPresenter,
        context_provider: ContextProvider,
        theme: Union[str, ThemeMode] = "light",
        chart_height: int = 300,
    ) -> None:
        self._group = group
        self._presenter = presenter
        self._context_provider = context_provider
        self._theme = resolve_theme(theme)
        self._chart_height = chart_height

        self._container: Optional[ui.column] = None
        self._result: Optional[PresenterResult] = None

    @property
    def state(self) -> PresenterState:
        return self._presenter.state

    def render(self) -> None:
        """Create the widget's container inside the current NiceGUI slot."""
        self._container = ui.column().classes("w-full h-full overflow-y-auto gap-4")
        self._result = None

    async def refresh(self) -> Optional[PresenterResult]:
        """Load the group for the current context and redraw.

        Returns:
            The presenter result, or None if a newer refresh superseded this one.

        Raises:
            FetchFailure: Propagated from the presenter.
        """
        if self._container is None:
            raise RuntimeError("DistributionsWidget.render() must be called before refresh()")

        _safe_call(self._show_loading)
        try:
            result = await self._presenter.load(self._group, self._context_provider())
        except FetchFailure:
            _safe_call(self._container.clear)
            raise

        if result is None:
            return None
        self._result = result
        _safe_call(self._show_result, result)
        return result

    def watch(self, state: ExplorerState) -> None:
        """Refresh in the background whenever ``state`` changes."""
        state.on_change(lambda _state: background_tasks.create(self._refresh_in_background()))

    async def _refresh_in_background(self) -> None:
        try:
            await self.refresh()
        except FetchFailure as e:
            logger.error(str(e))
            _safe_call(ui.notify, str(e), type="negative")

    def set_theme(self, theme: Union[str, ThemeMode]) -> None:
        """Redraw the current charts with another theme."""
        self._theme = resolve_theme(theme)
        if self._result is not None:
            _safe_call(self._show_result, self._result)

    def _show_loading(self) -> None:
        self._container.clear()
        with self._container:
            ui.spinner(size="lg")

    def _show_result(self, result: PresenterResult) -> None:
        self._container.clear()
        with self._container:
            if result.state is PresenterState.EMPTY:
                ui.label(result.empty_text).classes("text-gray-500")
                return
            for field in result.fields:
                self._render_field(field)

    def _render_field(self, field: FieldHistogram) -> None:
        with ui.column().classes("w-full overflow-x-auto gap-1"):
            with ui.row().classes("items-center gap-2"):
                ui.label(field.title).classes("font-bold")
                ui.button(
                    "Copy",
                    on_click=lambda f=field: copy_to_clipboard(fields_to_tsv([f])),
                ).props("flat dense size=sm")
            ui.plotly(
                distribution_figure_plotly(field, theme=self._theme, height=self._chart_height)
            )
