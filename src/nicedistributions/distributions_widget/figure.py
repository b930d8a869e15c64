"""Plotly bar chart for one FieldHistogram.

Returns a Plotly figure dict (never go.Figure) for ui.plotly / update_figure.
Plotly cannot call back into Python on hover, so tooltip text is computed per
bar up front.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
import plotly.graph_objects as go

from nicedistributions.distributions_widget.presenter import AxisTicks, FieldHistogram
from nicedistributions.distributions_widget.theme import (
    BAR_COLOR,
    TOOLTIP_BACKGROUND,
    ThemeMode,
    get_theme_colors,
    get_theme_template,
    resolve_theme,
)

BAR_WIDTH_PX = 24
BAR_GAP_PX = 4
AXIS_MARGIN_PX = 50
TICK_ANGLE = -80


def chart_width(n_buckets: int) -> int:
    """Pixel width that gives every bar the same fixed width."""
    return n_buckets * (BAR_WIDTH_PX + BAR_GAP_PX) + AXIS_MARGIN_PX


def tick_indices(n_buckets: int, ticks: AxisTicks) -> Optional[list[int]]:
    """Bucket indices that get a tick label, or None for automatic placement.

    Args:
        n_buckets: Number of bars.
        ticks: Axis tick setting of the field.

    ``AxisTicks.exact(n)`` spreads n ticks evenly from the first to the last
    bucket.
    """
    if ticks.is_auto or n_buckets == 0:
        return None
    n = min(ticks.count, n_buckets)
    if n == 1:
        return [0]
    return np.unique(np.round(np.linspace(0, n_buckets - 1, n)).astype(int)).tolist()


def _hover_html(text: Optional[str]) -> str:
    if text is None:
        return ""
    title, _, rest = text.partition("\n")
    return f"<b>{title}</b><br>{rest}"


def distribution_figure_plotly(
    field: FieldHistogram,
    theme: Union[str, ThemeMode, None] = None,
    height: int = 300,
) -> dict:
    """Create the bar chart of one field's buckets.

    Args:
        field: Chart model from the presenter.
        theme: Theme mode (DARK or LIGHT). Defaults to LIGHT.
        height: Figure height in pixels.

    Returns:
        Plotly figure dict ready for ui.plotly / update_figure.
    """
    theme_mode = resolve_theme(theme)
    bg_color, fg_color = get_theme_colors(theme_mode)

    # positional x so duplicate or non-string keys still get their own bar
    x = list(range(len(field.buckets)))
    counts = [b.count for b in field.buckets]
    hover = [
        _hover_html(field.tooltip({"key": b.key, "count": b.count}))
        for b in field.buckets
    ]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=x,
            y=counts,
            marker_color=BAR_COLOR,
            hovertext=hover,
            hoverinfo="text",
            width=BAR_WIDTH_PX / (BAR_WIDTH_PX + BAR_GAP_PX),
        )
    )

    # automatic placement labels every bar
    indices = tick_indices(len(field.buckets), field.axis_ticks)
    if indices is None:
        indices = x
    xaxis = dict(
        tickmode="array",
        tickvals=indices,
        ticktext=[field.buckets[i].label for i in indices],
        tickangle=TICK_ANGLE,
        color=fg_color,
        showgrid=False,
        zeroline=False,
    )

    fig.update_layout(
        template=get_theme_template(theme_mode),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        width=chart_width(len(field.buckets)),
        height=height,
        xaxis=xaxis,
        yaxis=dict(title="Count", color=fg_color, zeroline=False),
        hoverlabel=dict(bgcolor=TOOLTIP_BACKGROUND, bordercolor=BAR_COLOR, font=dict(color="#ffffff")),
        margin=dict(l=0, r=5, t=0, b=5),
        showlegend=False,
    )

    return fig.to_dict()
