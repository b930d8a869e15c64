"""Tests for the Plotly figure dict and tabular export of a FieldHistogram."""

from __future__ import annotations

import pytest

from nicedistributions.distributions_widget.classifier import MappingSchema
from nicedistributions.distributions_widget.figure import (
    chart_width,
    distribution_figure_plotly,
    tick_indices,
)
from nicedistributions.distributions_widget.models import Distribution
from nicedistributions.distributions_widget.presenter import AxisTicks, FieldHistogram, build_field_histogram
from nicedistributions.distributions_widget.summary import FRAME_COLUMNS, field_to_frame, fields_to_tsv
from nicedistributions.distributions_widget.theme import ThemeMode, get_theme_colors

T0 = 1_700_000_000_000


@pytest.fixture
def fields(scalars_payload: dict, schema_fields: dict[str, str]) -> list[FieldHistogram]:
    schema = MappingSchema(schema_fields)
    return [
        build_field_histogram(Distribution.from_dict(d), schema, "UTC")
        for d in scalars_payload["distributions"]
    ]


def test_tick_indices() -> None:
    assert tick_indices(10, AxisTicks.auto()) is None
    assert tick_indices(0, AxisTicks.exact(3)) is None
    assert tick_indices(10, AxisTicks.exact(3)) == [0, 4, 9]
    assert tick_indices(5, AxisTicks.exact(20)) == [0, 1, 2, 3, 4]
    assert tick_indices(7, AxisTicks.exact(1)) == [0]


def test_chart_width_grows_with_buckets() -> None:
    assert chart_width(0) == 50
    assert chart_width(10) == 330


def test_figure_dict_structure(fields: list[FieldHistogram]) -> None:
    uniqueness = fields[0]
    d = distribution_figure_plotly(uniqueness)

    assert isinstance(d, dict)
    assert "data" in d and "layout" in d
    bar = d["data"][0]
    assert bar["type"] == "bar"
    assert list(bar["y"]) == [4, 7]
    assert "Range: [0.000, 0.333)" in bar["hovertext"][0]
    assert "Count: 4" in bar["hovertext"][0]
    assert d["layout"]["width"] == chart_width(2)


def test_exact_ticks_label_selected_buckets(fields: list[FieldHistogram]) -> None:
    uniqueness = fields[0]  # ticks: 5, only two buckets
    xaxis = distribution_figure_plotly(uniqueness)["layout"]["xaxis"]
    assert list(xaxis["tickvals"]) == [0, 1]
    assert list(xaxis["ticktext"]) == ["0", "0.333"]


def test_auto_ticks_label_every_bucket(fields: list[FieldHistogram]) -> None:
    created_at = fields[2]
    xaxis = distribution_figure_plotly(created_at)["layout"]["xaxis"]
    assert list(xaxis["ticktext"]) == ["2023-11-14 22:13:20"]


def test_dark_theme(fields: list[FieldHistogram]) -> None:
    d = distribution_figure_plotly(fields[0], theme="dark")
    bg, _fg = get_theme_colors(ThemeMode.DARK)
    assert d["layout"]["paper_bgcolor"] == bg


def test_field_to_frame(fields: list[FieldHistogram]) -> None:
    df = field_to_frame(fields[1])
    assert list(df.columns) == FRAME_COLUMNS
    assert df["count"].tolist() == [1, 2]
    assert df["lower"].tolist() == [0, 10]
    assert df["upper"].tolist() == [10, 20]

    created = field_to_frame(fields[2])
    assert created.loc[0, "lower"] == T0
    assert created.loc[0, "upper"] == T0 + 5250


def test_fields_to_tsv(fields: list[FieldHistogram]) -> None:
    text = fields_to_tsv(fields[:2])
    assert text.startswith("uniqueness\n")
    assert "key\tlabel\tcount\tlower\tupper" in text
    assert "num_objects\n" in text
