from __future__ import annotations

import pytest

from sheetboard.charts import COLOR_PALETTE, build_chart, to_vega_spec
from sheetboard.roles import ChartKind
from sheetboard.transform import ChartData, SeriesData, TableData

LABELS = ChartData(labels=["North", "South", "East"], values=["10", "4", "n/a"])
STACKED = ChartData(
    labels=["Q1", "Q2"],
    values=[],
    series=[SeriesData(name="A", data=["1", "2"]), SeriesData(name="B", data=["3", ""])],
)


@pytest.mark.parametrize("kind", ["bar", "column", "line", "pie", "donut"])
def test_label_value_kinds_produce_a_mark(kind):
    spec = to_vega_spec(build_chart(kind, LABELS, title="Sales", width=500, height=300))
    assert "mark" in spec
    assert spec["width"] == 500
    assert spec["height"] == 300
    assert spec["title"] == "Sales"


def test_bar_is_vertical_and_column_is_horizontal():
    bar = to_vega_spec(build_chart(ChartKind.BAR, LABELS))
    column = to_vega_spec(build_chart(ChartKind.COLUMN, LABELS))
    assert bar["encoding"]["x"]["field"] == "label"
    assert column["encoding"]["y"]["field"] == "label"


def test_donut_has_a_hole_and_pie_does_not():
    pie = to_vega_spec(build_chart("pie", LABELS, width=400, height=400))
    donut = to_vega_spec(build_chart("donut", LABELS, width=400, height=400))
    assert pie["mark"]["innerRadius"] == 0
    assert donut["mark"]["innerRadius"] == 100


@pytest.mark.parametrize("kind", ["stackedBar", "stackedColumn"])
def test_stacked_kinds_color_by_series(kind):
    spec = to_vega_spec(build_chart(kind, STACKED))
    assert spec["encoding"]["color"]["field"] == "series"
    assert spec["encoding"]["color"]["scale"]["range"] == COLOR_PALETTE


def test_treemap_is_layered():
    spec = to_vega_spec(build_chart("treemap", LABELS))
    assert len(spec["layer"]) == 2


def test_tables_and_missing_data_have_no_chart():
    assert build_chart("table", TableData(columns=["A"], rows=[["x"]])) is None
    assert build_chart("bar", None) is None
