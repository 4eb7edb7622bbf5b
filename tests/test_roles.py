from __future__ import annotations

import pytest

from sheetboard.roles import (
    CHART_LABELS,
    CHART_ROLES,
    AxisBindings,
    CategoryBindings,
    ChartKind,
    Role,
    StackedBindings,
    TableBindings,
    default_title,
    empty_bindings,
    required_roles,
)


def test_every_chart_kind_is_registered():
    assert set(CHART_ROLES) == set(ChartKind)
    assert set(CHART_LABELS) == set(ChartKind)


@pytest.mark.parametrize(
    "kind, roles",
    [
        ("bar", [Role.X_AXIS, Role.Y_AXIS]),
        ("stackedColumn", [Role.X_AXIS, Role.Y_AXIS, Role.SERIES]),
        ("donut", [Role.CATEGORY, Role.VALUES]),
        ("table", [Role.COLUMNS]),
    ],
)
def test_required_roles_are_ordered(kind, roles):
    assert required_roles(kind) == roles


def test_single_column_roles_and_free_table_list():
    assert all(req.max_columns == 1 for req in CHART_ROLES[ChartKind.PIE])
    assert CHART_ROLES[ChartKind.TABLE][0].max_columns is None
    assert CHART_ROLES[ChartKind.BAR][0].label == "X Axis"


def test_default_title_capitalises_first_letter():
    assert default_title("bar") == "Bar Chart"
    assert default_title(ChartKind.STACKED_BAR) == "StackedBar Chart"


def test_empty_bindings_match_kind_family():
    assert isinstance(empty_bindings("line"), AxisBindings)
    assert isinstance(empty_bindings("stackedBar"), StackedBindings)
    assert isinstance(empty_bindings("treemap"), CategoryBindings)
    assert isinstance(empty_bindings("table"), TableBindings)


def test_bind_overwrites_and_reports_completion():
    b = AxisBindings().bind("xAxis", "Region")
    assert b.get(Role.X_AXIS) == "Region"
    assert not b.is_complete()
    b = b.bind(Role.Y_AXIS, "Units").bind(Role.X_AXIS, "Product")
    assert b.as_dict() == {"xAxis": "Product", "yAxis": "Units"}
    assert b.is_complete()


def test_bind_rejects_roles_the_kind_does_not_have():
    with pytest.raises(ValueError):
        CategoryBindings().bind(Role.X_AXIS, "Region")
    with pytest.raises(ValueError):
        TableBindings().bind(Role.SERIES, "Region")
    with pytest.raises(ValueError):
        AxisBindings().bind("nonsense", "Region")


def test_table_bindings_keep_repeats_in_order():
    b = TableBindings().append("A").append("B").bind(Role.COLUMNS, "A")
    assert b.columns == ("A", "B", "A")
    assert b.as_dict() == {"columns": ["A", "B", "A"]}
