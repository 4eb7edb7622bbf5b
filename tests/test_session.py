from __future__ import annotations

import pytest

from sheetboard.items import Size
from sheetboard.roles import Role
from sheetboard.session import DashboardSession
from sheetboard.sheets import IngestionError
from sheetboard.transform import ChartData, TableData


@pytest.fixture
def session(workbook_bytes) -> DashboardSession:
    s = DashboardSession()
    s.load_file(workbook_bytes, filename="book.xlsx")
    return s


def test_load_selects_first_sheet_and_first_row(session):
    assert session.has_workbook
    assert session.summary() == {
        "sheets": ["Sales", "Notes"],
        "current_sheet": "Sales",
        "header_row_index": 0,
        "headers": ["Region", "Product", "Units"],
        "row_count": 3,
    }


def test_sheet_and_header_row_selection(session):
    session.select_sheet("Notes")
    assert session.model.headers == ["Title row", "Column 2"]
    session.select_header_row(1)
    assert session.model.headers == ["Key", "Value"]
    assert session.model.rows == [{"Key": "a", "Value": 1}]


def test_unknown_sheet_raises(session):
    with pytest.raises(ValueError):
        session.select_sheet("Missing")
    assert session.model.current_sheet == "Sales"


def test_failed_load_keeps_previous_model(session):
    before = session.model
    with pytest.raises(IngestionError):
        session.load_file(b"definitely not a workbook", filename="broken.xlsx")
    assert session.model is before


def test_header_row_without_workbook_is_ignored():
    s = DashboardSession()
    s.select_header_row(3)
    assert s.model.header_row_index == 0
    assert not s.has_workbook
    assert s.header_preview() == {"rows": [], "choices": []}


def test_chart_data_follows_bindings_and_model(session):
    item = session.canvas.add_item("bar")
    assert session.chart_data(item.id) is None

    session.canvas.set_active_item(item.id)
    session.layout.drop_column(item.id, Role.X_AXIS, "Region")
    session.layout.drop_column(item.id, Role.Y_AXIS, "Units")
    assert session.chart_data(item.id) == ChartData(labels=["North", "South"], values=["10", "4"])

    session.select_sheet("Notes")
    assert session.chart_data(item.id) is None


def test_table_chart_data(session):
    item = session.canvas.add_item("table")
    session.canvas.append_table_column(item.id, "Units")
    session.canvas.append_table_column(item.id, "Region")
    data = session.chart_data(item.id)
    assert isinstance(data, TableData)
    assert data.columns == ["Units", "Region"]
    assert data.rows[0] == [10, "North"]


def test_chart_data_for_unknown_item(session):
    assert session.chart_data("missing") is None


def test_header_preview_lists_choices(session):
    preview = session.header_preview()
    assert preview["rows"][0] == ["Region", "Product", "Units"]
    assert [c["row"] for c in preview["choices"]] == [0, 1, 2, 3]
    assert preview["choices"][1]["sample"] == ["North", "Widget", "10"]


def test_session_settings_reach_canvas(workbook_bytes):
    from sheetboard.settings import LayoutSettings

    s = DashboardSession(LayoutSettings(default_width=400, default_height=300))
    item = s.canvas.add_item("line")
    assert item.size == Size(400, 300)
