from __future__ import annotations

import pytest

from sheetboard.items import CanvasStore, Position, Size
from sheetboard.roles import ChartKind, Role, TableBindings
from sheetboard.settings import LayoutSettings


@pytest.fixture
def store() -> CanvasStore:
    return CanvasStore()


def test_add_item_uses_defaults_and_empty_bindings(store):
    item = store.add_item("stackedBar")
    assert item.kind == ChartKind.STACKED_BAR
    assert item.title == "StackedBar Chart"
    assert item.bindings.as_dict() == {}
    assert item.position == Position(0, 0)
    assert item.size == Size(600, 400)
    assert store.items == [item]


def test_add_item_ids_are_unique_and_selection_is_cleared(store):
    first = store.add_item("bar", title="Sales")
    store.set_active_item(first.id)
    second = store.add_item("pie", position=Position(10, 20), size=Size(300, 300))
    assert first.id != second.id
    assert store.active_item_id is None
    assert second.position == Position(10, 20)


def test_only_one_item_is_active(store):
    a = store.add_item("bar")
    b = store.add_item("line")
    store.set_active_item(a.id)
    store.set_active_item(b.id)
    assert store.active_item_id == b.id
    assert store.is_active(b.id)
    assert not store.is_active(a.id)
    store.set_active_item(None)
    assert store.active_item_id is None


def test_role_binding_merges_and_overwrites(store):
    item = store.add_item("bar")
    store.update_role_binding(item.id, Role.X_AXIS, "Region")
    store.update_role_binding(item.id, "yAxis", "Units")
    updated = store.update_role_binding(item.id, Role.X_AXIS, "Product")
    assert updated.bindings.as_dict() == {"xAxis": "Product", "yAxis": "Units"}
    assert store.get(item.id) == updated


def test_binding_a_foreign_role_raises(store):
    item = store.add_item("pie")
    with pytest.raises(ValueError):
        store.update_role_binding(item.id, Role.SERIES, "Region")


def test_table_columns_append_with_repeats(store):
    item = store.add_item("table")
    store.append_table_column(item.id, "A")
    store.append_table_column(item.id, "B")
    store.append_table_column(item.id, "A")
    assert store.get(item.id).columns == ["A", "B", "A"]
    assert store.get(item.id).bindings == TableBindings(columns=("A", "B", "A"))


def test_table_append_on_chart_item_is_ignored(store):
    item = store.add_item("bar")
    assert store.append_table_column(item.id, "A") is None
    assert store.get(item.id) == item


def test_position_and_size_are_replaced(store):
    item = store.add_item("line")
    store.update_position(item.id, Position(40, 50))
    store.update_size(item.id, Size(700, 450))
    store.update_title(item.id, "Trend")
    updated = store.get(item.id)
    assert updated.position == Position(40, 50)
    assert updated.size == Size(700, 450)
    assert updated.title == "Trend"


def test_unknown_ids_are_ignored(store):
    item = store.add_item("bar")
    calls = []
    store.subscribe(lambda s: calls.append(s))
    assert store.update_position("missing", Position(1, 1)) is None
    assert store.update_role_binding("missing", Role.X_AXIS, "A") is None
    store.set_active_item("missing")
    store.remove_item("missing")
    assert store.items == [item]
    assert store.active_item_id is None
    assert calls == []


def test_removing_active_item_clears_selection(store):
    a = store.add_item("bar")
    b = store.add_item("line")
    store.set_active_item(a.id)
    store.remove_item(b.id)
    assert store.active_item_id == a.id
    store.remove_item(a.id)
    assert store.active_item_id is None
    assert store.items == []


def test_subscribers_see_every_mutation_until_unsubscribed(store):
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(len(s.items)))
    item = store.add_item("bar")
    store.update_size(item.id, Size(500, 300))
    unsubscribe()
    store.remove_item(item.id)
    assert seen == [1, 1]


def test_settings_drive_default_geometry():
    store = CanvasStore(LayoutSettings(default_width=320, default_height=240, default_x=5, default_y=6))
    item = store.add_item("donut")
    assert item.size == Size(320, 240)
    assert item.position == Position(5, 6)


def test_item_dict_shape(store):
    item = store.add_item("table", title="Rows")
    item = store.append_table_column(item.id, "A")
    assert item.to_dict() == {
        "id": item.id,
        "kind": "table",
        "title": "Rows",
        "fields": {"columns": ["A"]},
        "columns": ["A"],
        "position": {"x": 0, "y": 0},
        "size": {"width": 600, "height": 400},
    }
