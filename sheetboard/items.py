from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from sheetboard.roles import Bindings, ChartKind, Role, TableBindings, default_title, empty_bindings
from sheetboard.settings import LayoutSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0


@dataclass(frozen=True)
class Size:
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class DashboardItem:
    id: str
    kind: ChartKind
    title: str
    bindings: Bindings
    position: Position = field(default_factory=Position)
    size: Size = field(default_factory=Size)

    @property
    def columns(self) -> List[str]:
        if isinstance(self.bindings, TableBindings):
            return list(self.bindings.columns)
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "fields": self.bindings.as_dict(),
            "columns": self.columns,
            "position": {"x": self.position.x, "y": self.position.y},
            "size": {"width": self.size.width, "height": self.size.height},
        }


Listener = Callable[["CanvasStore"], None]


class CanvasStore:
    """Placed dashboard items and the single active selection.

    Every mutation replaces the touched item value and notifies subscribers
    before returning. Operations on an unknown id do nothing.
    """

    def __init__(self, settings: Optional[LayoutSettings] = None) -> None:
        self.settings = settings or LayoutSettings()
        self._items: List[DashboardItem] = []
        self._active_item_id: Optional[str] = None
        self._listeners: List[Listener] = []

    # ---------- observers ----------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ---------- lookups ----------
    @property
    def items(self) -> List[DashboardItem]:
        return list(self._items)

    @property
    def active_item_id(self) -> Optional[str]:
        return self._active_item_id

    def get(self, item_id: str) -> Optional[DashboardItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def is_active(self, item_id: str) -> bool:
        return self._active_item_id is not None and self._active_item_id == item_id

    # ---------- mutations ----------
    def add_item(
        self,
        kind: ChartKind | str,
        title: Optional[str] = None,
        position: Optional[Position] = None,
        size: Optional[Size] = None,
    ) -> DashboardItem:
        kind = ChartKind(kind)
        item = DashboardItem(
            id=uuid.uuid4().hex,
            kind=kind,
            title=title if title is not None else default_title(kind),
            bindings=empty_bindings(kind),
            position=position or Position(self.settings.default_x, self.settings.default_y),
            size=size or Size(self.settings.default_width, self.settings.default_height),
        )
        self._items.append(item)
        self._active_item_id = None
        logger.debug("Added %s item %s", kind.value, item.id)
        self._notify()
        return item

    def _update(self, item_id: str, **changes: Any) -> Optional[DashboardItem]:
        for i, item in enumerate(self._items):
            if item.id == item_id:
                updated = replace(item, **changes)
                self._items[i] = updated
                self._notify()
                return updated
        logger.debug("Ignoring update for unknown item %s", item_id)
        return None

    def update_role_binding(self, item_id: str, role: Role | str, column: str) -> Optional[DashboardItem]:
        item = self.get(item_id)
        if item is None:
            return None
        return self._update(item_id, bindings=item.bindings.bind(role, column))

    def append_table_column(self, item_id: str, column: str) -> Optional[DashboardItem]:
        item = self.get(item_id)
        if item is None or not isinstance(item.bindings, TableBindings):
            return None
        return self._update(item_id, bindings=item.bindings.append(column))

    def update_position(self, item_id: str, position: Position) -> Optional[DashboardItem]:
        return self._update(item_id, position=position)

    def update_size(self, item_id: str, size: Size) -> Optional[DashboardItem]:
        return self._update(item_id, size=size)

    def update_title(self, item_id: str, title: str) -> Optional[DashboardItem]:
        return self._update(item_id, title=title)

    def set_active_item(self, item_id: Optional[str]) -> None:
        if item_id is not None and self.get(item_id) is None:
            return
        if item_id == self._active_item_id:
            return
        self._active_item_id = item_id
        self._notify()

    def remove_item(self, item_id: str) -> None:
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        if self._active_item_id == item_id:
            self._active_item_id = None
        logger.debug("Removed item %s", item_id)
        self._notify()
