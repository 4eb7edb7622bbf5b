"""Pointer driven move / resize / drop handling for canvas items.

One pointer exists, so a single controller serves the whole canvas. A gesture
starts on pointer-down, is fed by pointer-move and always ends on pointer-up;
there is no cancel. Hosts that need document-wide listeners during a gesture
pass ``on_capture``/``on_release``; release runs on every return to idle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sheetboard.items import CanvasStore, DashboardItem, Position, Size
from sheetboard.roles import Role, TableBindings
from sheetboard.settings import LayoutSettings


logger = logging.getLogger(__name__)


class GestureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class PointerTarget(str, Enum):
    BODY = "body"
    RESIZE_HANDLE = "resize"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class _Gesture:
    item_id: str
    state: GestureState
    start: Point
    last: Point
    start_size: Size


Hook = Callable[["LayoutController"], None]


class LayoutController:
    def __init__(
        self,
        store: CanvasStore,
        settings: Optional[LayoutSettings] = None,
        *,
        on_capture: Optional[Hook] = None,
        on_release: Optional[Hook] = None,
    ) -> None:
        self.store = store
        self.settings = settings or store.settings
        self._on_capture = on_capture
        self._on_release = on_release
        self._gesture: Optional[_Gesture] = None

    @property
    def state(self) -> GestureState:
        return self._gesture.state if self._gesture else GestureState.IDLE

    @property
    def item_id(self) -> Optional[str]:
        return self._gesture.item_id if self._gesture else None

    # ---------- gestures ----------
    def pointer_down(self, item_id: str, x: float, y: float, target: PointerTarget | str = PointerTarget.BODY) -> GestureState:
        target = PointerTarget(target)
        if self._gesture is not None:
            self._finish()

        item = self.store.get(item_id)
        if item is None:
            return GestureState.IDLE

        self.store.set_active_item(item_id)
        state = GestureState.RESIZING if target == PointerTarget.RESIZE_HANDLE else GestureState.DRAGGING
        start = Point(x, y)
        self._gesture = _Gesture(item_id=item_id, state=state, start=start, last=start, start_size=item.size)
        if self._on_capture is not None:
            self._on_capture(self)
        logger.debug("Gesture %s started on item %s", state.value, item_id)
        return state

    def pointer_move(self, x: float, y: float) -> Optional[DashboardItem]:
        gesture = self._gesture
        if gesture is None:
            return None

        item = self.store.get(gesture.item_id)
        if item is None:
            self._finish()
            return None

        if gesture.state == GestureState.RESIZING:
            # Absolute: measured from the gesture start against the captured size.
            width = max(self.settings.min_width, gesture.start_size.width + (x - gesture.start.x))
            height = max(self.settings.min_height, gesture.start_size.height + (y - gesture.start.y))
            return self.store.update_size(gesture.item_id, Size(width, height))

        # Incremental: measured from the previous sample, re-baselined each move.
        dx = x - gesture.last.x
        dy = y - gesture.last.y
        gesture.last = Point(x, y)
        return self.store.update_position(
            gesture.item_id,
            Position(max(0, item.position.x + dx), max(0, item.position.y + dy)),
        )

    def pointer_up(self) -> None:
        if self._gesture is not None:
            self._finish()

    def _finish(self) -> None:
        gesture, self._gesture = self._gesture, None
        if gesture is not None:
            logger.debug("Gesture %s ended on item %s", gesture.state.value, gesture.item_id)
        if self._on_release is not None:
            self._on_release(self)

    # ---------- drag and drop of column names ----------
    def drop_column(self, item_id: str, role: Role | str | None, column: Optional[str]) -> Optional[DashboardItem]:
        """Bind a dropped column name to a role slot of the active item."""
        if not column:
            return None
        if not self.store.is_active(item_id):
            return None
        item = self.store.get(item_id)
        if item is None:
            return None
        if isinstance(item.bindings, TableBindings):
            return self.store.append_table_column(item_id, column)
        if role is None:
            return None
        return self.store.update_role_binding(item_id, role, column)
