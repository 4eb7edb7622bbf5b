from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


MIN_ITEM_WIDTH = 300
MIN_ITEM_HEIGHT = 200
DEFAULT_ITEM_WIDTH = 600
DEFAULT_ITEM_HEIGHT = 400

PREVIEW_ROWS = 20
PREVIEW_COLUMNS = 10
HEADER_ROW_CHOICES = 10


@dataclass(frozen=True)
class LayoutSettings:
    min_width: int = MIN_ITEM_WIDTH
    min_height: int = MIN_ITEM_HEIGHT
    default_width: int = DEFAULT_ITEM_WIDTH
    default_height: int = DEFAULT_ITEM_HEIGHT
    default_x: int = 0
    default_y: int = 0
    preview_rows: int = PREVIEW_ROWS
    preview_columns: int = PREVIEW_COLUMNS
    header_row_choices: int = HEADER_ROW_CHOICES


def _as_int(value: object, default: int, *, minimum: int = 0) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        return default
    return max(minimum, out)


def normalize_settings(raw: Optional[dict] = None) -> LayoutSettings:
    raw = raw or {}

    min_width = _as_int(raw.get("min_width", MIN_ITEM_WIDTH), MIN_ITEM_WIDTH, minimum=1)
    min_height = _as_int(raw.get("min_height", MIN_ITEM_HEIGHT), MIN_ITEM_HEIGHT, minimum=1)

    # Defaults never start below the resize floor.
    default_width = max(min_width, _as_int(raw.get("default_width", DEFAULT_ITEM_WIDTH), DEFAULT_ITEM_WIDTH))
    default_height = max(min_height, _as_int(raw.get("default_height", DEFAULT_ITEM_HEIGHT), DEFAULT_ITEM_HEIGHT))

    return LayoutSettings(
        min_width=min_width,
        min_height=min_height,
        default_width=default_width,
        default_height=default_height,
        default_x=_as_int(raw.get("default_x", 0), 0),
        default_y=_as_int(raw.get("default_y", 0), 0),
        preview_rows=_as_int(raw.get("preview_rows", PREVIEW_ROWS), PREVIEW_ROWS, minimum=1),
        preview_columns=_as_int(raw.get("preview_columns", PREVIEW_COLUMNS), PREVIEW_COLUMNS, minimum=1),
        header_row_choices=_as_int(raw.get("header_row_choices", HEADER_ROW_CHOICES), HEADER_ROW_CHOICES, minimum=1),
    )
