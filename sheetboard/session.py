from __future__ import annotations

from typing import Any, Dict, Optional

from sheetboard.items import CanvasStore
from sheetboard.layout import LayoutController
from sheetboard.model import TabularModel, build_model
from sheetboard.settings import LayoutSettings
from sheetboard.sheets import Source, header_row_choices, preview_grid, read_workbook
from sheetboard.transform import TransformResult, transform


class DashboardSession:
    """Owns the tabular model, the canvas items and the pointer controller.

    This is the only writer of that state; the API and the UI are handed a
    session instead of reaching for module globals.
    """

    def __init__(self, settings: Optional[LayoutSettings] = None) -> None:
        self.settings = settings or LayoutSettings()
        self.model: TabularModel = TabularModel()
        self.canvas = CanvasStore(self.settings)
        self.layout = LayoutController(self.canvas, self.settings)

    @property
    def has_workbook(self) -> bool:
        return bool(self.model.sheets)

    def load_file(self, source: Source, filename: Optional[str] = None) -> TabularModel:
        # read_workbook raises before anything is assigned, so a failed load keeps the old model.
        sheets = read_workbook(source, filename=filename)
        self.model = build_model(sheets, header_row_index=0)
        return self.model

    def select_sheet(self, sheet_name: str) -> TabularModel:
        self.model = self.model.with_sheet(sheet_name)
        return self.model

    def select_header_row(self, header_row_index: int) -> TabularModel:
        if self.model.current_sheet is None:
            return self.model
        self.model = self.model.with_header_row(header_row_index)
        return self.model

    def chart_data(self, item_id: str) -> TransformResult:
        item = self.canvas.get(item_id)
        if item is None or not self.has_workbook:
            return None
        return transform(self.model, item.kind, item.bindings)

    def header_preview(self) -> Dict[str, Any]:
        grid = self.model.current_grid
        if grid is None:
            return {"rows": [], "choices": []}
        return {
            "rows": preview_grid(grid, self.settings.preview_rows, self.settings.preview_columns),
            "choices": header_row_choices(grid, self.settings.header_row_choices),
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "sheets": self.model.sheet_names,
            "current_sheet": self.model.current_sheet,
            "header_row_index": self.model.header_row_index,
            "headers": list(self.model.headers),
            "row_count": len(self.model.rows),
        }
