from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from sheetboard.ingest import Row, derive_headers, extract_rows
from sheetboard.sheets import CellGrid


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TabularModel:
    """Headers and row records of the current sheet at the chosen header row."""

    sheets: Dict[str, CellGrid] = field(default_factory=dict)
    current_sheet: Optional[str] = None
    header_row_index: int = 0
    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @property
    def sheet_names(self) -> List[str]:
        return list(self.sheets.keys())

    @property
    def current_grid(self) -> Optional[CellGrid]:
        if self.current_sheet is None:
            return None
        return self.sheets.get(self.current_sheet)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(self.rows, columns=self.headers)

    def with_sheet(self, sheet_name: str) -> "TabularModel":
        return build_model(self.sheets, sheet_name=sheet_name, header_row_index=self.header_row_index)

    def with_header_row(self, header_row_index: int) -> "TabularModel":
        return build_model(self.sheets, sheet_name=self.current_sheet, header_row_index=header_row_index)


def build_model(
    sheets: Dict[str, CellGrid],
    *,
    sheet_name: Optional[str] = None,
    header_row_index: int = 0,
) -> TabularModel:
    if not sheets:
        return TabularModel()
    if sheet_name is None:
        sheet_name = next(iter(sheets))
    if sheet_name not in sheets:
        raise ValueError(f"Sheet '{sheet_name}' not found.")
    header_row_index = int(header_row_index)
    if header_row_index < 0:
        raise ValueError("Header row index must be zero or greater.")

    grid = sheets[sheet_name]
    headers = derive_headers(grid, header_row_index)
    rows = extract_rows(grid, header_row_index)
    logger.info(
        "Built model for sheet '%s' at header row %d: %d columns, %d rows",
        sheet_name,
        header_row_index,
        len(headers),
        len(rows),
    )
    return TabularModel(
        sheets=sheets,
        current_sheet=sheet_name,
        header_row_index=header_row_index,
        headers=headers,
        rows=rows,
    )
