from __future__ import annotations

from typing import Any, Dict, List, Set

from sheetboard.sheets import CellGrid, cell_text, is_number


Row = Dict[str, Any]


def synthetic_column_name(col: int) -> str:
    return f"Column {col + 1}"


def _unique_name(base: str, seen: Set[str]) -> str:
    if base not in seen:
        return base
    n = 2
    while f"{base} ({n})" in seen:
        n += 1
    return f"{base} ({n})"


def derive_headers(grid: CellGrid, header_row_index: int) -> List[str]:
    """Column names taken from one grid row.

    Empty or repeated names are replaced by ``Column <n>`` (1-based grid
    column). Columns are walked left to right, so the first occurrence of a
    name keeps it.
    """
    if grid.is_empty:
        return []

    headers: List[str] = []
    seen: Set[str] = set()
    for col in range(grid.min_col, grid.max_col + 1):
        value = cell_text(grid.cell(header_row_index, col))
        if not value or value in seen:
            value = _unique_name(synthetic_column_name(col), seen)
        seen.add(value)
        headers.append(value)
    return headers


def read_cell_value(grid: CellGrid, row: int, col: int) -> Any:
    value = grid.cell(row, col)
    if is_number(value):
        return value
    return cell_text(value)


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and value == ""


def extract_rows(grid: CellGrid, header_row_index: int) -> List[Row]:
    """Row records for every non-empty grid row below the header row."""
    if grid.is_empty:
        return []

    headers = derive_headers(grid, header_row_index)
    rows: List[Row] = []
    for r in range(header_row_index + 1, grid.max_row + 1):
        record: Row = {}
        has_data = False
        for offset, header in enumerate(headers):
            value = read_cell_value(grid, r, grid.min_col + offset)
            if not _is_blank(value):
                has_data = True
            record[header] = value
        if has_data:
            rows.append(record)
    return rows
