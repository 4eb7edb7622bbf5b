from __future__ import annotations

import csv
import io
import logging
import numbers
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

import pandas as pd


logger = logging.getLogger(__name__)

CSV_ENCODINGS = ["utf-8-sig", "cp1252", "latin-1"]
CSV_SUFFIXES = {".csv", ".txt"}

Source = Union[bytes, str, Path, BinaryIO]


class IngestionError(ValueError):
    """Raised when a file cannot be turned into at least one sheet."""


@dataclass(frozen=True)
class CellGrid:
    """Sparse (row, col) -> scalar cell storage for one sheet.

    Addresses are zero-based. ``max_row``/``max_col`` are -1 for an empty sheet.
    """

    cells: Dict[Tuple[int, int], Any] = field(default_factory=dict)
    min_row: int = 0
    min_col: int = 0
    max_row: int = -1
    max_col: int = -1

    @property
    def is_empty(self) -> bool:
        return self.max_row < self.min_row or self.max_col < self.min_col

    @property
    def n_rows(self) -> int:
        return max(0, self.max_row + 1)

    @property
    def n_cols(self) -> int:
        return max(0, self.max_col + 1)

    def cell(self, row: int, col: int) -> Any:
        return self.cells.get((row, col))

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "CellGrid":
        """Build a grid from a header-less frame, dropping missing cells."""
        cells: Dict[Tuple[int, int], Any] = {}
        for r, row in enumerate(df.itertuples(index=False, name=None)):
            for c, value in enumerate(row):
                if _is_missing(value):
                    continue
                cells[(r, c)] = value
        if df.empty:
            return cls(cells=cells)
        return cls(cells=cells, max_row=len(df.index) - 1, max_col=len(df.columns) - 1)

    @classmethod
    def from_rows(cls, rows: List[List[Any]]) -> "CellGrid":
        width = max((len(r) for r in rows), default=0)
        return cls.from_frame(pd.DataFrame([list(r) + [None] * (width - len(r)) for r in rows], dtype=object))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def cell_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


# ---------------- Readers ----------------
def _source_name(source: Source, filename: Optional[str]) -> str:
    if filename:
        return filename
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", "") or ""


def _as_buffer(source: Source) -> Union[str, Path, BinaryIO]:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return source


_CSV_NUMBER = re.compile(r"-?(0|[1-9]\d*)(\.\d+)?")


def _coerce_csv_cell(value: str) -> Any:
    # Plain decimals only; "007" or "1e5" stay text.
    s = value.strip()
    if not s:
        return None
    match = _CSV_NUMBER.fullmatch(s)
    if match is None:
        return value
    return float(s) if match.group(2) else int(s)


def _decode_csv(raw: bytes, name: str) -> str:
    for enc in CSV_ENCODINGS:
        try:
            text = raw.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
        logger.debug("%s decoded with encoding %s", name, enc)
        return text
    raise IngestionError(f"Could not decode {name} with any supported encoding")


def _read_csv_sheets(source: Source, name: str) -> Dict[str, CellGrid]:
    raw = source.read() if hasattr(source, "read") else None
    if raw is None:
        raw = bytes(source) if isinstance(source, (bytes, bytearray)) else Path(source).read_bytes()  # type: ignore[arg-type]

    # Rows may be ragged and blank lines keep their index, so the header row picker sees the file as written.
    rows = [[_coerce_csv_cell(v) for v in row] for row in csv.reader(io.StringIO(_decode_csv(raw, name), newline=""))]
    if not any(rows):
        raise IngestionError(f"No rows found in {name or 'CSV file'}")

    sheet_name = Path(name).stem or "Sheet1"
    return {sheet_name: CellGrid.from_rows(rows)}


def _read_excel_sheets(source: Source) -> Dict[str, CellGrid]:
    xls = pd.ExcelFile(_as_buffer(source), engine="openpyxl")
    if not xls.sheet_names:
        raise IngestionError("No sheets found in Excel file")
    # Text such as "NA" or "null" is a value; empty cells arrive as "" and are dropped by the grid.
    frames = pd.read_excel(xls, sheet_name=None, header=None, dtype=object, keep_default_na=False, na_filter=False)
    return {str(name): CellGrid.from_frame(frame) for name, frame in frames.items()}


def read_workbook(source: Source, filename: Optional[str] = None) -> Dict[str, CellGrid]:
    """Read every sheet of a workbook (or a CSV file) into cell grids.

    The result preserves sheet order. Nothing is returned unless the whole
    file was read; any failure is reported as :class:`IngestionError`.
    """
    name = _source_name(source, filename)
    try:
        if Path(name).suffix.lower() in CSV_SUFFIXES:
            sheets = _read_csv_sheets(source, name)
        else:
            sheets = _read_excel_sheets(source)
    except IngestionError:
        raise
    except Exception as exc:
        logger.warning("Error reading workbook %s: %s", name or "<upload>", exc)
        raise IngestionError("Failed to read Excel file") from exc

    if not sheets:
        raise IngestionError("No sheets found in Excel file")
    logger.info("Loaded %d sheet(s) from %s", len(sheets), name or "<upload>")
    return sheets


# ---------------- Header row pickers ----------------
def preview_grid(grid: CellGrid, max_rows: int = 20, max_columns: int = 10) -> List[List[str]]:
    """Leading rows/columns of a sheet as plain text, for header row selection."""
    if grid.is_empty:
        return []
    rows: List[List[str]] = []
    for r in range(0, min(grid.max_row, max_rows - 1) + 1):
        rows.append([cell_text(grid.cell(r, c)) for c in range(0, min(grid.max_col, max_columns - 1) + 1)])
    return rows


def header_row_choices(grid: CellGrid, limit: int = 10, sample_columns: int = 3) -> List[Dict[str, Any]]:
    """Candidate header rows with a short sample of their cells."""
    choices: List[Dict[str, Any]] = []
    for r in range(min(limit, grid.n_rows)):
        cells = [cell_text(grid.cell(r, c)) for c in range(grid.n_cols)]
        choices.append(
            {
                "row": r,
                "sample": cells[:sample_columns],
                "remaining": max(0, len(cells) - sample_columns),
            }
        )
    return choices
