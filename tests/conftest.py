from __future__ import annotations

import io

import pandas as pd
import pytest

from sheetboard.model import TabularModel
from sheetboard.sheets import CellGrid


def make_model(rows, headers=None) -> TabularModel:
    headers = headers or list(dict.fromkeys(k for row in rows for k in row))
    return TabularModel(headers=headers, rows=[dict(r) for r in rows])


def xlsx_bytes(sheets: dict) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture
def sales_grid() -> CellGrid:
    return CellGrid.from_rows(
        [
            ["Quarterly report", None, None, None],
            [" Region ", "Product", "", "Region"],
            ["North", "Widget", 10, "x"],
            [None, None, None, None],
            ["South ", "Gadget", 2.5, None],
            ["", None, 0, None],
        ]
    )


@pytest.fixture
def workbook_bytes() -> bytes:
    return xlsx_bytes(
        {
            "Sales": [
                ["Region", "Product", "Units"],
                ["North", "Widget", 10],
                ["South", "Gadget", 4],
                ["North", "Gadget", 7],
            ],
            "Notes": [
                ["Title row", None],
                ["Key", "Value"],
                ["a", 1],
            ],
        }
    )
