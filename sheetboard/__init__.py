"""Core (UI-agnostic) spreadsheet dashboard logic.

This package contains:
- workbook loading (XLSX / CSV -> cell grids)
- header / row derivation into a tabular model
- the chart role registry and the per-item transformation engine
- the canvas item store and the drag / resize / drop protocol
- chart helpers (Altair -> Vega-Lite spec dict)
"""
