"""Turn a tabular model plus an item's role bindings into chart-ready data.

Everything here is a pure function of (model, kind, bindings); callers
recompute on every change instead of caching.

Known limitation: values are pivoted by first match, not aggregated. When
several rows share an X (or an X/series pair) only the first row's value is
used, and values are carried as text.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from sheetboard.model import TabularModel
from sheetboard.roles import (
    AXIS_KINDS,
    CATEGORY_KINDS,
    STACKED_KINDS,
    Bindings,
    ChartKind,
    Role,
    TableBindings,
    empty_bindings,
)


@dataclass(frozen=True)
class SeriesData:
    name: str
    data: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChartData:
    labels: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)
    series: Optional[List[SeriesData]] = None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        if self.series is None:
            out.pop("series")
        return out

    def to_frame(self) -> pd.DataFrame:
        if self.series is None:
            return pd.DataFrame({"label": self.labels, "value": self.values})
        frame = pd.DataFrame({"label": self.labels})
        for i, s in enumerate(self.series):
            frame.insert(i + 1, s.name, s.data, allow_duplicates=True)
        return frame


@dataclass(frozen=True)
class TableData:
    columns: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.columns)


TransformResult = Optional[Union[ChartData, TableData]]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _text_frame(model: TabularModel, columns: Iterable[str]) -> pd.DataFrame:
    # Columns missing from the model (dangling bindings) read as empty text.
    cols = list(dict.fromkeys(columns))
    records = [[_as_text(row.get(c)) for c in cols] for row in model.rows]
    return pd.DataFrame(records, columns=cols, dtype=object)


def coerce_bindings(kind: ChartKind | str, bindings: Union[Bindings, Mapping[str, Any], None]) -> Bindings:
    """Accept either a binding shape or a plain ``{role: column}`` mapping."""
    shape = empty_bindings(kind)
    if bindings is None:
        return shape
    if not isinstance(bindings, Mapping):
        if type(bindings) is not type(shape):
            raise ValueError(f"{type(bindings).__name__} cannot hold bindings for '{ChartKind(kind).value}'.")
        return bindings
    if isinstance(shape, TableBindings):
        return TableBindings(columns=tuple(str(c) for c in bindings.get(Role.COLUMNS.value) or []))
    for role, column in bindings.items():
        if column:
            shape = shape.bind(Role(role), str(column))
    return shape


def category_values(model: TabularModel, x: str, y: str) -> ChartData:
    frame = _text_frame(model, [x, y])
    firsts = frame.drop_duplicates(subset=[x], keep="first")
    return ChartData(labels=firsts[x].tolist(), values=firsts[y].tolist())


def stacked_values(model: TabularModel, x: str, y: str, series: str) -> ChartData:
    frame = _text_frame(model, [x, y, series])
    labels = frame[x].drop_duplicates().tolist()
    names = frame[series].drop_duplicates().tolist()

    firsts = frame.drop_duplicates(subset=list(dict.fromkeys([x, series])), keep="first")
    lookup = {(a, b): v for a, b, v in zip(firsts[x], firsts[series], firsts[y])}

    return ChartData(
        labels=labels,
        values=[],
        series=[SeriesData(name=name, data=[lookup.get((label, name), "") for label in labels]) for name in names],
    )


def table_values(model: TabularModel, columns: Iterable[str]) -> TableData:
    cols = list(columns)
    return TableData(columns=cols, rows=[[row.get(c, "") for c in cols] for row in model.rows])


def transform(
    model: Optional[TabularModel],
    kind: ChartKind | str,
    bindings: Union[Bindings, Mapping[str, Any], None],
) -> TransformResult:
    """Chart data for one item, or ``None`` while a required role is unbound."""
    if model is None:
        return None
    kind = ChartKind(kind)
    shape = coerce_bindings(kind, bindings)
    if not shape.is_complete():
        return None

    if kind in AXIS_KINDS or kind in CATEGORY_KINDS:
        if kind in AXIS_KINDS:
            x, y = shape.get(Role.X_AXIS), shape.get(Role.Y_AXIS)
        else:
            x, y = shape.get(Role.CATEGORY), shape.get(Role.VALUES)
        return category_values(model, x, y)

    if kind in STACKED_KINDS:
        return stacked_values(model, shape.get(Role.X_AXIS), shape.get(Role.Y_AXIS), shape.get(Role.SERIES))

    return table_values(model, shape.columns)  # type: ignore[union-attr]
