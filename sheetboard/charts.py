from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from sheetboard.roles import ChartKind
from sheetboard.transform import ChartData, TransformResult

alt.data_transformers.disable_max_rows()

COLOR_PALETTE = [
    "rgba(255, 99, 132, 0.8)",
    "rgba(54, 162, 235, 0.8)",
    "rgba(255, 206, 86, 0.8)",
    "rgba(75, 192, 192, 0.8)",
    "rgba(153, 102, 255, 0.8)",
    "rgba(255, 159, 64, 0.8)",
    "rgba(0, 204, 102, 0.8)",
    "rgba(255, 0, 255, 0.8)",
]


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _numeric(values: List[str]) -> pd.Series:
    # Values travel as text; only the drawing needs numbers.
    return pd.to_numeric(pd.Series(values, dtype=object), errors="coerce")


def _label_value_frame(data: ChartData) -> pd.DataFrame:
    return pd.DataFrame({"label": data.labels, "text": data.values, "value": _numeric(data.values)})


def _series_frame(data: ChartData) -> pd.DataFrame:
    frames = []
    for s in data.series or []:
        frames.append(pd.DataFrame({"label": data.labels, "series": s.name, "text": s.data, "value": _numeric(s.data)}))
    if not frames:
        return pd.DataFrame(columns=["label", "series", "text", "value"])
    return pd.concat(frames, ignore_index=True)


def _color(field: str, title: Optional[str] = None) -> alt.Color:
    return alt.Color(field, title=title, sort=None, scale=alt.Scale(range=COLOR_PALETTE))


def _treemap_frame(data: ChartData) -> pd.DataFrame:
    # Slice-and-dice layout: one strip per label, width proportional to its value.
    df = _label_value_frame(data)
    weights = df["value"].fillna(0).clip(lower=0)
    total = float(weights.sum())
    if total <= 0:
        weights = pd.Series([1.0] * len(df), dtype=float)
        total = float(len(df)) or 1.0
    share = weights / total
    df["x"] = share.cumsum() - share
    df["x2"] = share.cumsum()
    df["mid"] = (df["x"] + df["x2"]) / 2
    return df


def build_chart(
    kind: ChartKind | str,
    data: TransformResult,
    *,
    title: str = "",
    width: float = 600,
    height: float = 400,
) -> Optional[alt.TopLevelMixin]:
    """Altair chart for one item's chart data; ``None`` for tables and empty data."""
    if not isinstance(data, ChartData):
        return None
    kind = ChartKind(kind)
    props = {"title": title, "width": width, "height": height}
    label_tooltip = [alt.Tooltip("label:N", title="Label"), alt.Tooltip("text:N", title="Value")]

    if kind in {ChartKind.STACKED_BAR, ChartKind.STACKED_COLUMN}:
        long_df = _series_frame(data)
        label_enc = alt.X("label:N", title=None, sort=None) if kind == ChartKind.STACKED_BAR else alt.Y("label:N", title=None, sort=None)
        value_enc = alt.Y("value:Q", title=None, stack="zero") if kind == ChartKind.STACKED_BAR else alt.X("value:Q", title=None, stack="zero")
        return (
            alt.Chart(long_df)
            .mark_bar()
            .encode(
                label_enc,
                value_enc,
                color=_color("series:N", title="Series"),
                tooltip=[alt.Tooltip("series:N", title="Series")] + label_tooltip,
            )
            .properties(**props)
        )

    df = _label_value_frame(data)
    if kind == ChartKind.BAR:
        return (
            alt.Chart(df)
            .mark_bar()
            .encode(x=alt.X("label:N", title=None, sort=None), y=alt.Y("value:Q", title=None), color=_color("label:N"), tooltip=label_tooltip)
            .properties(**props)
        )
    if kind == ChartKind.COLUMN:
        return (
            alt.Chart(df)
            .mark_bar()
            .encode(y=alt.Y("label:N", title=None, sort=None), x=alt.X("value:Q", title=None), color=_color("label:N"), tooltip=label_tooltip)
            .properties(**props)
        )
    if kind == ChartKind.LINE:
        return (
            alt.Chart(df)
            .mark_line(point={"filled": True}, interpolate="monotone", color=COLOR_PALETTE[0])
            .encode(x=alt.X("label:N", title=None, sort=None), y=alt.Y("value:Q", title=None), tooltip=label_tooltip)
            .properties(**props)
        )
    if kind in {ChartKind.PIE, ChartKind.DONUT}:
        inner = min(width, height) / 4 if kind == ChartKind.DONUT else 0
        return (
            alt.Chart(df)
            .mark_arc(innerRadius=inner, stroke="#fff", strokeWidth=2)
            .encode(theta=alt.Theta("value:Q", stack=True), color=_color("label:N", title=None), tooltip=label_tooltip)
            .properties(**props)
        )
    if kind == ChartKind.TREEMAP:
        tiles = _treemap_frame(data)
        base = alt.Chart(tiles).encode(
            x=alt.X("x:Q", axis=None, scale=alt.Scale(domain=[0, 1])),
        )
        rects = base.mark_rect(stroke="#fff", strokeWidth=3).encode(
            x2="x2:Q",
            y=alt.value(0),
            y2=alt.value(height),
            color=_color("label:N", title=None),
            tooltip=label_tooltip,
        )
        labels = base.mark_text(color="#fff", fontWeight="bold").encode(
            x=alt.X("mid:Q", axis=None, scale=alt.Scale(domain=[0, 1])),
            y=alt.value(height / 2),
            text="label:N",
        )
        return alt.layer(rects, labels).properties(**props)
    return None
