import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional

from sheetboard.charts import build_chart
from sheetboard.items import DashboardItem, Size
from sheetboard.roles import CHART_LABELS, CHART_ROLES, ChartKind, Role
from sheetboard.session import DashboardSession
from sheetboard.sheets import IngestionError
from sheetboard.transform import TableData

alt.data_transformers.disable_max_rows()

EMPTY_CHOICE = "(none)"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #333;border-radius: 8px;padding: 12px;margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;}
        .card-actions {font-size: 0.85rem;color: #6b7280;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {border: 1px solid #333;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def get_session() -> DashboardSession:
    if "session" not in st.session_state:
        st.session_state["session"] = DashboardSession()
    return st.session_state["session"]


def column_chips(headers: List[str]) -> str:
    return "".join([f"<span class='chip'>{h}</span>" for h in headers])


# ---------- Workbook ----------
def render_upload(session: DashboardSession):
    uploaded = st.file_uploader("Upload a spreadsheet", type=["xlsx", "xlsm", "csv"])
    if uploaded is None:
        return
    signature = (uploaded.name, uploaded.size)
    if st.session_state.get("_loaded_file") == signature:
        return
    try:
        session.load_file(uploaded.getvalue(), filename=uploaded.name)
        st.session_state["_loaded_file"] = signature
    except IngestionError:
        st.error("Error processing Excel file. Please try again.")


def render_sheet_and_header_pickers(session: DashboardSession):
    model = session.model
    names = model.sheet_names
    c1, c2 = st.columns([1, 2])
    with c1:
        chosen = st.selectbox("Sheet", options=names, index=names.index(model.current_sheet) if model.current_sheet in names else 0)
        if chosen != model.current_sheet:
            session.select_sheet(chosen)

    preview = session.header_preview()
    choices = preview["choices"]
    with c2:
        if choices:
            labels = [
                f"Row {c['row'] + 1}: " + " | ".join(v or "Empty" for v in c["sample"]) + (f" (+{c['remaining']} more)" if c["remaining"] else "")
                for c in choices
            ]
            rows = [c["row"] for c in choices]
            current = session.model.header_row_index
            picked = st.selectbox("Header row", options=rows, index=rows.index(current) if current in rows else 0, format_func=lambda r: labels[rows.index(r)])
            if picked != current:
                session.select_header_row(picked)

    if preview["rows"]:
        with st.expander("Sheet preview", expanded=False):
            st.dataframe(pd.DataFrame(preview["rows"]), use_container_width=True)
            st.caption(f"Showing first {session.settings.preview_columns} columns of each row")


# ---------- Canvas ----------
def render_chart_kind_buttons(session: DashboardSession):
    st.markdown("### Select Visualization Type")
    cols = st.columns(5)
    for i, kind in enumerate(ChartKind):
        if cols[i % 5].button(CHART_LABELS[kind], key=f"add-{kind.value}"):
            session.canvas.add_item(kind)


def render_role_pickers(session: DashboardSession, item: DashboardItem):
    headers = list(session.model.headers)
    if item.kind == ChartKind.TABLE:
        c1, c2 = st.columns([3, 1])
        column = c1.selectbox("Table Columns", options=[EMPTY_CHOICE] + headers, key=f"table-col-{item.id}")
        if c2.button("Add", key=f"table-add-{item.id}") and column != EMPTY_CHOICE:
            session.layout.drop_column(item.id, Role.COLUMNS, column)
        if item.columns:
            st.markdown(f"<div class='chip-row'>{column_chips(item.columns)}</div>", unsafe_allow_html=True)
        return

    cols = st.columns(len(CHART_ROLES[item.kind]))
    for col, req in zip(cols, CHART_ROLES[item.kind]):
        bound = item.bindings.get(req.role)
        options = [EMPTY_CHOICE] + headers
        if bound and bound not in options:
            options.append(bound)
        picked = col.selectbox(req.label, options=options, index=options.index(bound) if bound else 0, key=f"{item.id}-{req.role.value}")
        if picked != EMPTY_CHOICE and picked != bound:
            session.layout.drop_column(item.id, req.role, picked)


def render_item_content(session: DashboardSession, item: DashboardItem):
    data = session.chart_data(item.id)
    if data is None:
        st.info("Drag columns to display data")
        return
    if isinstance(data, TableData):
        st.dataframe(data.to_frame(), use_container_width=True, height=int(item.size.height))
        return
    chart = build_chart(item.kind, data, title=item.title, width=item.size.width, height=item.size.height)
    if chart is not None:
        st.altair_chart(chart, use_container_width=False)


def render_item(session: DashboardSession, item: DashboardItem):
    active = session.canvas.is_active(item.id)
    with card(item.title, actions="editing" if active else None):
        b1, b2, b3, b4, b5 = st.columns([1, 1, 1, 1, 1])
        if b1.button("Done" if active else "Edit", key=f"activate-{item.id}"):
            session.canvas.set_active_item(None if active else item.id)
            st.rerun()
        width = b2.number_input("Width", min_value=session.settings.min_width, value=int(item.size.width), step=50, key=f"w-{item.id}")
        height = b3.number_input("Height", min_value=session.settings.min_height, value=int(item.size.height), step=50, key=f"h-{item.id}")
        if (width, height) != (item.size.width, item.size.height):
            session.canvas.update_size(item.id, Size(width, height))
        data = session.chart_data(item.id)
        if data is not None:
            b4.download_button(
                "Export CSV",
                data=data.to_frame().to_csv(index=False).encode("utf-8"),
                file_name=f"visualization-{item.id}.csv",
                mime="text/csv",
                key=f"export-{item.id}",
            )
        if b5.button("Remove", key=f"remove-{item.id}"):
            session.canvas.remove_item(item.id)
            st.rerun()

        if active:
            render_role_pickers(session, session.canvas.get(item.id) or item)
        render_item_content(session, session.canvas.get(item.id) or item)


# ---------- UI setup ----------
st.set_page_config(page_title="Sheetboard", layout="wide")
inject_base_styles()
st.title("Sheetboard")
st.caption("Load a spreadsheet, pick a header row and compose charts from its columns.")

session = get_session()
render_upload(session)

if not session.has_workbook:
    st.stop()

render_sheet_and_header_pickers(session)

if not session.model.headers:
    st.warning("The selected sheet has no columns.")
    st.stop()

with st.sidebar:
    st.markdown("### Available columns")
    st.markdown(f"<div class='chip-row'>{column_chips(list(session.model.headers))}</div>", unsafe_allow_html=True)

render_chart_kind_buttons(session)

items = session.canvas.items
if not items:
    st.info("Select visualization type and drag columns to it")
for item in items:
    render_item(session, item)
