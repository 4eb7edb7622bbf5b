from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import (
    ActiveItemModel,
    DropModel,
    HeaderRowSelectionModel,
    NewItemModel,
    PointerDownModel,
    PointerMoveModel,
    PositionModel,
    RoleBindingModel,
    SheetSelectionModel,
    SizeModel,
    TableColumnModel,
    TitleModel,
)
from sheetboard.charts import build_chart, to_vega_spec
from sheetboard.items import DashboardItem, Position, Size
from sheetboard.roles import CHART_LABELS, CHART_ROLES, default_title
from sheetboard.session import DashboardSession
from sheetboard.settings import normalize_settings
from sheetboard.sheets import IngestionError


logger = logging.getLogger(__name__)
router = APIRouter()


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _failed(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return _error(exc, 500)


def _not_found(item_id: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"Item '{item_id}' not found.", "type": "NotFound"})


def get_session(request: Request) -> DashboardSession:
    return request.app.state.session


def _item_payload(item: Optional[DashboardItem]) -> Optional[Dict[str, Any]]:
    return item.to_dict() if item is not None else None


def _canvas_payload(session: DashboardSession) -> Dict[str, Any]:
    return {
        "items": [item.to_dict() for item in session.canvas.items],
        "active_item_id": session.canvas.active_item_id,
    }


# ---------------- Workbook ----------------
@router.post("/workbook")
async def upload_workbook(request: Request, filename: str = Query(default="")):
    session = get_session(request)
    try:
        body = await request.body()
        session.load_file(body, filename=filename or None)
        return _json(session.summary())
    except IngestionError as exc:
        return _error(exc, 400)
    except Exception as exc:
        return _failed("upload_workbook", exc)


@router.get("/workbook")
def workbook(request: Request):
    return _json(get_session(request).summary())


@router.put("/workbook/sheet")
def select_sheet(request: Request, selection: SheetSelectionModel):
    session = get_session(request)
    try:
        session.select_sheet(selection.name)
        return _json(session.summary())
    except ValueError as exc:
        return _error(exc, 404)
    except Exception as exc:
        return _failed("select_sheet", exc)


@router.put("/workbook/header-row")
def select_header_row(request: Request, selection: HeaderRowSelectionModel):
    session = get_session(request)
    try:
        session.select_header_row(selection.index)
        return _json(session.summary())
    except Exception as exc:
        return _failed("select_header_row", exc)


@router.get("/workbook/preview")
def workbook_preview(request: Request):
    return _json(get_session(request).header_preview())


@router.get("/workbook/rows")
def workbook_rows(request: Request, limit: int = Query(default=100, ge=1, le=10000)):
    model = get_session(request).model
    return _json({"headers": list(model.headers), "rows": model.rows[:limit], "total": len(model.rows)})


# ---------------- Registry ----------------
@router.get("/chart-kinds")
def chart_kinds():
    kinds = []
    for kind, requirements in CHART_ROLES.items():
        kinds.append(
            {
                "kind": kind.value,
                "label": CHART_LABELS[kind],
                "default_title": default_title(kind),
                "roles": [
                    {"role": req.role.value, "label": req.label, "max_columns": req.max_columns}
                    for req in requirements
                ],
            }
        )
    return _json({"kinds": kinds})


# ---------------- Canvas items ----------------
@router.get("/items")
def list_items(request: Request):
    return _json(_canvas_payload(get_session(request)))


@router.post("/items")
def add_item(request: Request, new_item: NewItemModel):
    session = get_session(request)
    try:
        item = session.canvas.add_item(
            new_item.kind,
            title=new_item.title,
            position=Position(new_item.position.x, new_item.position.y) if new_item.position else None,
            size=Size(new_item.size.width, new_item.size.height) if new_item.size else None,
        )
        return _json({"item": item.to_dict()}, status_code=201)
    except ValueError as exc:
        return _error(exc, 422)
    except Exception as exc:
        return _failed("add_item", exc)


@router.get("/items/{item_id}")
def get_item(request: Request, item_id: str):
    item = get_session(request).canvas.get(item_id)
    if item is None:
        return _not_found(item_id)
    return _json({"item": item.to_dict(), "active": get_session(request).canvas.is_active(item_id)})


@router.delete("/items/{item_id}")
def remove_item(request: Request, item_id: str):
    session = get_session(request)
    session.canvas.remove_item(item_id)
    return _json(_canvas_payload(session))


@router.put("/items/{item_id}/title")
def update_title(request: Request, item_id: str, body: TitleModel):
    item = get_session(request).canvas.update_title(item_id, body.title)
    return _json({"item": _item_payload(item)})


@router.put("/items/{item_id}/position")
def update_position(request: Request, item_id: str, body: PositionModel):
    item = get_session(request).canvas.update_position(item_id, Position(body.x, body.y))
    return _json({"item": _item_payload(item)})


@router.put("/items/{item_id}/size")
def update_size(request: Request, item_id: str, body: SizeModel):
    item = get_session(request).canvas.update_size(item_id, Size(body.width, body.height))
    return _json({"item": _item_payload(item)})


@router.post("/items/{item_id}/bindings")
def update_role_binding(request: Request, item_id: str, body: RoleBindingModel):
    try:
        item = get_session(request).canvas.update_role_binding(item_id, body.role, body.column)
        return _json({"item": _item_payload(item)})
    except ValueError as exc:
        return _error(exc, 422)
    except Exception as exc:
        return _failed("update_role_binding", exc)


@router.post("/items/{item_id}/columns")
def append_table_column(request: Request, item_id: str, body: TableColumnModel):
    item = get_session(request).canvas.append_table_column(item_id, body.column)
    return _json({"item": _item_payload(item)})


@router.put("/active-item")
def set_active_item(request: Request, body: ActiveItemModel):
    session = get_session(request)
    session.canvas.set_active_item(body.id)
    return _json(_canvas_payload(session))


# ---------------- Pointer protocol ----------------
@router.post("/pointer/down")
def pointer_down(request: Request, body: PointerDownModel):
    session = get_session(request)
    try:
        state = session.layout.pointer_down(body.item_id, body.x, body.y, body.target)
        return _json({"state": state.value, "item": _item_payload(session.canvas.get(body.item_id))})
    except ValueError as exc:
        return _error(exc, 422)
    except Exception as exc:
        return _failed("pointer_down", exc)


@router.post("/pointer/move")
def pointer_move(request: Request, body: PointerMoveModel):
    session = get_session(request)
    item = session.layout.pointer_move(body.x, body.y)
    return _json({"state": session.layout.state.value, "item": _item_payload(item)})


@router.post("/pointer/up")
def pointer_up(request: Request):
    session = get_session(request)
    session.layout.pointer_up()
    return _json({"state": session.layout.state.value})


@router.post("/items/{item_id}/drop")
def drop_column(request: Request, item_id: str, body: DropModel):
    session = get_session(request)
    try:
        item = session.layout.drop_column(item_id, body.role, body.column)
        return _json({"item": _item_payload(item), "applied": item is not None})
    except ValueError as exc:
        return _error(exc, 422)
    except Exception as exc:
        return _failed("drop_column", exc)


# ---------------- Chart data ----------------
@router.get("/items/{item_id}/data")
def item_data(request: Request, item_id: str):
    session = get_session(request)
    if session.canvas.get(item_id) is None:
        return _not_found(item_id)
    try:
        data = session.chart_data(item_id)
        return _json({"data": data.to_dict() if data is not None else None})
    except Exception as exc:
        return _failed("item_data", exc)


@router.get("/items/{item_id}/chart")
def item_chart(request: Request, item_id: str):
    session = get_session(request)
    item = session.canvas.get(item_id)
    if item is None:
        return _not_found(item_id)
    try:
        chart = build_chart(
            item.kind,
            session.chart_data(item_id),
            title=item.title,
            width=item.size.width,
            height=item.size.height,
        )
        return _json({"spec": to_vega_spec(chart) if chart is not None else None})
    except Exception as exc:
        return _failed("item_chart", exc)


@router.get("/items/{item_id}/export")
def export_item(request: Request, item_id: str):
    session = get_session(request)
    if session.canvas.get(item_id) is None:
        return _not_found(item_id)
    data = session.chart_data(item_id)
    export_df = data.to_frame() if data is not None else pd.DataFrame()
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    filename = f"visualization-{item_id}.csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


def create_app(session: Optional[DashboardSession] = None, settings: Optional[Dict[str, Any]] = None) -> FastAPI:
    application = FastAPI(title="Sheetboard API", version="0.1.0")
    application.state.session = session or DashboardSession(normalize_settings(settings))
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(router)
    return application


app = create_app()
