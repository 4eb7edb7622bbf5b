from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PositionModel(BaseModel):
    x: float = 0
    y: float = 0


class SizeModel(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class SheetSelectionModel(BaseModel):
    name: str


class HeaderRowSelectionModel(BaseModel):
    index: int = Field(ge=0)


class NewItemModel(BaseModel):
    kind: str
    title: Optional[str] = None
    position: Optional[PositionModel] = None
    size: Optional[SizeModel] = None


class TitleModel(BaseModel):
    title: str


class RoleBindingModel(BaseModel):
    role: str
    column: str


class TableColumnModel(BaseModel):
    column: str


class ActiveItemModel(BaseModel):
    id: Optional[str] = None


class PointerDownModel(BaseModel):
    item_id: str
    x: float
    y: float
    target: str = "body"


class PointerMoveModel(BaseModel):
    x: float
    y: float


class DropModel(BaseModel):
    role: Optional[str] = None
    column: Optional[str] = None

