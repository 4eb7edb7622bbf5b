"""Chart kinds, the roles each kind needs, and the binding shapes that hold them.

The registry is static: every chart kind maps to an ordered tuple of
:class:`RoleRequirement`. Bindings are one frozen dataclass per kind family so
a kind can only ever hold the roles it actually has; they start empty and are
filled one role at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Union


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    COLUMN = "column"
    STACKED_BAR = "stackedBar"
    STACKED_COLUMN = "stackedColumn"
    PIE = "pie"
    DONUT = "donut"
    TREEMAP = "treemap"
    TABLE = "table"


class Role(str, Enum):
    X_AXIS = "xAxis"
    Y_AXIS = "yAxis"
    CATEGORY = "category"
    VALUES = "values"
    SERIES = "series"
    COLUMNS = "columns"


@dataclass(frozen=True)
class RoleRequirement:
    role: Role
    label: str
    max_columns: Optional[int] = 1


_X = RoleRequirement(Role.X_AXIS, "X Axis")
_Y = RoleRequirement(Role.Y_AXIS, "Y Axis")
_SERIES = RoleRequirement(Role.SERIES, "Series")
_CATEGORY = RoleRequirement(Role.CATEGORY, "Category")
_VALUES = RoleRequirement(Role.VALUES, "Values")
_TABLE_COLUMNS = RoleRequirement(Role.COLUMNS, "Table Columns", max_columns=None)

CHART_ROLES: Dict[ChartKind, Tuple[RoleRequirement, ...]] = {
    ChartKind.BAR: (_X, _Y),
    ChartKind.LINE: (_X, _Y),
    ChartKind.COLUMN: (_X, _Y),
    ChartKind.STACKED_BAR: (_X, _Y, _SERIES),
    ChartKind.STACKED_COLUMN: (_X, _Y, _SERIES),
    ChartKind.PIE: (_CATEGORY, _VALUES),
    ChartKind.DONUT: (_CATEGORY, _VALUES),
    ChartKind.TREEMAP: (_CATEGORY, _VALUES),
    ChartKind.TABLE: (_TABLE_COLUMNS,),
}

CHART_LABELS: Dict[ChartKind, str] = {
    ChartKind.BAR: "Bar Chart",
    ChartKind.LINE: "Line Chart",
    ChartKind.COLUMN: "Column Chart",
    ChartKind.STACKED_BAR: "Stacked Bar Chart",
    ChartKind.STACKED_COLUMN: "Stacked Column Chart",
    ChartKind.PIE: "Pie Chart",
    ChartKind.DONUT: "Donut Chart",
    ChartKind.TREEMAP: "Treemap",
    ChartKind.TABLE: "Table View",
}

AXIS_KINDS = frozenset({ChartKind.BAR, ChartKind.LINE, ChartKind.COLUMN})
STACKED_KINDS = frozenset({ChartKind.STACKED_BAR, ChartKind.STACKED_COLUMN})
CATEGORY_KINDS = frozenset({ChartKind.PIE, ChartKind.DONUT, ChartKind.TREEMAP})


def role_requirements(kind: ChartKind | str) -> Tuple[RoleRequirement, ...]:
    return CHART_ROLES[ChartKind(kind)]


def required_roles(kind: ChartKind | str) -> List[Role]:
    return [req.role for req in role_requirements(kind)]


def default_title(kind: ChartKind | str) -> str:
    value = ChartKind(kind).value
    return f"{value[:1].upper()}{value[1:]} Chart"


# ---------------- Binding shapes ----------------
class _RoleBindings:
    _ROLE_FIELDS: ClassVar[Dict[Role, str]] = {}

    def _field_for(self, role: Role | str) -> str:
        role = Role(role)
        if role not in self._ROLE_FIELDS:
            raise ValueError(f"Role '{role.value}' is not available for {type(self).__name__}.")
        return self._ROLE_FIELDS[role]

    def get(self, role: Role | str) -> Optional[str]:
        return getattr(self, self._field_for(role))

    def bind(self, role: Role | str, column: str):
        return replace(self, **{self._field_for(role): column})  # type: ignore[type-var]

    def is_complete(self) -> bool:
        return all(getattr(self, name) is not None for name in self._ROLE_FIELDS.values())

    def as_dict(self) -> Dict[str, str]:
        return {role.value: getattr(self, name) for role, name in self._ROLE_FIELDS.items() if getattr(self, name) is not None}


@dataclass(frozen=True)
class AxisBindings(_RoleBindings):
    x_axis: Optional[str] = None
    y_axis: Optional[str] = None

    _ROLE_FIELDS: ClassVar[Dict[Role, str]] = {Role.X_AXIS: "x_axis", Role.Y_AXIS: "y_axis"}


@dataclass(frozen=True)
class StackedBindings(_RoleBindings):
    x_axis: Optional[str] = None
    y_axis: Optional[str] = None
    series: Optional[str] = None

    _ROLE_FIELDS: ClassVar[Dict[Role, str]] = {Role.X_AXIS: "x_axis", Role.Y_AXIS: "y_axis", Role.SERIES: "series"}


@dataclass(frozen=True)
class CategoryBindings(_RoleBindings):
    category: Optional[str] = None
    values: Optional[str] = None

    _ROLE_FIELDS: ClassVar[Dict[Role, str]] = {Role.CATEGORY: "category", Role.VALUES: "values"}


@dataclass(frozen=True)
class TableBindings:
    """Ordered, freely growing column list. Repeats are kept."""

    columns: Tuple[str, ...] = ()

    def get(self, role: Role | str) -> Optional[str]:
        if Role(role) != Role.COLUMNS:
            raise ValueError(f"Role '{Role(role).value}' is not available for TableBindings.")
        return self.columns[-1] if self.columns else None

    def append(self, column: str) -> "TableBindings":
        return TableBindings(columns=self.columns + (column,))

    def bind(self, role: Role | str, column: str) -> "TableBindings":
        if Role(role) != Role.COLUMNS:
            raise ValueError(f"Role '{Role(role).value}' is not available for TableBindings.")
        return self.append(column)

    def is_complete(self) -> bool:
        return bool(self.columns)

    def as_dict(self) -> Dict[str, List[str]]:
        return {Role.COLUMNS.value: list(self.columns)}


Bindings = Union[AxisBindings, StackedBindings, CategoryBindings, TableBindings]


def empty_bindings(kind: ChartKind | str) -> Bindings:
    kind = ChartKind(kind)
    if kind in AXIS_KINDS:
        return AxisBindings()
    if kind in STACKED_KINDS:
        return StackedBindings()
    if kind in CATEGORY_KINDS:
        return CategoryBindings()
    return TableBindings()

