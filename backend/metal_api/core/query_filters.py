"""Query Filters — translate document-style filter mappings into SQLAlchemy conditions.

Invariants:
    - Every field must be a mapped column of the target model ("_id" aliases "id")
    - Values are coerced to the column's Python type before they reach the driver
    - Invalid filters raise PayloadValidationError — never a driver error
    - $ne and $nin match rows where the column is NULL (a missing field is "not equal")

Design Decisions:
    - Small operator set ($eq/$ne/$gt/$gte/$lt/$lte/$in/$nin/$exists/$regex, $and/$or):
      enough for admin list screens, not a query language
    - Coercion through pydantic TypeAdapter: the same rules as request bodies
      (ISO strings -> datetime, strings -> UUID, ...)
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import and_, inspect as sa_inspect, or_, true
from sqlalchemy.sql.elements import ColumnElement

from metal_api.core.errors import PayloadValidationError

FIELD_ALIASES = {"_id": "id"}
LOGICAL_OPERATORS = ("$and", "$or")
SORT_DIRECTIONS = {1: "asc", -1: "desc", "asc": "asc", "desc": "desc"}


@lru_cache(maxsize=64)
def _adapter(python_type: type) -> TypeAdapter:
    return TypeAdapter(python_type)


def column_names(model: type) -> set[str]:
    """Names of all mapped columns on a model."""
    return set(sa_inspect(model).columns.keys())


def resolve_field(model: type, name: str) -> str:
    """Return the column name for a filter/sort field or raise."""
    name = FIELD_ALIASES.get(name, name)
    if name not in column_names(model):
        raise PayloadValidationError(f'"{name}" is not a valid field')
    return name


def coerce_value(model: type, name: str, value: Any) -> Any:
    """Coerce a filter value to the column's Python type."""
    if value is None:
        return None
    column_type = sa_inspect(model).columns[name].type
    try:
        python_type = column_type.python_type
    except NotImplementedError:
        return value
    try:
        return _adapter(python_type).validate_python(value)
    except ValidationError:
        raise PayloadValidationError(f'invalid value for "{name}": {value!r}')


def _coerce_list(model: type, name: str, operator: str, value: Any) -> list:
    if not isinstance(value, list):
        raise PayloadValidationError(f'"{operator}" on "{name}" expects a list')
    return [coerce_value(model, name, v) for v in value]


def _membership(column, values: list, negate: bool = False) -> ColumnElement:
    """$in / $nin where null in the list stands for a missing value.

    Without null in the list, $nin also matches rows where the column is NULL.
    """
    present = [v for v in values if v is not None]
    has_null = len(present) < len(values)
    if negate:
        cond = column.not_in(present)
        return and_(cond, column.is_not(None)) if has_null else or_(cond, column.is_(None))
    cond = column.in_(present)
    return or_(cond, column.is_(None)) if has_null else cond


def _field_condition(model: type, name: str, spec: Any) -> ColumnElement:
    column = getattr(model, name)
    if not isinstance(spec, dict):
        value = coerce_value(model, name, spec)
        return column.is_(None) if value is None else column == value

    conditions = []
    options = str(spec.get("$options") or "")
    for operator, raw in spec.items():
        if operator == "$options":
            continue
        if operator in ("$eq", "$ne"):
            value = coerce_value(model, name, raw)
            if operator == "$eq":
                cond = column.is_(None) if value is None else column == value
            elif value is None:
                cond = column.is_not(None)
            else:
                cond = or_(column != value, column.is_(None))
        elif operator == "$gt":
            cond = column > coerce_value(model, name, raw)
        elif operator == "$gte":
            cond = column >= coerce_value(model, name, raw)
        elif operator == "$lt":
            cond = column < coerce_value(model, name, raw)
        elif operator == "$lte":
            cond = column <= coerce_value(model, name, raw)
        elif operator == "$in":
            cond = _membership(column, _coerce_list(model, name, operator, raw))
        elif operator == "$nin":
            cond = _membership(column, _coerce_list(model, name, operator, raw), negate=True)
        elif operator == "$exists":
            if not isinstance(raw, bool):
                raise PayloadValidationError(f'"$exists" on "{name}" expects a boolean')
            cond = column.is_not(None) if raw else column.is_(None)
        elif operator == "$regex":
            if not isinstance(raw, str):
                raise PayloadValidationError(f'"$regex" on "{name}" expects a string')
            # inline flag: the SQLite dialect ignores regexp_match(flags=)
            pattern = f"(?i){raw}" if "i" in options else raw
            cond = column.regexp_match(pattern)
        else:
            raise PayloadValidationError(f'unsupported operator "{operator}" on "{name}"')
        conditions.append(cond)
    if not conditions:
        raise PayloadValidationError(f'empty condition for "{name}"')
    return and_(*conditions)


def _logical_condition(model: type, operator: str, clauses: Any) -> ColumnElement:
    if not isinstance(clauses, list) or not clauses:
        raise PayloadValidationError(f'"{operator}" expects a non-empty list')
    parts = []
    for clause in clauses:
        if not isinstance(clause, dict):
            raise PayloadValidationError(f'"{operator}" entries must be objects')
        parts.append(and_(true(), *build_conditions(model, clause)))
    return or_(*parts) if operator == "$or" else and_(*parts)


def build_conditions(model: type, query: dict[str, Any] | None) -> list[ColumnElement]:
    """Translate a filter mapping into a list of AND-ed SQLAlchemy conditions."""
    if not query:
        return []
    if not isinstance(query, dict):
        raise PayloadValidationError("query must be an object")
    conditions = []
    for key, spec in query.items():
        if key in LOGICAL_OPERATORS:
            conditions.append(_logical_condition(model, key, spec))
        elif key.startswith("$"):
            raise PayloadValidationError(f'unsupported operator "{key}"')
        else:
            name = resolve_field(model, key)
            conditions.append(_field_condition(model, name, spec))
    return conditions


def build_order_by(model: type, sort: dict[str, Any] | None) -> list[ColumnElement]:
    """Translate {field: 1|-1|"asc"|"desc"} into ORDER BY clauses."""
    clauses = []
    for key, direction in (sort or {}).items():
        name = resolve_field(model, key)
        resolved = SORT_DIRECTIONS.get(direction)
        if resolved is None:
            raise PayloadValidationError(f'invalid sort direction for "{name}": {direction!r}')
        column = getattr(model, name)
        clauses.append(column.asc() if resolved == "asc" else column.desc())
    return clauses
