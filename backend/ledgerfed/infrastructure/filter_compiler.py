"""Filter Compiler — translates the federation filter map into SQLAlchemy clauses.

Invariants:
    - Keys are mapped attribute names of the target model; unknown keys raise InvalidFilterError
    - Bare values mean equality, None means IS NULL
    - Operator dicts support $eq $ne $gt $gte $lt $lte $in $nin
    - Top-level $and / $or take lists of sub-filters
    - String values are coerced for DateTime and UUID columns so HTTP query
      parameters and planner-produced datetimes compare identically

Design Decisions:
    - The same filter compiles against hot and cold models: the ledgers share
      column names, so a sub-filter built by the planner is valid on either tier
    - Compilation errors are caller errors and propagate (never degrade a tier)
"""

import uuid
from typing import Any

from sqlalchemy import (
    and_, or_, true, inspect, Boolean, DateTime, Float, Integer, Uuid,
)
from sqlalchemy.sql.elements import ColumnElement

from ledgerfed.core.domain_types import Filter
from ledgerfed.core.errors import InvalidFilterError
from ledgerfed.core.extract_date_range import parse_timestamp

_COMPARATORS = {
    "$eq": lambda col, v: col.is_(None) if v is None else col == v,
    "$ne": lambda col, v: col.is_not(None) if v is None else col != v,
    "$gt": lambda col, v: col > v,
    "$gte": lambda col, v: col >= v,
    "$lt": lambda col, v: col < v,
    "$lte": lambda col, v: col <= v,
    "$in": lambda col, v: col.in_(v),
    "$nin": lambda col, v: col.not_in(v),
}


def _column(model: type, key: str):
    mapper = inspect(model)
    if key not in mapper.columns:
        raise InvalidFilterError(
            f"Unknown filter field '{key}' for {model.__tablename__}", key,
        )
    return getattr(model, key)


def _coerce(column, key: str, value: Any) -> Any:
    if value is None:
        return None
    column_type = column.property.columns[0].type
    if isinstance(column_type, DateTime):
        return parse_timestamp(value, key)
    if isinstance(column_type, Uuid) and not isinstance(value, uuid.UUID):
        try:
            return uuid.UUID(str(value))
        except ValueError:
            raise InvalidFilterError(f"'{key}' value {value!r} is not a UUID", key)
    if isinstance(value, str) and isinstance(column_type, Boolean):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, str) and isinstance(column_type, (Integer, Float)):
        try:
            return column_type.python_type(value)
        except ValueError:
            raise InvalidFilterError(f"'{key}' value {value!r} is not numeric", key)
    return value


def _compile_predicate(column, key: str, predicate: Any) -> list[ColumnElement]:
    if not isinstance(predicate, dict):
        if isinstance(predicate, (list, tuple, set)):
            raise InvalidFilterError(
                f"'{key}' takes a single value; use $in for lists", key,
            )
        return [_COMPARATORS["$eq"](column, _coerce(column, key, predicate))]

    clauses = []
    for op, raw in predicate.items():
        comparator = _COMPARATORS.get(op)
        if comparator is None:
            raise InvalidFilterError(f"Unsupported operator '{op}' on '{key}'", key)
        if op in ("$in", "$nin"):
            if not isinstance(raw, (list, tuple, set)):
                raise InvalidFilterError(f"'{op}' on '{key}' needs a list", key)
            value = [_coerce(column, key, v) for v in raw]
        else:
            value = _coerce(column, key, raw)
        clauses.append(comparator(column, value))
    return clauses


def _conjunction(clauses: list[ColumnElement]) -> ColumnElement:
    return and_(true(), *clauses) if clauses else true()


def compile_filter(model: type, filter: Filter) -> list[ColumnElement]:
    """Compile a filter map into WHERE clauses for `model`."""
    clauses: list[ColumnElement] = []
    for key, value in filter.items():
        if key in ("$and", "$or"):
            if not isinstance(value, (list, tuple)):
                raise InvalidFilterError(f"'{key}' needs a list of filters", key)
            parts = [_conjunction(compile_filter(model, sub)) for sub in value]
            if key == "$and":
                clauses.append(and_(true(), *parts))
            elif parts:
                clauses.append(or_(*parts))
            continue
        if key.startswith("$"):
            raise InvalidFilterError(f"Unsupported top-level operator '{key}'", key)
        clauses.extend(_compile_predicate(_column(model, key), key, value))
    return clauses
