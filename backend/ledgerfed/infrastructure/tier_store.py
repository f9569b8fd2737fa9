"""Tier Stores — SQLAlchemy-backed implementations of TierStore and ReferenceStore.

Invariants:
    - count() ignores pagination: it counts every row matching the filter in the tier
    - find() applies sort/skip/limit natively in the database
    - The hot store resolves requested reference paths natively (selectinload);
      the cold store returns bare foreign-key ids
    - Records are plain dicts keyed by attribute name, datetimes timezone-aware UTC
    - Cold records always include original_id; hot records never do

Design Decisions:
    - Sorting on the designated timestamp uses COALESCE(field, fallback) so tier-local
      order agrees with the merger's fallback ordering
    - NULLs sort last in both directions on every dialect, matching the merger
    - Primary key appended as the final sort key: stable pages for identical calls
    - Each call opens its own session from the tier's manager; failures surface as
      DatabaseError via DatabaseSessionManager.session()
"""

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import selectinload

from ledgerfed.core.domain_types import Filter, Record, RecordKind, SortKey
from ledgerfed.core.record_kinds import ReferencePath, get_kind_spec
from ledgerfed.core.threshold_policy import to_utc
from ledgerfed.infrastructure.database import DatabaseSessionManager
from ledgerfed.infrastructure.filter_compiler import compile_filter

logger = logging.getLogger(__name__)


def _normalize(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_utc(value)
    return value


def serialize_row(row: Any) -> Record:
    """Every mapped column of `row`, keyed by attribute name."""
    return {
        attr.key: _normalize(getattr(row, attr.key))
        for attr in inspect(type(row)).column_attrs
    }


def project(row: Any, projection: tuple[str, ...]) -> Record:
    """Subset of a referenced row exposed under a reference path."""
    return {name: _normalize(getattr(row, name)) for name in projection}


class SqlTierStore:
    """Ledger queries against one tier's database."""

    def __init__(
        self,
        manager: DatabaseSessionManager,
        models: dict[RecordKind, type],
        resolves_references: bool,
    ):
        self._manager = manager
        self._models = models
        self.tier = manager.tier
        self.resolves_references = resolves_references

    def _model(self, kind: RecordKind) -> type:
        return self._models[RecordKind(kind)]

    def _order_by(self, kind: RecordKind, model: type, sort: tuple[SortKey, ...]):
        spec = get_kind_spec(kind)
        order = []
        for key in sort:
            expr = getattr(model, key.field)
            if key.field == spec.timestamp_field and spec.fallback_field:
                expr = func.coalesce(expr, getattr(model, spec.fallback_field))
            order.append((expr.desc() if key.descending else expr.asc()).nulls_last())
        order.append(model.id.asc())
        return order

    async def count(self, kind: RecordKind, filter: Filter) -> int:
        model = self._model(kind)
        stmt = (
            select(func.count())
            .select_from(model)
            .where(*compile_filter(model, filter))
        )
        async with self._manager.session() as db:
            result = await db.execute(stmt)
            return result.scalar_one()

    async def find(
        self,
        kind: RecordKind,
        filter: Filter,
        sort: tuple[SortKey, ...],
        skip: int,
        limit: int,
        reference_paths: list[ReferencePath],
    ) -> list[Record]:
        model = self._model(kind)
        stmt = (
            select(model)
            .where(*compile_filter(model, filter))
            .order_by(*self._order_by(kind, model, sort))
            .offset(skip)
            .limit(limit)
        )
        native_paths = reference_paths if self.resolves_references else []
        if native_paths:
            stmt = stmt.options(
                *(selectinload(getattr(model, p.name)) for p in native_paths)
            )

        async with self._manager.session() as db:
            result = await db.execute(stmt)
            rows = result.scalars().all()
            records = []
            for row in rows:
                record = serialize_row(row)
                for path in native_paths:
                    target = getattr(row, path.name)
                    record[path.name] = (
                        project(target, path.projection) if target is not None else None
                    )
                records.append(record)
        return records


class SqlReferenceStore:
    """Batch lookups of reference entities (users, products, ...) on the hot tier."""

    def __init__(
        self, manager: DatabaseSessionManager, models: dict[str, type],
    ):
        self._manager = manager
        self._models = models

    async def fetch_many(
        self, path: ReferencePath, ids: Iterable[Any],
    ) -> dict[Any, Record]:
        wanted = list(ids)
        if not wanted:
            return {}
        model = self._models[path.target]
        stmt = select(model).where(model.id.in_(wanted))
        async with self._manager.session() as db:
            result = await db.execute(stmt)
            rows = result.scalars().all()
            found = {row.id: project(row, path.projection) for row in rows}
        logger.debug(
            f"Resolved {len(found)}/{len(wanted)} {path.name} references",
            extra={"path": path.name},
        )
        return found
