"""Federation Engine — answers ledger queries across the hot and cold tiers.

Invariants:
    - Threshold recomputed on every call from the injected clock (never cached)
    - Exactly one routing field per kind (designated, or its documented fallback)
    - Hot and cold executors run concurrently; either may degrade without failing the call
    - total == hot_count + cold_count; degraded tiers reported on the page
    - Caller errors (unknown kind, bad sort field, bad pagination) raise before any IO

Design Decisions:
    - Store handles injected at construction (from_settings wires the SQL stores)
    - Per-kind facades (engine.sales / .payments / .requests) are pure composition:
      they pin the kind and delegate, carrying no algorithm of their own
    - Skip is passed to each tier unchanged; see core/merge_results.py for the
      resulting approximation on deep pages
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from ledgerfed.config import Settings
from ledgerfed.core.domain_types import (
    FederatedPage, Filter, QueryPlan, RecordKind, SortKey,
)
from ledgerfed.core.errors import InvalidQueryError, ErrorContext
from ledgerfed.core.extract_date_range import extract_routing_range
from ledgerfed.core.merge_results import merge_results
from ledgerfed.core.plan_query import plan_query
from ledgerfed.core.record_kinds import (
    KindSpec, ReferencePath, get_kind_spec, parse_sort,
)
from ledgerfed.core.repository_protocols import ReferenceStore, TierStore
from ledgerfed.core.threshold_policy import DEFAULT_RETENTION_YEARS, current_threshold
from ledgerfed.infrastructure.database import TierDatabases
from ledgerfed.infrastructure.tier_store import SqlReferenceStore, SqlTierStore
from ledgerfed.models import COLD_MODELS, HOT_MODELS, REFERENCE_MODELS
from ledgerfed.services.tier_executor import execute_tier

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KindFederation:
    """Federated queries for one ledger kind."""

    def __init__(self, engine: "FederationEngine", kind: RecordKind):
        self._engine = engine
        self.spec = get_kind_spec(kind)

    async def query(self, filter: Filter | None = None, **options: Any) -> FederatedPage:
        return await self._engine.query(self.spec.kind, filter, **options)

    def plan(self, filter: Filter | None = None) -> QueryPlan:
        return self._engine.plan(self.spec.kind, filter)


class FederationEngine:
    """Plans, executes and merges federated ledger queries."""

    def __init__(
        self,
        hot_store: TierStore,
        cold_store: TierStore,
        reference_store: ReferenceStore,
        *,
        retention_years: int = DEFAULT_RETENTION_YEARS,
        default_page_size: int = 50,
        max_page_size: int = 200,
        tier_timeout_seconds: float | None = None,
        strict_date_bounds: bool = False,
        defensive_open_ranges: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._hot = hot_store
        self._cold = cold_store
        self._references = reference_store
        self._retention_years = retention_years
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._timeout = tier_timeout_seconds
        self._strict = strict_date_bounds
        self._defensive = defensive_open_ranges
        self._clock = clock

        self.sales = KindFederation(self, RecordKind.SALE)
        self.payments = KindFederation(self, RecordKind.PAYMENT)
        self.requests = KindFederation(self, RecordKind.REQUEST)

    @classmethod
    def from_settings(
        cls,
        databases: TierDatabases,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> "FederationEngine":
        """Wire SQL-backed stores for both tiers from the application settings."""
        return cls(
            SqlTierStore(databases.hot, HOT_MODELS, resolves_references=True),
            SqlTierStore(databases.cold, COLD_MODELS, resolves_references=False),
            SqlReferenceStore(databases.hot, REFERENCE_MODELS),
            retention_years=settings.retention_years,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
            tier_timeout_seconds=settings.tier_timeout_seconds,
            strict_date_bounds=settings.strict_date_bounds,
            defensive_open_ranges=settings.defensive_open_ranges,
            clock=clock,
        )

    # ─── Validation ─────────────────────────────────────────────

    def _page_size(self, limit: int | None, kind: str) -> int:
        if limit is None:
            return self._default_page_size
        if limit < 1 or limit > self._max_page_size:
            raise InvalidQueryError(
                f"limit must be between 1 and {self._max_page_size}",
                ErrorContext(kind=kind),
            )
        return limit

    @staticmethod
    def _reference_paths(
        spec: KindSpec, names: Iterable[str] | str | None,
    ) -> list[ReferencePath]:
        if not names:
            return []
        if isinstance(names, str):
            names = [n for n in names.split(",") if n.strip()]
        paths = []
        for name in names:
            path = spec.reference(name.strip())
            if path is None:
                raise InvalidQueryError(
                    f"'{name}' is not a reference path of the {spec.kind.value} ledger",
                    ErrorContext(kind=spec.kind.value, field=name),
                )
            if path not in paths:
                paths.append(path)
        return paths

    # ─── Planning ───────────────────────────────────────────────

    def plan(self, kind: RecordKind | str, filter: Filter | None = None) -> QueryPlan:
        """Tier plan for `filter` at the current threshold."""
        spec = get_kind_spec(kind)
        filter = dict(filter or {})
        threshold = current_threshold(self._clock(), self._retention_years)
        date_range = extract_routing_range(
            filter,
            spec.timestamp_field,
            spec.fallback_field if spec.fallback_routes else None,
            strict=self._strict,
        )
        return plan_query(filter, date_range, threshold, self._defensive)

    # ─── Execution ──────────────────────────────────────────────

    async def query(
        self,
        kind: RecordKind | str,
        filter: Filter | None = None,
        *,
        sort: str | tuple[SortKey, ...] | None = None,
        skip: int = 0,
        limit: int | None = None,
        reference_paths: Iterable[str] | str | None = (),
    ) -> FederatedPage:
        """Filtered, sorted, paginated query over both tiers of one ledger."""
        spec = get_kind_spec(kind)
        sort_keys = parse_sort(spec, sort)
        page_size = self._page_size(limit, spec.kind.value)
        if skip < 0:
            raise InvalidQueryError(
                "skip must be >= 0", ErrorContext(kind=spec.kind.value),
            )
        paths = self._reference_paths(spec, reference_paths)
        plan = self.plan(spec.kind, filter)

        logger.debug(
            f"Planned {spec.kind.value} query at threshold {plan.threshold.isoformat()}",
            extra={
                "kind": spec.kind.value,
                "query_hot": plan.query_hot,
                "query_cold": plan.query_cold,
            },
        )

        calls = []
        if plan.query_hot:
            calls.append(self._execute(self._hot, spec, plan.hot_filter, sort_keys, skip, page_size, paths))
        if plan.query_cold:
            calls.append(self._execute(self._cold, spec, plan.cold_filter, sort_keys, skip, page_size, paths))
        results = await asyncio.gather(*calls)

        page = merge_results(spec, list(results), sort_keys, page_size, plan.threshold)
        log = logger.warning if page.degraded else logger.info
        log(
            f"Federated {spec.kind.value} query returned {len(page.records)} of {page.total}"
            + (f" (degraded: {', '.join(t.value for t in page.degraded_tiers)})" if page.degraded else ""),
            extra={
                "kind": spec.kind.value,
                "total": page.total,
                "hot_count": page.hot_count,
                "cold_count": page.cold_count,
                "from_hot": page.from_hot,
                "from_cold": page.from_cold,
            },
        )
        return page

    def _execute(self, store, spec, filter, sort_keys, skip, limit, paths):
        return execute_tier(
            store,
            spec.kind,
            filter,
            sort=sort_keys,
            skip=skip,
            limit=limit,
            reference_paths=paths,
            reference_store=self._references,
            timeout=self._timeout,
        )
