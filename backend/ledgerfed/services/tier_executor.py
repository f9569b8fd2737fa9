"""Tier Executor — runs one sub-filter against one tier and never lets store failures escape.

Invariants:
    - matched_count counts every match in the tier, regardless of skip/limit
    - Cold pages get their references resolved in batch: one lookup per path
    - A failing or timed-out tier yields TierResult(records=[], matched_count=0, error=...)
    - A failing reference lookup leaves that path's fields None; the page is kept
    - Caller errors (InvalidFilterError, ...) propagate untouched

Design Decisions:
    - Count and page run sequentially on the tier; the two tiers run concurrently
      in the engine, bounding latency by the slower tier
    - Timeout applied here with asyncio.wait_for so a hung tier degrades exactly
      like an unreachable one
"""

import asyncio
import logging
import time

from ledgerfed.core.domain_types import Filter, Record, RecordKind, SortKey, Tier, TierResult
from ledgerfed.core.errors import DatabaseError, TierUnavailableError
from ledgerfed.core.record_kinds import ReferencePath
from ledgerfed.core.repository_protocols import ReferenceStore, TierStore
from ledgerfed.core.resolve_references import (
    collect_reference_ids, stitch_references,
)

logger = logging.getLogger(__name__)

# Everything a store client can raise when the datastore is unreachable or slow
STORE_FAILURES = (DatabaseError, ConnectionError, OSError, asyncio.TimeoutError)


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "TIER_TIMEOUT"
    return getattr(exc, "code", type(exc).__name__)


async def _fetch_references(
    reference_store: ReferenceStore, path: ReferencePath, ids: set,
) -> dict:
    try:
        return await reference_store.fetch_many(path, ids)
    except STORE_FAILURES as e:
        logger.error(
            f"Reference lookup for '{path.name}' failed: {e}",
            extra={"path": path.name, "error_code": _error_code(e)},
        )
        return {}


async def resolve_references(
    records: list[Record],
    paths: list[ReferencePath],
    reference_store: ReferenceStore,
) -> list[Record]:
    """Batch-resolve foreign keys of cold records against the reference store."""
    if not records or not paths:
        return records
    ids = collect_reference_ids(records, paths)
    wanted = [p for p in paths if ids[p.name]]
    found = await asyncio.gather(
        *(_fetch_references(reference_store, p, ids[p.name]) for p in wanted)
    )
    lookups = {p.name: lookup for p, lookup in zip(wanted, found)}
    return stitch_references(records, paths, lookups)


async def _run_tier(
    store: TierStore,
    kind: RecordKind,
    filter: Filter,
    sort: tuple[SortKey, ...],
    skip: int,
    limit: int,
    reference_paths: list[ReferencePath],
    reference_store: ReferenceStore | None,
) -> TierResult:
    matched = await store.count(kind, filter)
    records: list[Record] = []
    if limit > 0 and matched > skip:
        records = await store.find(kind, filter, sort, skip, limit, reference_paths)
    if reference_paths and not store.resolves_references and reference_store:
        records = await resolve_references(records, reference_paths, reference_store)
    return TierResult(tier=store.tier, records=records, matched_count=matched)


async def execute_tier(
    store: TierStore,
    kind: RecordKind,
    filter: Filter,
    *,
    sort: tuple[SortKey, ...],
    skip: int,
    limit: int,
    reference_paths: list[ReferencePath] | None = None,
    reference_store: ReferenceStore | None = None,
    timeout: float | None = None,
) -> TierResult:
    """Count + one page from a single tier; degrade to an empty result on store failure."""
    tier: Tier = store.tier
    started = time.monotonic()
    try:
        return await asyncio.wait_for(
            _run_tier(
                store, kind, filter, sort, skip, limit,
                list(reference_paths or []), reference_store,
            ),
            timeout,
        )
    except asyncio.TimeoutError:
        failure = TierUnavailableError(tier.value, f"no answer within {timeout}s")
    except STORE_FAILURES as e:
        failure = e

    logger.error(
        f"{tier.value} tier unavailable for {kind.value} query: {failure}",
        extra={
            "tier": tier.value,
            "kind": kind.value,
            "error_code": _error_code(failure),
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return TierResult(tier=tier, error=str(failure) or type(failure).__name__)
