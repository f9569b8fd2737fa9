"""Result Merger — combines tier pages into one globally ordered FederatedPage.

Invariants:
    - Single-tier results are returned in the tier's own order, unchanged
    - Two-tier results are re-sorted by the requested keys, then truncated to limit
    - total == hot_count + cold_count regardless of limit or skip
    - from_hot / from_cold count records actually present in the returned page

Design Decisions:
    - The designated timestamp field reads the kind's fallback field when null,
      so payments without a transaction date still order by creation time
    - None sorts last in both directions; record id breaks ties so repeated
      identical calls return identical pages
    - Offset pagination is applied per tier upstream; pages past the first may
      drift from true global order when both tiers contribute (accepted for the
      shallow paging the ledgers use)
"""

from datetime import datetime

from ledgerfed.core.domain_types import (
    FederatedPage, Record, SortKey, Tier, TierResult,
)
from ledgerfed.core.record_kinds import KindSpec


def sort_value(record: Record, field: str, spec: KindSpec):
    """Value used to order `record` on `field`, honouring the kind's fallback."""
    value = record.get(field)
    if value is None and field == spec.timestamp_field and spec.fallback_field:
        value = record.get(spec.fallback_field)
    return value


def _sort_tagged(
    tagged: list[tuple[Tier, Record]], sort: tuple[SortKey, ...], spec: KindSpec,
) -> list[tuple[Tier, Record]]:
    """Stable multi-key sort: least significant key first."""
    ordered = sorted(tagged, key=lambda item: str(item[1].get("id", "")))
    for key in reversed(sort):
        if key.descending:
            ordered.sort(
                key=lambda item: _present_first(sort_value(item[1], key.field, spec)),
                reverse=True,
            )
        else:
            ordered.sort(
                key=lambda item: _absent_last(sort_value(item[1], key.field, spec)),
            )
    return ordered


def _present_first(value):
    return (value is not None, value)


def _absent_last(value):
    return (value is None, value)


def merge_results(
    spec: KindSpec,
    results: list[TierResult],
    sort: tuple[SortKey, ...],
    limit: int,
    threshold: datetime,
) -> FederatedPage:
    """Merge one or two TierResults into a FederatedPage."""
    by_tier = {r.tier: r for r in results}
    hot = by_tier.get(Tier.HOT)
    cold = by_tier.get(Tier.COLD)

    tagged = [(r.tier, rec) for r in results for rec in r.records]
    if len(results) > 1:
        tagged = _sort_tagged(tagged, sort, spec)[:limit]

    hot_count = hot.matched_count if hot else 0
    cold_count = cold.matched_count if cold else 0
    return FederatedPage(
        records=[rec for _, rec in tagged],
        total=hot_count + cold_count,
        from_hot=sum(1 for tier, _ in tagged if tier is Tier.HOT),
        from_cold=sum(1 for tier, _ in tagged if tier is Tier.COLD),
        hot_count=hot_count,
        cold_count=cold_count,
        threshold=threshold,
        queried_tiers=tuple(r.tier for r in results),
        degraded_tiers=tuple(r.tier for r in results if r.degraded),
    )
