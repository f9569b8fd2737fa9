"""Query Planner — decides which tier(s) to hit and splits straddling ranges.

Invariants:
    - At least one tier is always selected
    - When both tiers are queried over a date range, hot's lower bound is >= T
      and cold's upper bound is strictly < T: the instant T belongs to hot only
    - Filter entries other than the timestamp predicate pass through untouched
    - Never raises: contradictory ranges produce sub-filters that match nothing

Design Decisions:
    - Tier selection mirrors the archive router it replaces, including the
      one-sided-range asymmetry (lower-bound-only below T -> cold only,
      upper-bound-only at/after T -> hot only). `defensive_open_ranges` opts
      into querying both tiers whenever an open side reaches across T.
    - Split replaces a bound with T only when it lies on the wrong side, so a
      caller's own exclusive/inclusive operator survives whenever possible
"""

from datetime import datetime

from ledgerfed.core.domain_types import (
    BoundOp, DateBound, DateRange, Filter, QueryPlan,
)

_BOUND_OPS = {op.value for op in BoundOp}


def select_tiers(
    date_range: DateRange | None,
    threshold: datetime,
    defensive_open_ranges: bool = False,
) -> tuple[bool, bool]:
    """Return (query_hot, query_cold) for a routing range."""
    if date_range is None or date_range.unbounded:
        return True, True

    start, end = date_range.start, date_range.end
    query_cold = (
        (end is not None and end.value < threshold)
        or (start is not None and start.value < threshold)
    )
    query_hot = (
        (start is not None and start.value >= threshold)
        or (end is not None and end.value >= threshold)
    )
    if defensive_open_ranges:
        query_cold = query_cold or start is None
        query_hot = query_hot or end is None
    return query_hot, query_cold


def _rewrite_predicate(
    filter: Filter,
    date_range: DateRange,
    start: DateBound | None,
    end: DateBound | None,
) -> Filter:
    """Copy of `filter` with the timestamp predicate rebuilt from start/end."""
    original = filter.get(date_range.field)
    predicate = {}
    if isinstance(original, dict):
        predicate = {k: v for k, v in original.items() if k not in _BOUND_OPS}

    if (
        date_range.exact
        and start == date_range.start
        and end == date_range.end
    ):
        predicate[BoundOp.EQ.value] = start.value
    else:
        if start is not None:
            predicate.update(start.as_filter())
        if end is not None:
            predicate.update(end.as_filter())

    rewritten = dict(filter)
    rewritten[date_range.field] = predicate
    return rewritten


def split_range(
    date_range: DateRange, threshold: datetime,
) -> tuple[tuple[DateBound | None, DateBound | None],
           tuple[DateBound | None, DateBound | None]]:
    """Split into hot [max(start, T), end] and cold [start, min(end, T))."""
    start, end = date_range.start, date_range.end

    hot_start = start
    if start is None or start.value < threshold:
        hot_start = DateBound(BoundOp.GTE, threshold)

    cold_end = end
    if end is None or end.value >= threshold:
        cold_end = DateBound(BoundOp.LT, threshold)

    return (hot_start, end), (start, cold_end)


def plan_query(
    filter: Filter,
    date_range: DateRange | None,
    threshold: datetime,
    defensive_open_ranges: bool = False,
) -> QueryPlan:
    """Build the tier plan for `filter` given its extracted routing range."""
    query_hot, query_cold = select_tiers(
        date_range, threshold, defensive_open_ranges,
    )

    if date_range is None or date_range.unbounded:
        return QueryPlan(
            query_hot=query_hot,
            query_cold=query_cold,
            hot_filter=dict(filter),
            cold_filter=dict(filter),
            threshold=threshold,
        )

    if query_hot and query_cold:
        (hot_start, hot_end), (cold_start, cold_end) = split_range(
            date_range, threshold,
        )
        hot_filter = _rewrite_predicate(filter, date_range, hot_start, hot_end)
        cold_filter = _rewrite_predicate(filter, date_range, cold_start, cold_end)
    else:
        normalized = _rewrite_predicate(
            filter, date_range, date_range.start, date_range.end,
        )
        hot_filter = cold_filter = normalized

    return QueryPlan(
        query_hot=query_hot,
        query_cold=query_cold,
        hot_filter=hot_filter,
        cold_filter=dict(cold_filter),
        threshold=threshold,
    )
