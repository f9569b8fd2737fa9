"""Query Planner tests — tier selection and straddle splitting.

Tests cover:
    - Selection rules for bounded, one-sided, exact and absent ranges
    - Split: hot gets [max(start, T), end], cold gets [start, T)
    - The boundary instant T belongs to hot only
    - Non-timestamp filter entries pass through untouched
    - Contradictory ranges never raise
    - defensive_open_ranges widens one-sided ranges to both tiers
"""

from datetime import datetime, timezone

from ledgerfed.core.domain_types import BoundOp, DateBound, DateRange
from ledgerfed.core.extract_date_range import extract_range
from ledgerfed.core.plan_query import plan_query, select_tiers, split_range

T = datetime(2023, 1, 1, tzinfo=timezone.utc)
OLD = datetime(2021, 6, 1, tzinfo=timezone.utc)
OLDER = datetime(2020, 1, 1, tzinfo=timezone.utc)
RECENT = datetime(2024, 6, 1, tzinfo=timezone.utc)
NEWER = datetime(2024, 12, 31, tzinfo=timezone.utc)


def _plan(filter, defensive=False, field="sale_date"):
    return plan_query(filter, extract_range(filter, field), T, defensive)


# --- Tier selection -----------------------------------------------------------

def test_no_range_queries_both_with_unchanged_filter():
    filter = {"dealer_id": "d1"}
    plan = _plan(filter)
    assert plan.query_both
    assert plan.hot_filter == filter
    assert plan.cold_filter == filter
    assert plan.hot_filter is not filter


def test_recent_range_is_hot_only():
    plan = _plan({"sale_date": {"$gte": RECENT, "$lte": NEWER}})
    assert plan.query_hot and not plan.query_cold


def test_old_range_is_cold_only():
    plan = _plan({"sale_date": {"$gte": OLDER, "$lte": OLD}})
    assert plan.query_cold and not plan.query_hot


def test_lower_only_below_threshold_is_cold_only():
    # No upper bound and a lower bound in the cold range: cold only
    plan = _plan({"sale_date": {"$gte": OLD}})
    assert plan.query_cold and not plan.query_hot


def test_upper_only_after_threshold_is_hot_only():
    plan = _plan({"sale_date": {"$lte": RECENT}})
    assert plan.query_hot and not plan.query_cold


def test_exclusive_upper_bound_at_threshold_is_hot_only():
    # Upper-only ranges route on end >= T, even when the bound itself excludes T
    plan = _plan({"sale_date": {"$lt": T}})
    assert plan.query_hot and not plan.query_cold
    assert plan.hot_filter["sale_date"] == {"$lt": T}


def test_exclusive_upper_bound_below_threshold_is_cold_only():
    plan = _plan({"sale_date": {"$lt": datetime(2022, 12, 31, tzinfo=timezone.utc)}})
    assert plan.query_cold and not plan.query_hot


def test_lower_only_after_threshold_is_hot_only():
    plan = _plan({"sale_date": {"$gte": RECENT}})
    assert plan.query_hot and not plan.query_cold


def test_exact_threshold_point_is_hot_only():
    plan = _plan({"sale_date": T})
    assert plan.query_hot and not plan.query_cold
    assert plan.hot_filter["sale_date"] == {"$eq": T}


def test_exact_old_point_is_cold_only():
    plan = _plan({"sale_date": OLD})
    assert plan.query_cold and not plan.query_hot


def test_at_least_one_tier_always_selected():
    cases = [
        None,
        DateRange("sale_date"),
        DateRange("sale_date", start=DateBound(BoundOp.GT, T)),
        DateRange("sale_date", end=DateBound(BoundOp.LT, T)),
        DateRange("sale_date", DateBound(BoundOp.GTE, RECENT), DateBound(BoundOp.LTE, OLD)),
    ]
    for date_range in cases:
        for defensive in (False, True):
            assert any(select_tiers(date_range, T, defensive))


def test_defensive_lower_only_below_threshold_queries_both():
    plan = _plan({"sale_date": {"$gte": OLD}}, defensive=True)
    assert plan.query_both
    assert plan.hot_filter["sale_date"] == {"$gte": T}
    assert plan.cold_filter["sale_date"] == {"$gte": OLD, "$lt": T}


def test_defensive_upper_only_after_threshold_queries_both():
    plan = _plan({"sale_date": {"$lte": RECENT}}, defensive=True)
    assert plan.query_both
    assert plan.hot_filter["sale_date"] == {"$gte": T, "$lte": RECENT}
    assert plan.cold_filter["sale_date"] == {"$lt": T}


def test_defensive_keeps_fully_bounded_selection():
    plan = _plan({"sale_date": {"$gte": RECENT, "$lte": NEWER}}, defensive=True)
    assert plan.query_hot and not plan.query_cold


# --- Splitting ----------------------------------------------------------------

def test_straddling_range_splits_at_threshold():
    plan = _plan({"sale_date": {"$gte": OLD, "$lte": RECENT}})
    assert plan.query_both
    assert plan.hot_filter["sale_date"] == {"$gte": T, "$lte": RECENT}
    assert plan.cold_filter["sale_date"] == {"$gte": OLD, "$lt": T}


def test_split_preserves_caller_exclusive_operators():
    plan = _plan({"sale_date": {"$gt": OLD, "$lt": RECENT}})
    assert plan.hot_filter["sale_date"] == {"$gte": T, "$lt": RECENT}
    assert plan.cold_filter["sale_date"] == {"$gt": OLD, "$lt": T}


def test_split_ranges_are_disjoint_at_threshold():
    date_range = DateRange(
        "sale_date", DateBound(BoundOp.GTE, OLD), DateBound(BoundOp.LTE, RECENT),
    )
    (hot_start, _), (_, cold_end) = split_range(date_range, T)
    assert hot_start == DateBound(BoundOp.GTE, T)
    assert cold_end == DateBound(BoundOp.LT, T)


def test_split_keeps_other_filter_entries():
    plan = _plan({
        "dealer_id": "d1",
        "payment_status": {"$in": ["completed", "pending"]},
        "sale_date": {"$gte": OLD, "$lte": RECENT, "$ne": None},
    })
    for sub in (plan.hot_filter, plan.cold_filter):
        assert sub["dealer_id"] == "d1"
        assert sub["payment_status"] == {"$in": ["completed", "pending"]}
        assert sub["sale_date"]["$ne"] is None


def test_split_does_not_mutate_input_filter():
    filter = {"sale_date": {"$gte": OLD, "$lte": RECENT}}
    _plan(filter)
    assert filter == {"sale_date": {"$gte": OLD, "$lte": RECENT}}


def test_contradictory_range_does_not_raise():
    plan = _plan({"sale_date": {"$gte": RECENT, "$lte": OLD}})
    assert plan.query_both
    assert plan.hot_filter["sale_date"] == {"$gte": RECENT, "$lte": OLD}
    assert plan.cold_filter["sale_date"] == {"$gte": RECENT, "$lte": OLD}


def test_fallback_field_is_rewritten_when_routing_on_it():
    filter = {"created_at": {"$gte": OLD, "$lte": RECENT}}
    plan = _plan(filter, field="created_at")
    assert plan.hot_filter["created_at"] == {"$gte": T, "$lte": RECENT}
    assert "transaction_date" not in plan.hot_filter
