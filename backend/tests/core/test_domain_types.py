"""Domain Types — verifies enums and value objects shared across the engine.

Tests:
    - Tier and RecordKind are str Enums with stable wire values
    - BoundOp classifies sides and inclusivity
    - QueryPlan and FederatedPage derived properties
"""

from datetime import datetime, timezone

from ledgerfed.core.domain_types import (
    BoundOp, DateBound, DateRange, FederatedPage, QueryPlan,
    RecordKind, SortKey, Tier, TierResult,
)

T = datetime(2023, 1, 1, tzinfo=timezone.utc)


def test_tier_values():
    assert [t.value for t in Tier] == ["hot", "cold"]
    assert Tier("cold") is Tier.COLD


def test_record_kind_values():
    assert {k.value for k in RecordKind} == {"sale", "payment", "request"}


def test_bound_op_sides_and_inclusivity():
    assert BoundOp.GTE.is_lower and BoundOp.GT.is_lower
    assert BoundOp.LTE.is_upper and BoundOp.LT.is_upper
    assert not BoundOp.EQ.is_lower and not BoundOp.EQ.is_upper
    assert {op for op in BoundOp if op.inclusive} == {BoundOp.GTE, BoundOp.LTE, BoundOp.EQ}


def test_date_bound_as_filter():
    assert DateBound(BoundOp.LT, T).as_filter() == {"$lt": T}


def test_date_range_unbounded():
    assert DateRange("sale_date").unbounded
    assert not DateRange("sale_date", start=DateBound(BoundOp.GTE, T)).unbounded


def test_sort_key_str():
    assert str(SortKey("sale_date")) == "-sale_date"
    assert str(SortKey("amount", descending=False)) == "amount"


def test_query_plan_tiers():
    plan = QueryPlan(True, True, {}, {}, T)
    assert plan.query_both
    assert plan.tiers == (Tier.HOT, Tier.COLD)
    assert QueryPlan(False, True, {}, {}, T).tiers == (Tier.COLD,)


def test_tier_result_degraded_only_with_error():
    assert not TierResult(Tier.HOT).degraded
    assert TierResult(Tier.COLD, error="timeout").degraded


def test_federated_page_degraded():
    page = FederatedPage([], 0, 0, 0, 0, 0, T, degraded_tiers=(Tier.COLD,))
    assert page.degraded
