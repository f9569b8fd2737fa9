"""Date Extractor tests — routing range extraction from filter predicates.

Tests cover:
    - Absent/empty predicate → None
    - Bare value → exact point range
    - Operator inclusivity preserved
    - Lenient collapse (exclusive wins) vs strict rejection
    - Fallback field used only when the designated field is absent
    - Timestamp parsing of strings, dates and malformed input
"""

from datetime import date, datetime, timezone

import pytest

from ledgerfed.core.domain_types import BoundOp, DateBound
from ledgerfed.core.errors import AmbiguousDateBoundError, InvalidFilterError
from ledgerfed.core.extract_date_range import (
    extract_range, extract_routing_range, parse_timestamp,
)

JAN = datetime(2024, 1, 1, tzinfo=timezone.utc)
JUN = datetime(2024, 6, 1, tzinfo=timezone.utc)


# --- Absent predicates --------------------------------------------------------

def test_missing_field_returns_none():
    assert extract_range({"status": "paid"}, "sale_date") is None


def test_empty_predicate_returns_none():
    assert extract_range({"sale_date": {}}, "sale_date") is None


def test_only_unrelated_operators_is_unbounded():
    result = extract_range({"sale_date": {"$ne": None}}, "sale_date")
    assert result is not None
    assert result.unbounded


# --- Bounds -------------------------------------------------------------------

def test_bare_value_is_exact_point():
    result = extract_range({"sale_date": JAN}, "sale_date")
    assert result.exact
    assert result.start == DateBound(BoundOp.GTE, JAN)
    assert result.end == DateBound(BoundOp.LTE, JAN)


def test_eq_operator_is_exact_point():
    result = extract_range({"sale_date": {"$eq": JAN}}, "sale_date")
    assert result.exact
    assert result.start.value == result.end.value == JAN


def test_inclusive_and_exclusive_bounds_preserved():
    result = extract_range({"sale_date": {"$gt": JAN, "$lte": JUN}}, "sale_date")
    assert result.start == DateBound(BoundOp.GT, JAN)
    assert result.end == DateBound(BoundOp.LTE, JUN)
    assert not result.exact


def test_one_sided_lower_bound():
    result = extract_range({"sale_date": {"$gte": JAN}}, "sale_date")
    assert result.start == DateBound(BoundOp.GTE, JAN)
    assert result.end is None


def test_lenient_conflict_exclusive_wins():
    result = extract_range(
        {"sale_date": {"$gte": JAN, "$gt": JUN, "$lt": JUN, "$lte": JAN}},
        "sale_date",
    )
    assert result.start == DateBound(BoundOp.GT, JUN)
    assert result.end == DateBound(BoundOp.LT, JUN)


def test_strict_conflict_raises():
    with pytest.raises(AmbiguousDateBoundError) as exc:
        extract_range(
            {"sale_date": {"$gte": JAN, "$gt": JAN}}, "sale_date", strict=True,
        )
    assert exc.value.http_status == 400


def test_strict_accepts_one_bound_per_side():
    result = extract_range(
        {"sale_date": {"$gte": JAN, "$lt": JUN}}, "sale_date", strict=True,
    )
    assert result.start.op is BoundOp.GTE
    assert result.end.op is BoundOp.LT


# --- Fallback routing ---------------------------------------------------------

def test_fallback_used_when_designated_absent():
    result = extract_routing_range(
        {"created_at": {"$gte": JAN}}, "transaction_date", "created_at",
    )
    assert result.field == "created_at"


def test_designated_field_wins_over_fallback():
    result = extract_routing_range(
        {"transaction_date": {"$gte": JUN}, "created_at": {"$gte": JAN}},
        "transaction_date",
        "created_at",
    )
    assert result.field == "transaction_date"
    assert result.start.value == JUN


def test_no_fallback_means_no_routing_range():
    assert extract_routing_range({"created_at": {"$gte": JAN}}, "sale_date") is None


# --- Parsing ------------------------------------------------------------------

def test_parse_iso_string_with_z():
    assert parse_timestamp("2024-01-01T00:00:00Z", "sale_date") == JAN


def test_parse_naive_string_as_utc():
    assert parse_timestamp("2024-06-01T00:00:00", "sale_date") == JUN


def test_parse_date_as_midnight_utc():
    assert parse_timestamp(date(2024, 1, 1), "sale_date") == JAN


def test_parse_malformed_raises_invalid_filter():
    with pytest.raises(InvalidFilterError) as exc:
        extract_range({"sale_date": {"$gte": "yesterday"}}, "sale_date")
    assert exc.value.code == "INVALID_FILTER"
