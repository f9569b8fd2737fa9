"""Date Extractor — turns a filter's timestamp predicate into a routing DateRange.

Invariants:
    - Absent (or empty) predicate -> None, meaning "no time restriction"
    - Bare value -> exact point range: start == end, both inclusive
    - Operator inclusivity is preserved on each DateBound for later splitting
    - Operators other than $gte/$gt/$lte/$lt/$eq are ignored for routing

Design Decisions:
    - Bounds are first collected as a tagged list of DateBound, then collapsed;
      conflicting bounds on one side are rejected in strict mode, otherwise the
      exclusive operator wins (precedence: $gte, $lte, then $gt, $lt)
    - Date parsing lives here so the planner only ever sees aware datetimes
"""

from datetime import date, datetime, time, timezone
from typing import Any

from ledgerfed.core.domain_types import BoundOp, DateBound, DateRange, Filter
from ledgerfed.core.errors import AmbiguousDateBoundError, InvalidFilterError
from ledgerfed.core.threshold_policy import to_utc

# Later entries overwrite earlier ones for the same side in lenient mode
_OPERATOR_PRECEDENCE = (
    BoundOp.EQ, BoundOp.GTE, BoundOp.LTE, BoundOp.GT, BoundOp.LT,
)


def parse_timestamp(value: Any, field: str) -> datetime:
    """Coerce datetime, date, or ISO-8601 string into an aware UTC datetime."""
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise InvalidFilterError(
        f"'{field}' bound {value!r} is not a valid timestamp", field,
    )


def collect_bounds(predicate: dict, field: str) -> list[DateBound]:
    """Tagged list of every recognized bound, in evaluation order."""
    bounds = []
    for op in _OPERATOR_PRECEDENCE:
        raw = predicate.get(op.value)
        if raw is None:
            continue
        bounds.append(DateBound(op, parse_timestamp(raw, field)))
    return bounds


def _collapse(
    bounds: list[DateBound], field: str, strict: bool,
) -> tuple[DateBound | None, DateBound | None]:
    lower = [b for b in bounds if b.op.is_lower or b.op is BoundOp.EQ]
    upper = [b for b in bounds if b.op.is_upper or b.op is BoundOp.EQ]
    if strict:
        for side in (lower, upper):
            if len(side) > 1:
                raise AmbiguousDateBoundError(field, [b.op.value for b in side])

    start = end = None
    if lower:
        b = lower[-1]
        start = DateBound(BoundOp.GTE, b.value) if b.op is BoundOp.EQ else b
    if upper:
        b = upper[-1]
        end = DateBound(BoundOp.LTE, b.value) if b.op is BoundOp.EQ else b
    return start, end


def extract_range(
    filter: Filter, field: str, strict: bool = False,
) -> DateRange | None:
    """Extract the routing range for `field`, or None when unconstrained."""
    predicate = filter.get(field)
    if predicate is None or predicate == {}:
        return None

    if not isinstance(predicate, dict):
        point = parse_timestamp(predicate, field)
        return DateRange(
            field=field,
            start=DateBound(BoundOp.GTE, point),
            end=DateBound(BoundOp.LTE, point),
            exact=True,
        )

    start, end = _collapse(collect_bounds(predicate, field), field, strict)
    exact = (
        set(predicate) == {BoundOp.EQ.value}
        and start is not None and end is not None
    )
    return DateRange(field=field, start=start, end=end, exact=exact)


def extract_routing_range(
    filter: Filter,
    field: str,
    fallback_field: str | None = None,
    strict: bool = False,
) -> DateRange | None:
    """Range on the designated field, or on its documented fallback when absent."""
    found = extract_range(filter, field, strict)
    if found is None and fallback_field:
        found = extract_range(filter, fallback_field, strict)
    return found
