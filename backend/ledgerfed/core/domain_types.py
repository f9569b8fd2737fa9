"""Domain Types — value objects shared by the planner, executor and merger.

Invariants:
    - Tier and RecordKind are str Enums — no raw string matching in domain logic
    - DateBound always holds a timezone-aware UTC datetime
    - A record's tier is never stored on the record; it is implied by original_id
    - FederatedPage.total == hot_count + cold_count, independent of pagination

Design Decisions:
    - Frozen dataclasses over dicts: plans and bounds are compared in tests and
      must not be mutated between planning and execution
    - Records stay plain dicts: the filter map addresses them by attribute name
      and the HTTP layer serializes them as-is
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ─── Identity / Value Types ──────────────────────────────────────

Record = dict[str, Any]
Filter = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class Tier(str, Enum):
    """The two physical datastores holding disjoint time ranges of a ledger."""
    HOT = "hot"
    COLD = "cold"


class RecordKind(str, Enum):
    """Ledger kinds served by the federation engine."""
    SALE = "sale"
    PAYMENT = "payment"
    REQUEST = "request"


class BoundOp(str, Enum):
    """Comparison operators recognized on the designated timestamp field."""
    GTE = "$gte"
    GT = "$gt"
    LTE = "$lte"
    LT = "$lt"
    EQ = "$eq"

    @property
    def is_lower(self) -> bool:
        return self in (BoundOp.GTE, BoundOp.GT)

    @property
    def is_upper(self) -> bool:
        return self in (BoundOp.LTE, BoundOp.LT)

    @property
    def inclusive(self) -> bool:
        return self in (BoundOp.GTE, BoundOp.LTE, BoundOp.EQ)


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class DateBound:
    """One side of a date range, keeping the caller's operator."""
    op: BoundOp
    value: datetime

    def as_filter(self) -> dict[str, datetime]:
        return {self.op.value: self.value}


@dataclass(frozen=True)
class DateRange:
    """Routing range extracted from the timestamp predicate of a filter.

    start/end are None when the side is unbounded. `exact` marks a bare-value
    predicate (start == end, both inclusive) so it can be written back as equality.
    """
    field: str
    start: DateBound | None = None
    end: DateBound | None = None
    exact: bool = False

    @property
    def unbounded(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True)
class SortKey:
    """A single sort column and its direction."""
    field: str
    descending: bool = True

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


@dataclass(frozen=True)
class QueryPlan:
    """Which tiers to hit and the sub-filter each one receives."""
    query_hot: bool
    query_cold: bool
    hot_filter: Filter
    cold_filter: Filter
    threshold: datetime

    @property
    def query_both(self) -> bool:
        return self.query_hot and self.query_cold

    @property
    def tiers(self) -> tuple[Tier, ...]:
        selected = []
        if self.query_hot:
            selected.append(Tier.HOT)
        if self.query_cold:
            selected.append(Tier.COLD)
        return tuple(selected)


@dataclass
class TierResult:
    """One tier's contribution: a page of records and the tier-wide match count."""
    tier: Tier
    records: list[Record] = field(default_factory=list)
    matched_count: int = 0
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


@dataclass
class FederatedPage:
    """Merged, globally ordered result of a federated query."""
    records: list[Record]
    total: int
    from_hot: int
    from_cold: int
    hot_count: int
    cold_count: int
    threshold: datetime
    queried_tiers: tuple[Tier, ...] = ()
    degraded_tiers: tuple[Tier, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_tiers)
