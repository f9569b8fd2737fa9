"""Ledger Schemas — Pydantic models for federated query responses.

Invariants:
    - total == hot_count + cold_count (copied from FederatedPage, never recomputed)
    - degraded is True iff at least one queried tier failed
    - records are passed through as plain dicts; cold records carry original_id

Design Decisions:
    - Response mirrors FederatedPage field-for-field so callers can compare
      hot_count/cold_count with from_hot/from_cold as before, plus the explicit
      degraded_tiers marker
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from ledgerfed.core.domain_types import FederatedPage, Tier


class FederatedPageResponse(BaseModel):
    """One page of a federated ledger query."""
    records: list[dict[str, Any]] = []
    total: int = 0
    from_hot: int = 0
    from_cold: int = 0
    hot_count: int = 0
    cold_count: int = 0
    threshold: datetime
    queried_tiers: list[Tier] = []
    degraded_tiers: list[Tier] = []
    degraded: bool = False

    @classmethod
    def from_page(cls, page: FederatedPage) -> "FederatedPageResponse":
        return cls(
            records=page.records,
            total=page.total,
            from_hot=page.from_hot,
            from_cold=page.from_cold,
            hot_count=page.hot_count,
            cold_count=page.cold_count,
            threshold=page.threshold,
            queried_tiers=list(page.queried_tiers),
            degraded_tiers=list(page.degraded_tiers),
            degraded=page.degraded,
        )
