"""FederatedPageResponse — serialization of a FederatedPage for the HTTP layer.

Invariants:
    - Counters and threshold copied verbatim
    - Tiers serialize as their string values
    - degraded mirrors the page's degraded_tiers
"""

import uuid
from datetime import datetime, timezone

from ledgerfed.core.domain_types import FederatedPage, Tier
from ledgerfed.schemas.ledger import FederatedPageResponse

T = datetime(2023, 1, 1, tzinfo=timezone.utc)


def _page(**overrides):
    fields = dict(
        records=[{"id": uuid.uuid4(), "sale_date": T}],
        total=7, from_hot=1, from_cold=0, hot_count=3, cold_count=4,
        threshold=T, queried_tiers=(Tier.HOT, Tier.COLD), degraded_tiers=(),
    )
    fields.update(overrides)
    return FederatedPage(**fields)


def test_counters_copied():
    resp = FederatedPageResponse.from_page(_page())
    assert (resp.total, resp.hot_count, resp.cold_count) == (7, 3, 4)
    assert (resp.from_hot, resp.from_cold) == (1, 0)
    assert resp.threshold == T


def test_tiers_serialize_as_strings():
    data = FederatedPageResponse.from_page(_page()).model_dump(mode="json")
    assert data["queried_tiers"] == ["hot", "cold"]
    assert data["degraded"] is False


def test_degraded_page_flagged():
    resp = FederatedPageResponse.from_page(_page(degraded_tiers=(Tier.COLD,)))
    assert resp.degraded
    assert resp.degraded_tiers == [Tier.COLD]


def test_record_values_json_serializable():
    data = FederatedPageResponse.from_page(_page()).model_dump(mode="json")
    record = data["records"][0]
    assert isinstance(record["id"], str)
    assert record["sale_date"].startswith("2023-01-01")
