"""In-memory stand-ins for TierStore and ReferenceStore.

Fakes ignore the filter contents (routing is asserted through the recorded
calls) and page their fixed record list with skip/limit like a real store.
"""

from datetime import datetime, timezone


class FakeTierStore:
    """Serves a fixed record list; optionally fails every call with `fail`."""

    def __init__(self, tier, records=None, resolves_references=False, fail=None):
        self.tier = tier
        self.records = list(records or [])
        self.resolves_references = resolves_references
        self.fail = fail
        self.calls = []

    async def count(self, kind, filter):
        self.calls.append(("count", kind, filter))
        if self.fail:
            raise self.fail
        return len(self.records)

    async def find(self, kind, filter, sort, skip, limit, reference_paths):
        self.calls.append(("find", kind, filter))
        if self.fail:
            raise self.fail
        return [dict(r) for r in self.records[skip:skip + limit]]


class SpyReferenceStore:
    """Records every batch lookup; `targets` maps path name → {id: entity}."""

    def __init__(self, targets=None, fail=None):
        self.targets = targets or {}
        self.fail = fail
        self.lookups = []

    async def fetch_many(self, path, ids):
        self.lookups.append((path.name, set(ids)))
        if self.fail:
            raise self.fail
        known = self.targets.get(path.name, {})
        return {i: known[i] for i in ids if i in known}


# Pinned clock: threshold lands on 2023-01-01 with the default two-year retention
NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
THRESHOLD = datetime(2023, 1, 1, tzinfo=timezone.utc)


def utc(year, month=1, day=1, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)
