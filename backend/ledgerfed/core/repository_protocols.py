"""Boundary Protocols — contracts between the federation core and the datastores.

Invariants:
    - Core and services depend on these Protocols, never on concrete stores
    - Store implementations are injected at construction (no module singletons)
    - Store methods raise DatabaseError-family errors on failure

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Hot and cold share one TierStore surface; only hot honours reference_paths
      natively, cold returns bare foreign keys for the resolver to fill in
"""

from typing import Any, Iterable, Protocol

from ledgerfed.core.domain_types import Filter, Record, RecordKind, SortKey, Tier
from ledgerfed.core.record_kinds import ReferencePath


class TierStore(Protocol):
    """Contract for one tier's ledger queries — implemented by infrastructure."""
    tier: Tier
    resolves_references: bool

    async def count(self, kind: RecordKind, filter: Filter) -> int: ...

    async def find(
        self,
        kind: RecordKind,
        filter: Filter,
        sort: tuple[SortKey, ...],
        skip: int,
        limit: int,
        reference_paths: list[ReferencePath],
    ) -> list[Record]: ...


class ReferenceStore(Protocol):
    """Contract for batch reference lookups — in practice backed by the hot tier."""
    async def fetch_many(
        self, path: ReferencePath, ids: Iterable[Any],
    ) -> dict[Any, Record]: ...
