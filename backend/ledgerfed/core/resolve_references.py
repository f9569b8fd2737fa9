"""Reference Resolution (pure half) — batch id collection and stitching for cold records.

Invariants:
    - One id set per reference path across the whole page (never per record)
    - Null foreign keys are not looked up and resolve to None
    - A foreign key whose target is missing resolves to None, never raises
    - Input records are not mutated; stitched copies are returned

Design Decisions:
    - Split from the IO half (services/tier_executor.py): collecting and stitching
      are pure and unit-tested without a database; only the batch lookups are async
"""

from typing import Any

from ledgerfed.core.domain_types import Record
from ledgerfed.core.record_kinds import ReferencePath

Lookup = dict[Any, Record]


def collect_reference_ids(
    records: list[Record], paths: list[ReferencePath],
) -> dict[str, set]:
    """Distinct non-null foreign keys per path, across every record in the page."""
    ids: dict[str, set] = {path.name: set() for path in paths}
    for record in records:
        for path in paths:
            value = record.get(path.fk_field)
            if value is not None:
                ids[path.name].add(value)
    return ids


def stitch_references(
    records: list[Record],
    paths: list[ReferencePath],
    lookups: dict[str, Lookup],
) -> list[Record]:
    """Attach each resolved target under the path name (None when unresolved)."""
    stitched = []
    for record in records:
        copy = dict(record)
        for path in paths:
            fk = record.get(path.fk_field)
            target = lookups.get(path.name, {}).get(fk) if fk is not None else None
            copy[path.name] = dict(target) if target is not None else None
        stitched.append(copy)
    return stitched
