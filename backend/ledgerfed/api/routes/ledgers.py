"""Ledger Routes — GET endpoint for federated sale, payment and request queries.

Invariants:
    - start/end bound the kind's designated timestamp field, both inclusive
    - Any other query parameter must be a whitelisted equality filter of the kind
    - Tier degradation is reported in the body (degraded_tiers), never as an HTTP error

Design Decisions:
    - Engine read from app.state: created once in the lifespan, swapped in tests
    - Filter built here, routed and merged by the engine — no federation logic in the route
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request

from ledgerfed.core.domain_types import Filter
from ledgerfed.core.errors import InvalidFilterError, ErrorContext
from ledgerfed.core.record_kinds import KindSpec, get_kind_spec
from ledgerfed.schemas.ledger import FederatedPageResponse
from ledgerfed.services.federation import FederationEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ledgers", tags=["ledgers"])

_RESERVED_PARAMS = {"start", "end", "sort", "skip", "limit", "populate"}


def get_engine(request: Request) -> FederationEngine:
    """FastAPI dependency for the federation engine."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Federation engine not initialized")
    return engine


def build_filter(
    spec: KindSpec,
    params: dict[str, str],
    start: datetime | None,
    end: datetime | None,
) -> Filter:
    """Translate query parameters into a filter map for `spec`."""
    filter: Filter = {}
    for key, value in params.items():
        if key in _RESERVED_PARAMS:
            continue
        if key not in spec.filter_fields:
            raise InvalidFilterError(
                f"'{key}' is not a filterable field of the {spec.kind.value} ledger",
                key,
                ErrorContext(kind=spec.kind.value),
            )
        filter[key] = value

    bounds = {}
    if start is not None:
        bounds["$gte"] = start
    if end is not None:
        bounds["$lte"] = end
    if bounds:
        filter[spec.timestamp_field] = bounds
    return filter


@router.get("/{kind}", response_model=FederatedPageResponse)
async def query_ledger(
    kind: str,
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
    sort: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
    populate: str | None = None,
    engine: FederationEngine = Depends(get_engine),
):
    """Federated page of one ledger across the hot and cold tiers."""
    spec = get_kind_spec(kind)
    filter = build_filter(spec, dict(request.query_params), start, end)
    page = await engine.query(
        spec.kind,
        filter,
        sort=sort,
        skip=skip,
        limit=limit,
        reference_paths=populate,
    )
    return FederatedPageResponse.from_page(page)
