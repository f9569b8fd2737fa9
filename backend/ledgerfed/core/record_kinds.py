"""Record Kinds — per-ledger parameterization of the federation engine.

Invariants:
    - Each kind has exactly one designated timestamp field governing routing
    - The fallback field is only consulted for routing when `fallback_routes` is set,
      and for merge ordering when the designated field is null
    - Reference paths name the foreign-key attribute `<path>_id` on the ledger row
    - No algorithmic logic here — pure data consumed by the planner and merger

Design Decisions:
    - Reference targets are symbolic names ("user", "product", ...) resolved to
      ORM models by the infrastructure layer, keeping core free of SQLAlchemy
    - Projections copy the field selections the ledgers have always shipped
      (users expose name/email, products expose title/pricing/image)
"""

from dataclasses import dataclass, field

from ledgerfed.core.domain_types import RecordKind, SortKey
from ledgerfed.core.errors import InvalidSortFieldError, UnknownKindError


@dataclass(frozen=True)
class ReferencePath:
    """A foreign key on a ledger row and how to project its target."""
    name: str
    target: str
    projection: tuple[str, ...]

    @property
    def fk_field(self) -> str:
        return f"{self.name}_id"


USER_PROJECTION = ("id", "name", "email")
PRODUCT_PROJECTION = (
    "id", "title", "packet_price", "initial_packet_price",
    "packets_per_strip", "image",
)
SHOPKEEPER_PROJECTION = ("id", "name", "phone", "email", "district")
DEALER_REQUEST_PROJECTION = (
    "id", "strips", "status", "total_amount", "paid_amount",
    "payment_type", "product_id", "order_group_id",
)


@dataclass(frozen=True)
class KindSpec:
    """Everything that distinguishes one ledger kind from another."""
    kind: RecordKind
    timestamp_field: str
    fallback_field: str | None
    fallback_routes: bool
    default_sort: tuple[SortKey, ...]
    reference_paths: dict[str, ReferencePath]
    sortable_fields: frozenset[str]
    filter_fields: frozenset[str] = field(default_factory=frozenset)

    def reference(self, name: str) -> ReferencePath | None:
        return self.reference_paths.get(name)


def _paths(*paths: ReferencePath) -> dict[str, ReferencePath]:
    return {p.name: p for p in paths}


SALE = KindSpec(
    kind=RecordKind.SALE,
    timestamp_field="sale_date",
    fallback_field="created_at",
    fallback_routes=False,
    default_sort=(SortKey("sale_date"), SortKey("created_at")),
    reference_paths=_paths(
        ReferencePath("salesman", "user", USER_PROJECTION),
        ReferencePath("dealer", "user", USER_PROJECTION),
        ReferencePath("product", "product", PRODUCT_PROJECTION),
        ReferencePath("shopkeeper", "shopkeeper", SHOPKEEPER_PROJECTION),
    ),
    sortable_fields=frozenset({
        "sale_date", "created_at", "updated_at", "total_amount",
        "quantity", "invoice_no",
    }),
    filter_fields=frozenset({
        "salesman_id", "dealer_id", "product_id", "shopkeeper_id",
        "payment_status", "bill_status", "payment_method", "invoice_no",
    }),
)

PAYMENT = KindSpec(
    kind=RecordKind.PAYMENT,
    timestamp_field="transaction_date",
    fallback_field="created_at",
    fallback_routes=True,
    default_sort=(SortKey("transaction_date"), SortKey("created_at")),
    reference_paths=_paths(
        ReferencePath("dealer", "user", USER_PROJECTION),
        ReferencePath("processed_by", "user", USER_PROJECTION),
        ReferencePath("dealer_request", "dealer_request", DEALER_REQUEST_PROJECTION),
    ),
    sortable_fields=frozenset({
        "transaction_date", "created_at", "updated_at", "amount",
    }),
    filter_fields=frozenset({
        "dealer_id", "dealer_request_id", "type", "status",
        "payment_method", "reconciled",
    }),
)

REQUEST = KindSpec(
    kind=RecordKind.REQUEST,
    timestamp_field="requested_at",
    fallback_field="created_at",
    fallback_routes=True,
    default_sort=(SortKey("requested_at"), SortKey("created_at")),
    reference_paths=_paths(
        ReferencePath("dealer", "user", USER_PROJECTION),
        ReferencePath("processed_by", "user", USER_PROJECTION),
        ReferencePath("product", "product", PRODUCT_PROJECTION),
    ),
    sortable_fields=frozenset({
        "requested_at", "created_at", "updated_at", "strips", "total_amount",
    }),
    filter_fields=frozenset({
        "dealer_id", "product_id", "status", "payment_status",
        "payment_type", "order_group_id",
    }),
)

KIND_SPECS: dict[RecordKind, KindSpec] = {
    spec.kind: spec for spec in (SALE, PAYMENT, REQUEST)
}


def get_kind_spec(kind: RecordKind | str) -> KindSpec:
    """Look up a kind's spec, raising UnknownKindError for anything else."""
    try:
        return KIND_SPECS[RecordKind(kind)]
    except ValueError:
        raise UnknownKindError(str(kind)) from None


def parse_sort(spec: KindSpec, sort: str | list[SortKey] | tuple | None) -> tuple[SortKey, ...]:
    """Parse "-sale_date,created_at" style sort specs and validate each field."""
    if sort is None or sort == "" or sort == ():
        return spec.default_sort

    if isinstance(sort, str):
        keys = []
        for part in sort.split(","):
            part = part.strip()
            if not part:
                continue
            if part.startswith("-"):
                keys.append(SortKey(part[1:], descending=True))
            else:
                keys.append(SortKey(part.lstrip("+"), descending=False))
    else:
        keys = list(sort)

    for key in keys:
        if key.field not in spec.sortable_fields:
            raise InvalidSortFieldError(key.field, spec.kind.value)
    return tuple(keys) or spec.default_sort
