"""ORM Models — SQLAlchemy declarative models for both tiers.

Invariants:
    - Hot models inherit from HotBase, cold (archive) models from ColdBase
    - Each ledger's columns are declared once in a mixin shared by both tiers
    - All models imported here so string-based relationship() references
      resolve before any query runs

Design Decisions:
    - One file per ledger for locality; reference entities grouped in reference.py
    - Kind → model maps live here so infrastructure never hardcodes table names
"""

from ledgerfed.core.domain_types import RecordKind
from ledgerfed.models.reference import User, Product, Shopkeeper
from ledgerfed.models.sale import Sale, SaleArchive
from ledgerfed.models.payment import Payment, PaymentArchive
from ledgerfed.models.dealer_request import DealerRequest, DealerRequestArchive

HOT_MODELS = {
    RecordKind.SALE: Sale,
    RecordKind.PAYMENT: Payment,
    RecordKind.REQUEST: DealerRequest,
}

COLD_MODELS = {
    RecordKind.SALE: SaleArchive,
    RecordKind.PAYMENT: PaymentArchive,
    RecordKind.REQUEST: DealerRequestArchive,
}

# Reference targets live only in the hot tier
REFERENCE_MODELS = {
    "user": User,
    "product": Product,
    "shopkeeper": Shopkeeper,
    "dealer_request": DealerRequest,
}

__all__ = [
    "User", "Product", "Shopkeeper",
    "Sale", "SaleArchive",
    "Payment", "PaymentArchive",
    "DealerRequest", "DealerRequestArchive",
    "HOT_MODELS", "COLD_MODELS", "REFERENCE_MODELS",
]
