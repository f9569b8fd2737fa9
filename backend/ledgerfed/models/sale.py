"""Sale ORM — a salesman's sale of product packets, hot and archived forms.

Invariants:
    - sale_date is the designated timestamp: it alone decides hot vs cold
    - salesman, dealer and product are required references; shopkeeper is optional
    - SaleArchive has identical ledger columns plus original_id / archived_at

Design Decisions:
    - Columns declared once in SaleColumns and mixed into both tiers
    - Hot relationships use lazy="raise": references load only when a query asks
      for them via selectinload, never implicitly inside async code
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerfed.db.base import HotBase, ColdBase, ArchivedColumns
from ledgerfed.models.ledger_columns import (
    IdentityColumns, TimestampColumns, reference_column,
)


class SaleColumns(IdentityColumns, TimestampColumns):
    """Ledger columns shared by sales and sales_archive."""

    salesman_id = reference_column("users.id")
    dealer_id = reference_column("users.id")
    product_id = reference_column("products.id")
    shopkeeper_id = reference_column("shopkeepers.id", nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    strips: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    invoice_no: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", index=True,
    )
    district: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False, default="cash")
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="completed",
    )
    bill_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sale_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )


class Sale(SaleColumns, HotBase):
    """Recent sale, resolvable natively against reference tables."""
    __tablename__ = "sales"

    salesman: Mapped["User"] = relationship(
        "User", foreign_keys="Sale.salesman_id", lazy="raise",
    )
    dealer: Mapped["User"] = relationship(
        "User", foreign_keys="Sale.dealer_id", lazy="raise",
    )
    product: Mapped["Product"] = relationship("Product", lazy="raise")
    shopkeeper: Mapped["Shopkeeper"] = relationship("Shopkeeper", lazy="raise")


class SaleArchive(SaleColumns, ArchivedColumns, ColdBase):
    """Sale moved to the archive database by the archiver."""
    __tablename__ = "sales_archive"
