"""DealerRequest ORM — a dealer's stock request, hot and archived forms.

Invariants:
    - requested_at is the designated timestamp; created_at is its fallback
    - The hot table doubles as a reference target for payments.dealer_request_id
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerfed.db.base import HotBase, ColdBase, ArchivedColumns
from ledgerfed.models.ledger_columns import (
    IdentityColumns, TimestampColumns, reference_column,
)


class DealerRequestColumns(IdentityColumns, TimestampColumns):
    """Ledger columns shared by dealer_requests and dealer_requests_archive."""

    dealer_id = reference_column("users.id")
    product_id = reference_column("products.id")
    processed_by_id = reference_column("users.id", nullable=True)

    strips: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    payment_type: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    total_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    paid_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    order_group_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    requested_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )


class DealerRequest(DealerRequestColumns, HotBase):
    """Recent dealer request."""
    __tablename__ = "dealer_requests"

    dealer: Mapped["User"] = relationship(
        "User", foreign_keys="DealerRequest.dealer_id", lazy="raise",
    )
    processed_by: Mapped["User"] = relationship(
        "User", foreign_keys="DealerRequest.processed_by_id", lazy="raise",
    )
    product: Mapped["Product"] = relationship("Product", lazy="raise")


class DealerRequestArchive(DealerRequestColumns, ArchivedColumns, ColdBase):
    """Dealer request moved to the archive database."""
    __tablename__ = "dealer_requests_archive"
