"""Payment ORM — money moving between dealer and company, hot and archived forms.

Invariants:
    - transaction_date is the designated timestamp; created_at is its documented
      fallback when a payment carries no transaction date
    - dealer is required; dealer_request and processed_by are optional
"""

from datetime import datetime

from sqlalchemy import String, Text, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledgerfed.db.base import HotBase, ColdBase, ArchivedColumns
from ledgerfed.models.ledger_columns import (
    IdentityColumns, TimestampColumns, reference_column,
)


class PaymentColumns(IdentityColumns, TimestampColumns):
    """Ledger columns shared by payments and payments_archive."""

    dealer_id = reference_column("users.id")
    dealer_request_id = reference_column("dealer_requests.id", nullable=True)
    processed_by_id = reference_column("users.id", nullable=True)

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False, default="upi")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reconciled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    transaction_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )


class Payment(PaymentColumns, HotBase):
    """Recent payment."""
    __tablename__ = "payments"

    dealer: Mapped["User"] = relationship(
        "User", foreign_keys="Payment.dealer_id", lazy="raise",
    )
    processed_by: Mapped["User"] = relationship(
        "User", foreign_keys="Payment.processed_by_id", lazy="raise",
    )
    dealer_request: Mapped["DealerRequest"] = relationship(
        "DealerRequest", lazy="raise",
    )


class PaymentArchive(PaymentColumns, ArchivedColumns, ColdBase):
    """Payment moved to the archive database."""
    __tablename__ = "payments_archive"
