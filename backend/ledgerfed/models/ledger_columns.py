"""Ledger Column Helpers — tier-aware foreign keys and shared timestamps.

Invariants:
    - Hot ledger rows carry real FOREIGN KEY constraints to reference tables
    - Cold ledger rows carry the same id columns without constraints, since the
      referenced tables live in the other database
    - created_at / updated_at are timezone-aware and default to now (UTC)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from ledgerfed.db.base import ColdBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def reference_column(target: str, nullable: bool = False):
    """Foreign-key id column: constrained on hot, plain indexed UUID on cold."""

    @declared_attr
    def column(cls) -> Mapped[uuid.UUID]:
        if issubclass(cls, ColdBase):
            return mapped_column(UUID(as_uuid=True), nullable=nullable, index=True)
        return mapped_column(
            UUID(as_uuid=True), ForeignKey(target), nullable=nullable, index=True,
        )

    return column


class IdentityColumns:
    """Primary key shared by every ledger row."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )


class TimestampColumns:
    """Bookkeeping timestamps present on every ledger row."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
