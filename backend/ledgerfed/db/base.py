"""SQLAlchemy Declarative Bases — one per tier, plus the archive-only columns.

Invariants:
    - Hot models inherit from HotBase; cold models inherit from ColdBase
    - Every cold model also mixes in ArchivedColumns (original_id, archived_at)
    - No hot model ever declares original_id

Design Decisions:
    - Two bases instead of one: the tiers are separate databases and must be
      created/migrated independently (alembic -x tier=hot|cold)
    - Separate file for bases: avoids circular imports between models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class HotBase(DeclarativeBase):
    """Base class for the primary (recent + reference data) database."""
    pass


class ColdBase(DeclarativeBase):
    """Base class for the archive database."""
    pass


class ArchivedColumns:
    """Columns the archiver adds when it copies a ledger row into cold storage."""

    original_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    archived_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
