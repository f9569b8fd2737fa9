"""Reference ORM — shared entities that ledger rows point at (hot tier only).

Invariants:
    - Users, products and shopkeepers are never archived
    - Cold ledger rows reference these by id and are resolved in batch
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Float, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ledgerfed.db.base import HotBase
from ledgerfed.models.ledger_columns import utcnow


class User(HotBase):
    """Admins, dealers and salesmen."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="dealer")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )


class Product(HotBase):
    """Sellable product, priced per packet and stocked in strips."""
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    packet_price: Mapped[float] = mapped_column(Float, nullable=False)
    initial_packet_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    packets_per_strip: Mapped[int] = mapped_column(Integer, nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Shopkeeper(HotBase):
    """Customer master record optionally linked from a sale."""
    __tablename__ = "shopkeepers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    district: Mapped[str] = mapped_column(String(100), nullable=False, default="")
