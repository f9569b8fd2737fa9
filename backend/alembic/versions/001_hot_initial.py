"""Hot tier initial schema — reference tables plus recent ledgers.

Revision ID: 001_hot_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_hot_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = ("hot",)
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="dealer"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "products",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("packet_price", sa.Float, nullable=False),
        sa.Column("initial_packet_price", sa.Float, nullable=True),
        sa.Column("packets_per_strip", sa.Integer, nullable=False),
        sa.Column("image", sa.String(500), nullable=False, server_default=""),
        sa.Column("stock", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "shopkeepers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(30), nullable=False, server_default=""),
        sa.Column("email", sa.String(320), nullable=False, server_default=""),
        sa.Column("district", sa.String(100), nullable=False, server_default=""),
    )

    op.create_table(
        "dealer_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("dealer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("product_id", UUID(as_uuid=True), sa.ForeignKey("products.id"), nullable=False, index=True),
        sa.Column("processed_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True, index=True),
        sa.Column("strips", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_type", sa.String(20), nullable=False, server_default="none"),
        sa.Column("total_amount", sa.Float, nullable=True),
        sa.Column("paid_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("order_group_id", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=True, index=True),
        *_timestamps(),
    )

    op.create_table(
        "sales",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("salesman_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("dealer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("product_id", UUID(as_uuid=True), sa.ForeignKey("products.id"), nullable=False, index=True),
        sa.Column("shopkeeper_id", UUID(as_uuid=True), sa.ForeignKey("shopkeepers.id"), nullable=True, index=True),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("strips", sa.Integer, nullable=False, server_default="0"),
        sa.Column("unit_price", sa.Float, nullable=False),
        sa.Column("total_amount", sa.Float, nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("invoice_no", sa.String(50), nullable=False, server_default="", index=True),
        sa.Column("district", sa.String(100), nullable=False, server_default=""),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="cash"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="completed"),
        sa.Column("bill_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("sale_date", sa.DateTime(timezone=True), nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "payments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("dealer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("dealer_request_id", UUID(as_uuid=True), sa.ForeignKey("dealer_requests.id"), nullable=True, index=True),
        sa.Column("processed_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True, index=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="upi"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("reconciled", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=True, index=True),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in ("payments", "sales", "dealer_requests", "shopkeepers", "products", "users"):
        op.drop_table(table)
