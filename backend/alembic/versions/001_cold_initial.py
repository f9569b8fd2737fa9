"""Cold tier initial schema — archive tables for aged-out ledger rows.

Revision ID: 001_cold_initial
Revises: None
Create Date: 2026-10-19

Archive rows carry no foreign keys: referenced users, products, shopkeepers
and dealer requests live in the hot database and are resolved in batch.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_cold_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = ("cold",)
depends_on: Union[str, Sequence[str], None] = None


def _archive_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("original_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _ref(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), nullable=nullable, index=True)


def upgrade() -> None:
    op.create_table(
        "sales_archive",
        *_archive_columns(),
        _ref("salesman_id"),
        _ref("dealer_id"),
        _ref("product_id"),
        _ref("shopkeeper_id", nullable=True),
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
    )

    op.create_table(
        "payments_archive",
        *_archive_columns(),
        _ref("dealer_id"),
        _ref("dealer_request_id", nullable=True),
        _ref("processed_by_id", nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="upi"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("reconciled", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=True, index=True),
    )

    op.create_table(
        "dealer_requests_archive",
        *_archive_columns(),
        _ref("dealer_id"),
        _ref("product_id"),
        _ref("processed_by_id", nullable=True),
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
    )


def downgrade() -> None:
    for table in ("dealer_requests_archive", "payments_archive", "sales_archive"):
        op.drop_table(table)
