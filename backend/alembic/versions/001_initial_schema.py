"""Initial schema — users, purchase_requests, purchase_items.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="REQUESTER"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "purchase_requests",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("requester_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("approver_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_purchase_requests_status", "purchase_requests", ["status"])
    op.create_index("ix_purchase_requests_requester_id", "purchase_requests", ["requester_id"])

    op.create_table(
        "purchase_items",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "request_id", sa.Uuid,
            sa.ForeignKey("purchase_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_purchase_items_quantity_positive"),
        sa.CheckConstraint("unit_price > 0", name="ck_purchase_items_unit_price_positive"),
    )
    op.create_index("ix_purchase_items_request_id", "purchase_items", ["request_id"])


def downgrade() -> None:
    op.drop_index("ix_purchase_items_request_id", table_name="purchase_items")
    op.drop_table("purchase_items")
    op.drop_index("ix_purchase_requests_requester_id", table_name="purchase_requests")
    op.drop_index("ix_purchase_requests_status", table_name="purchase_requests")
    op.drop_table("purchase_requests")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
