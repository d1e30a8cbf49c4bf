"""PurchaseRequest ORM — persists the aggregate root of the approval workflow.

Invariants:
    - status starts PENDING; transitions only PENDING -> APPROVED | REJECTED | CANCELLED
    - total_amount equals the sum of items.total_price, written once at creation
    - approver_id/reason only set for APPROVED or REJECTED
    - Owns its PurchaseItems (cascade delete)

Design Decisions:
    - Numeric(12, 2) for money: exact two-decimal currency semantics
    - requester loaded with selectin: every response embeds the requester summary
    - approved_at/rejected_at kept separate: approver_id is shared by both decisions
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Text, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from approvals.db.base import Base


class PurchaseRequest(Base):
    """Purchase request — owns line items, carries the approval status."""
    __tablename__ = "purchase_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="PENDING", index=True,
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False,
    )
    requester_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True,
    )
    approver_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    rejected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    items: Mapped[list["PurchaseItem"]] = relationship(
        "PurchaseItem", back_populates="request",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="PurchaseItem.position",
    )
    requester: Mapped["User"] = relationship(
        "User", foreign_keys=[requester_id], lazy="selectin",
    )
