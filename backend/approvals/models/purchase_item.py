"""PurchaseItem ORM — persists one line of a purchase request.

Invariants:
    - Always belongs to a PurchaseRequest (request_id FK, cascade delete)
    - quantity > 0; unit_price > 0; total_price == quantity * unit_price
    - Immutable after creation (no update path exists)

Design Decisions:
    - total_price stored, not computed on read: the request total is a sum of
      stored values, so both must come from the same arithmetic
    - position preserves submission order for responses
"""

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, String, Integer, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from approvals.db.base import Base


class PurchaseItem(Base):
    """Line item of a purchase request."""
    __tablename__ = "purchase_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchase_items_quantity_positive"),
        CheckConstraint("unit_price > 0", name="ck_purchase_items_unit_price_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("purchase_requests.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    request: Mapped["PurchaseRequest"] = relationship(
        "PurchaseRequest", back_populates="items",
    )
