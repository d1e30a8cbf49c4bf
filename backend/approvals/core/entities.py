"""Domain Entities — immutable records exchanged between core, services and repositories.

Invariants:
    - Records never carry a password hash except UserRecord (identity store only)
    - PurchaseRequestRecord.items is a tuple: items are immutable after creation
    - RequestChanges only lists columns the workflow is allowed to write

Design Decisions:
    - Frozen dataclasses over ORM objects in the workflow: repositories can be
      swapped for in-memory fakes without SQLAlchemy sessions
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from approvals.core.domain_types import (
    ItemId, RequestId, RequestStatus, Role, UserId,
)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, as asserted by the bearer token."""
    id: UserId
    email: str
    role: Role


@dataclass(frozen=True)
class UserRecord:
    id: UserId
    email: str
    name: str
    role: Role
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class UserSummary:
    """Public projection of a user — safe to embed in responses."""
    id: UserId
    name: str
    email: str


@dataclass(frozen=True)
class NewPurchaseItem:
    description: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class PricedItem:
    """Line item with its derived total, ready to persist."""
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class PurchaseItemRecord:
    id: ItemId
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class PurchaseRequestRecord:
    id: RequestId
    title: str
    description: str | None
    status: RequestStatus
    total_amount: Decimal
    requester_id: UserId
    requester: UserSummary | None
    approver_id: UserId | None
    reason: str | None
    approved_at: datetime | None
    rejected_at: datetime | None
    created_at: datetime
    updated_at: datetime
    items: tuple[PurchaseItemRecord, ...] = ()


@dataclass(frozen=True)
class RequestPatch:
    """Caller-supplied partial update. None means "leave unchanged"."""
    title: str | None = None
    description: str | None = None
    status: RequestStatus | None = None
    reason: str | None = None

    @property
    def has_metadata(self) -> bool:
        return self.title is not None or self.description is not None

    @property
    def is_empty(self) -> bool:
        return not self.has_metadata and self.status is None and self.reason is None


@dataclass(frozen=True)
class RequestChanges:
    """Column values the repository writes in one conditional update."""
    values: dict = field(default_factory=dict)
    expected_status: RequestStatus | None = None


@dataclass(frozen=True)
class Page:
    items: list[PurchaseRequestRecord]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, -(-self.total // self.limit))
