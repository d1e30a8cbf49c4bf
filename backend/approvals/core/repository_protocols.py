"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, in-memory fakes need no inheritance
    - apply_update is the ONLY status-mutation path; it must be atomic and honour
      RequestChanges.expected_status (return None when zero rows matched)
"""

from decimal import Decimal
from typing import Protocol

from approvals.core.domain_types import RequestId, RequestStatus, Role, UserId
from approvals.core.entities import (
    PricedItem, PurchaseRequestRecord, RequestChanges, UserRecord,
)


class UserRepository(Protocol):
    """Contract for identity persistence — implemented by shell."""
    async def add(
        self, email: str, password_hash: str, name: str, role: Role,
    ) -> UserRecord: ...
    async def get_by_id(self, user_id: UserId) -> UserRecord | None: ...
    async def get_by_email(self, email: str) -> UserRecord | None: ...


class PurchaseRequestRepository(Protocol):
    """Contract for purchase request persistence — implemented by shell."""
    async def add(
        self,
        title: str,
        description: str | None,
        requester_id: UserId,
        total_amount: Decimal,
        items: list[PricedItem],
    ) -> PurchaseRequestRecord: ...
    async def get(self, request_id: RequestId) -> PurchaseRequestRecord | None: ...
    async def list(
        self,
        requester_id: UserId | None = None,
        status: RequestStatus | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[PurchaseRequestRecord], int]: ...
    async def apply_update(
        self, request_id: RequestId, changes: RequestChanges,
    ) -> PurchaseRequestRecord | None: ...
