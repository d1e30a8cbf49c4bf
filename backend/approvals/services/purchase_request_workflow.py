"""Purchase Request Workflow — create, list, fetch and transition purchase requests.

Invariants:
    - Every read of a single request applies the view rule before anything else
    - Status changes are planned by core.lifecycle and written by ONE conditional
      update; a lost race (zero rows) surfaces as ConflictError
    - REQUESTER lists only own requests; APPROVER/ADMIN list all
    - No filters and no page/limit -> one page holding every visible row

Design Decisions:
    - Impureim sandwich: fetch (IO) -> decide (pure core) -> write (IO)
    - Clock injected: tests pin approved_at/rejected_at
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from approvals.core.authorization import WorkflowPolicy, can_view
from approvals.core.domain_types import RequestId, RequestStatus, UserId, capabilities_for
from approvals.core.entities import (
    Actor, NewPurchaseItem, Page, PurchaseRequestRecord, RequestPatch,
)
from approvals.core.errors import ConflictError, ResourceNotFoundError
from approvals.core.lifecycle import plan_update, raise_for_decision
from approvals.core.pricing import price_items, request_total
from approvals.core.repository_protocols import PurchaseRequestRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PurchaseRequestWorkflow:
    """Orchestrates the purchase request lifecycle."""

    def __init__(
        self,
        requests: PurchaseRequestRepository,
        policy: WorkflowPolicy = WorkflowPolicy(),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.requests = requests
        self.policy = policy
        self.clock = clock

    async def create(
        self,
        title: str,
        description: str | None,
        items: list[NewPurchaseItem],
        requester_id: UserId,
    ) -> PurchaseRequestRecord:
        priced = price_items(items)
        total = request_total(priced)
        record = await self.requests.add(
            title=title,
            description=description,
            requester_id=requester_id,
            total_amount=total,
            items=priced,
        )
        logger.info(
            f"Purchase request created with {len(priced)} item(s), total {total}",
            extra={"request_id": str(record.id), "user_id": str(requester_id)},
        )
        return record

    async def list(
        self,
        actor: Actor,
        status: RequestStatus | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page:
        """List requests visible to actor, newest first."""
        requester_filter = (
            None if capabilities_for(actor.role).can_view_all else actor.id
        )
        if page is None and limit is None:
            rows, total = await self.requests.list(
                requester_id=requester_filter, status=status,
            )
            return Page(items=rows, page=1, limit=total, total=total)

        page = page or 1
        limit = limit or 10
        rows, total = await self.requests.list(
            requester_id=requester_filter,
            status=status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=rows, page=page, limit=limit, total=total)

    async def get_by_id(
        self, request_id: RequestId, actor: Actor,
    ) -> PurchaseRequestRecord:
        record = await self.requests.get(request_id)
        if record is None:
            raise ResourceNotFoundError("PurchaseRequest", str(request_id))
        raise_for_decision(can_view(actor.role, actor.id, record.requester_id))
        return record

    async def update_status(
        self, request_id: RequestId, patch: RequestPatch, actor: Actor,
    ) -> PurchaseRequestRecord:
        """Apply a status transition and/or metadata edit."""
        record = await self.get_by_id(request_id, actor)
        if patch.is_empty:
            return record

        changes = plan_update(record, patch, actor, self.clock(), self.policy)
        updated = await self.requests.apply_update(request_id, changes)
        if updated is None:
            raise ConflictError(
                "Request was modified concurrently and is no longer pending",
                "CONCURRENT_MODIFICATION",
            )

        if patch.status is not None:
            logger.info(
                f"Purchase request {record.status.value} -> {updated.status.value}",
                extra={"request_id": str(request_id), "user_id": str(actor.id)},
            )
        return updated
