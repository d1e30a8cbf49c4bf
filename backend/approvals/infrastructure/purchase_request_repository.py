"""SQL Purchase Request Repository — SQLAlchemy implementation of core PurchaseRequestRepository.

Invariants:
    - add() writes the request and all its items in ONE commit
    - apply_update() is a single UPDATE ... WHERE id = :id [AND status = :expected];
      zero matched rows -> None, and nothing is written
    - list() orders newest first; requester_id=None means "all requests"
    - Returns core records, never ORM instances

Design Decisions:
    - Conditional UPDATE over SELECT FOR UPDATE: works identically on PostgreSQL
      and SQLite, and two concurrent approvals cannot both succeed
    - populate_existing on re-read: the identity map may hold the pre-update row
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from approvals.core.domain_types import (
    ItemId, RequestId, RequestStatus, UserId,
)
from approvals.core.entities import (
    PricedItem, PurchaseItemRecord, PurchaseRequestRecord, RequestChanges,
)
from approvals.infrastructure.user_repository import to_user_summary
from approvals.models.purchase_item import PurchaseItem
from approvals.models.purchase_request import PurchaseRequest

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = frozenset({
    "title", "description", "status", "reason", "approver_id",
    "approved_at", "rejected_at", "updated_at",
})


def to_request_record(row: PurchaseRequest) -> PurchaseRequestRecord:
    return PurchaseRequestRecord(
        id=RequestId(row.id),
        title=row.title,
        description=row.description,
        status=RequestStatus(row.status),
        total_amount=Decimal(row.total_amount),
        requester_id=UserId(row.requester_id),
        requester=to_user_summary(row.requester) if row.requester else None,
        approver_id=UserId(row.approver_id) if row.approver_id else None,
        reason=row.reason,
        approved_at=row.approved_at,
        rejected_at=row.rejected_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        items=tuple(
            PurchaseItemRecord(
                id=ItemId(item.id),
                description=item.description,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
                total_price=Decimal(item.total_price),
            )
            for item in row.items
        ),
    )


class SqlPurchaseRequestRepository:
    """Request store backed by purchase_requests + purchase_items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self,
        title: str,
        description: str | None,
        requester_id: UserId,
        total_amount: Decimal,
        items: list[PricedItem],
    ) -> PurchaseRequestRecord:
        row = PurchaseRequest(
            title=title,
            description=description,
            status=RequestStatus.PENDING.value,
            total_amount=total_amount,
            requester_id=requester_id,
            items=[
                PurchaseItem(
                    position=position,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                )
                for position, item in enumerate(items)
            ],
        )
        self.db.add(row)
        await self.db.commit()
        return await self._reload(RequestId(row.id))

    async def get(self, request_id: RequestId) -> PurchaseRequestRecord | None:
        result = await self.db.execute(
            select(PurchaseRequest)
            .where(PurchaseRequest.id == request_id)
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        return to_request_record(row) if row else None

    async def list(
        self,
        requester_id: UserId | None = None,
        status: RequestStatus | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[PurchaseRequestRecord], int]:
        query = select(PurchaseRequest)
        count_query = select(func.count()).select_from(PurchaseRequest)
        if requester_id is not None:
            query = query.where(PurchaseRequest.requester_id == requester_id)
            count_query = count_query.where(
                PurchaseRequest.requester_id == requester_id,
            )
        if status is not None:
            query = query.where(PurchaseRequest.status == RequestStatus(status).value)
            count_query = count_query.where(
                PurchaseRequest.status == RequestStatus(status).value,
            )
        query = query.order_by(PurchaseRequest.created_at.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(query)
        return [to_request_record(r) for r in result.scalars().all()], total

    async def apply_update(
        self, request_id: RequestId, changes: RequestChanges,
    ) -> PurchaseRequestRecord | None:
        unknown = set(changes.values) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns not updatable: {sorted(unknown)}")
        if not changes.values:
            return await self.get(request_id)

        values = {
            key: (value.value if isinstance(value, RequestStatus) else value)
            for key, value in changes.values.items()
        }
        stmt = (
            update(PurchaseRequest)
            .where(PurchaseRequest.id == request_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if changes.expected_status is not None:
            stmt = stmt.where(
                PurchaseRequest.status == RequestStatus(changes.expected_status).value,
            )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            await self.db.rollback()
            logger.warning(
                "Conditional update matched no rows",
                extra={"request_id": str(request_id)},
            )
            return None
        await self.db.commit()
        return await self._reload(request_id)

    async def _reload(self, request_id: RequestId) -> PurchaseRequestRecord:
        result = await self.db.execute(
            select(PurchaseRequest)
            .where(PurchaseRequest.id == request_id)
            .execution_options(populate_existing=True),
        )
        return to_request_record(result.scalar_one())
