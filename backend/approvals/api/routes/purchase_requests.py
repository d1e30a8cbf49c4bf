"""Purchase Request Routes — create, list, fetch and update purchase requests.

Invariants:
    - Every endpoint requires a bearer token (401 otherwise)
    - Permission and transition rules live in the workflow/core, never here
    - List without page/limit returns every visible row as a single page
"""

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from approvals.api.dependencies import get_current_actor, get_workflow
from approvals.core.domain_types import RequestId, RequestStatus
from approvals.core.entities import Actor, NewPurchaseItem, RequestPatch
from approvals.schemas.purchase_request import (
    Pagination, PurchaseRequestCreate, PurchaseRequestPage,
    PurchaseRequestResponse, PurchaseRequestUpdate,
)
from approvals.services.purchase_request_workflow import PurchaseRequestWorkflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/purchase-requests", tags=["purchase-requests"])


@router.post(
    "", response_model=PurchaseRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_purchase_request(
    body: PurchaseRequestCreate,
    actor: Actor = Depends(get_current_actor),
    workflow: PurchaseRequestWorkflow = Depends(get_workflow),
):
    """Create a PENDING purchase request owned by the caller."""
    record = await workflow.create(
        title=body.title,
        description=body.description,
        items=[
            NewPurchaseItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
            )
            for item in body.items
        ],
        requester_id=actor.id,
    )
    return PurchaseRequestResponse.model_validate(record)


@router.get("", response_model=PurchaseRequestPage)
async def list_purchase_requests(
    status_filter: RequestStatus | None = Query(None, alias="status"),
    page: int | None = Query(None, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    workflow: PurchaseRequestWorkflow = Depends(get_workflow),
):
    """List requests visible to the caller, newest first."""
    result = await workflow.list(actor, status=status_filter, page=page, limit=limit)
    return PurchaseRequestPage(
        data=[PurchaseRequestResponse.model_validate(r) for r in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get("/{request_id}", response_model=PurchaseRequestResponse)
async def get_purchase_request(
    request_id: UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: PurchaseRequestWorkflow = Depends(get_workflow),
):
    record = await workflow.get_by_id(RequestId(request_id), actor)
    return PurchaseRequestResponse.model_validate(record)


@router.patch("/{request_id}", response_model=PurchaseRequestResponse)
async def update_purchase_request(
    request_id: UUID,
    body: PurchaseRequestUpdate,
    actor: Actor = Depends(get_current_actor),
    workflow: PurchaseRequestWorkflow = Depends(get_workflow),
):
    """Approve, reject or cancel a request, or edit its title/description."""
    patch = RequestPatch(
        title=body.title,
        description=body.description,
        status=RequestStatus(body.status) if body.status else None,
        reason=body.reason,
    )
    record = await workflow.update_status(RequestId(request_id), patch, actor)
    return PurchaseRequestResponse.model_validate(record)
