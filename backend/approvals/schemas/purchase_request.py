"""Purchase Request Schemas — create/update bodies, list query and response shapes.

Invariants:
    - PurchaseRequestCreate.title: >= 3 chars; items: >= 1
    - PurchaseItemCreate.quantity: 1..MAX_QUANTITY; unit_price: positive, <= 2 decimals
    - Blank description normalised to None; on update that means "unchanged",
      so a description can be replaced but not cleared
    - PurchaseRequestUpdate.status limited to APPROVED | REJECTED | CANCELLED
    - Money serialized as JSON numbers (float) in responses

Design Decisions:
    - Decimal on input: "2.5" and 2.5 both land as Decimal('2.5') with no float drift
    - float on output: clients expect numbers, and totals are already quantized
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from approvals.core.domain_types import RequestStatus
from approvals.core.pricing import MAX_QUANTITY
from approvals.schemas import ApiModel


def _none_if_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


class PurchaseItemCreate(ApiModel):
    description: str = Field(min_length=1, max_length=500)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    unit_price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)


class PurchaseRequestCreate(ApiModel):
    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
    items: list[PurchaseItemCreate] = Field(min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("title must have at least 3 characters")
        return v

    @field_validator("description")
    @classmethod
    def blank_description_to_none(cls, v: str | None) -> str | None:
        return _none_if_blank(v)


class PurchaseRequestUpdate(ApiModel):
    title: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = None
    status: Literal["APPROVED", "REJECTED", "CANCELLED"] | None = None
    reason: str | None = Field(None, max_length=2000)

    @field_validator("description")
    @classmethod
    def blank_description_to_none(cls, v: str | None) -> str | None:
        return _none_if_blank(v)


class RequesterSummary(ApiModel):
    id: UUID
    name: str
    email: str


class PurchaseItemResponse(ApiModel):
    id: UUID
    description: str
    quantity: int
    unit_price: float
    total_price: float


class PurchaseRequestResponse(ApiModel):
    id: UUID
    title: str
    description: str | None
    status: RequestStatus
    total_amount: float
    requester_id: UUID
    requester: RequesterSummary | None
    approver_id: UUID | None
    reason: str | None
    approved_at: datetime | None
    rejected_at: datetime | None
    created_at: datetime
    updated_at: datetime
    items: list[PurchaseItemResponse]


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PurchaseRequestPage(ApiModel):
    data: list[PurchaseRequestResponse]
    pagination: Pagination
