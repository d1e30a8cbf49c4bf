"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, RequestId, ItemId wrap UUIDs — never use bare UUID in domain logic
    - Roles and statuses are closed enums — no raw string comparisons
    - ROLE_CAPABILITIES is the single source of truth for what a role may do

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Capability table over scattered `role == "ADMIN"` checks
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
RequestId = NewType("RequestId", UUID)
ItemId = NewType("ItemId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — maps to users.role column."""
    REQUESTER = "REQUESTER"
    APPROVER = "APPROVER"
    ADMIN = "ADMIN"


class RequestStatus(str, Enum):
    """Purchase request lifecycle states — maps to purchase_requests.status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES: frozenset[RequestStatus] = frozenset({
    RequestStatus.APPROVED,
    RequestStatus.REJECTED,
    RequestStatus.CANCELLED,
})

# Statuses that record a decision-maker (approver_id, reason)
DECISION_STATUSES: frozenset[RequestStatus] = frozenset({
    RequestStatus.APPROVED,
    RequestStatus.REJECTED,
})


class CancelPolicy(str, Enum):
    """Who may move a PENDING request to CANCELLED."""
    ANY_VIEWER = "any_viewer"
    OWNER_OR_ADMIN = "owner_or_admin"


class MetadataEditPolicy(str, Enum):
    """Who may edit title/description without a status change."""
    UNRESTRICTED = "unrestricted"
    OWNER_OR_ADMIN_WHILE_PENDING = "owner_or_admin_while_pending"


# ─── Capabilities ────────────────────────────────────────────────

@dataclass(frozen=True)
class RoleCapabilities:
    """What a role is allowed to do, independent of ownership."""
    can_approve: bool = False
    can_view_all: bool = False
    can_cancel_any: bool = False
    can_edit_any: bool = False


ROLE_CAPABILITIES: dict[Role, RoleCapabilities] = {
    Role.REQUESTER: RoleCapabilities(),
    Role.APPROVER: RoleCapabilities(can_approve=True, can_view_all=True),
    Role.ADMIN: RoleCapabilities(
        can_approve=True, can_view_all=True,
        can_cancel_any=True, can_edit_any=True,
    ),
}


def capabilities_for(role: Role) -> RoleCapabilities:
    return ROLE_CAPABILITIES[Role(role)]
