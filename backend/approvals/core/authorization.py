"""Authorization Policy — pure allow/deny decisions for viewing and mutating requests.

Invariants:
    - Every function is PURE: returns a Decision, never raises, never does IO
    - Rules evaluated in fixed order; the first deny wins
    - Approve/reject is never allowed on one's own request, ADMIN included
    - State guard (PENDING only) evaluated AFTER permission rules: a forbidden
      actor always gets a permission denial, never a conflict

Design Decisions:
    - Decision codes double as API error codes; the shell maps
      INVALID_STATUS -> 400, ILLEGAL_TRANSITION -> 409, everything else -> 403
    - CANCELLED and metadata-edit permissiveness are WorkflowPolicy settings
      rather than hard-coded rules
"""

from dataclasses import dataclass

from approvals.core.domain_types import (
    CancelPolicy, DECISION_STATUSES, MetadataEditPolicy, RequestStatus, Role,
    TERMINAL_STATUSES, UserId, capabilities_for,
)

INVALID_STATUS = "INVALID_STATUS"
INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"
SELF_APPROVAL_FORBIDDEN = "SELF_APPROVAL_FORBIDDEN"
CANCEL_NOT_PERMITTED = "CANCEL_NOT_PERMITTED"
EDIT_NOT_PERMITTED = "EDIT_NOT_PERMITTED"
VIEW_FORBIDDEN = "VIEW_FORBIDDEN"
ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"


@dataclass(frozen=True)
class WorkflowPolicy:
    cancel_policy: CancelPolicy = CancelPolicy.OWNER_OR_ADMIN
    metadata_edit_policy: MetadataEditPolicy = (
        MetadataEditPolicy.OWNER_OR_ADMIN_WHILE_PENDING
    )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    code: str | None = None
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, code: str, reason: str) -> "Decision":
        return cls(False, code, reason)


def can_view(actor_role: Role, actor_id: UserId, requester_id: UserId) -> Decision:
    if capabilities_for(actor_role).can_view_all or actor_id == requester_id:
        return Decision.allow()
    return Decision.deny(VIEW_FORBIDDEN, "No permission to view this request")


def can_transition(
    current_status: RequestStatus,
    requested_status: RequestStatus | str,
    actor_role: Role,
    actor_id: UserId,
    requester_id: UserId,
    policy: WorkflowPolicy = WorkflowPolicy(),
) -> Decision:
    """Decide whether actor may move a request to requested_status."""
    try:
        target = RequestStatus(requested_status)
    except ValueError:
        return Decision.deny(INVALID_STATUS, "Invalid status value")
    if target not in TERMINAL_STATUSES:
        return Decision.deny(INVALID_STATUS, "Invalid status value")

    caps = capabilities_for(actor_role)
    is_owner = actor_id == requester_id

    if target in DECISION_STATUSES:
        if not caps.can_approve:
            return Decision.deny(
                INSUFFICIENT_ROLE,
                "Insufficient role to approve or reject requests",
            )
        if is_owner:
            return Decision.deny(
                SELF_APPROVAL_FORBIDDEN,
                "You cannot approve or reject your own request",
            )
    elif policy.cancel_policy == CancelPolicy.OWNER_OR_ADMIN:
        if not (is_owner or caps.can_cancel_any):
            return Decision.deny(
                CANCEL_NOT_PERMITTED,
                "Only the requester or an admin can cancel this request",
            )

    return _pending_guard(current_status, target.value)


def can_edit_metadata(
    current_status: RequestStatus,
    actor_role: Role,
    actor_id: UserId,
    requester_id: UserId,
    policy: WorkflowPolicy = WorkflowPolicy(),
) -> Decision:
    """Decide whether actor may change title/description."""
    if policy.metadata_edit_policy == MetadataEditPolicy.UNRESTRICTED:
        return Decision.allow()
    if not (actor_id == requester_id or capabilities_for(actor_role).can_edit_any):
        return Decision.deny(
            EDIT_NOT_PERMITTED,
            "Only the requester or an admin can edit this request",
        )
    return _pending_guard(current_status, "edited")


def _pending_guard(current_status: RequestStatus, action: str) -> Decision:
    if RequestStatus(current_status) != RequestStatus.PENDING:
        return Decision.deny(
            ILLEGAL_TRANSITION,
            f"Request is {RequestStatus(current_status).value} and cannot be {action}",
        )
    return Decision.allow()
