"""Request Lifecycle — turns a caller's patch into one guarded set of column changes.

Invariants:
    - PENDING is the only non-terminal state; every transition starts from it
    - APPROVED sets approver_id + approved_at; REJECTED sets approver_id + rejected_at;
      CANCELLED sets neither
    - reason is only written alongside an APPROVED/REJECTED decision
    - title/description are checked by can_edit_metadata whether or not a
      status change accompanies them
    - expected_status=PENDING whenever the write depends on the request still
      being pending; the repository turns a lost race into zero affected rows

Design Decisions:
    - plan_update is pure (clock passed in): the workflow service owns IO,
      this module owns the rules
"""

from datetime import datetime

from approvals.core.authorization import (
    Decision, ILLEGAL_TRANSITION, INVALID_STATUS, WorkflowPolicy,
    can_edit_metadata, can_transition,
)
from approvals.core.domain_types import DECISION_STATUSES, RequestStatus, MetadataEditPolicy
from approvals.core.entities import (
    Actor, PurchaseRequestRecord, RequestChanges, RequestPatch,
)
from approvals.core.errors import (
    AuthorizationError, ConflictError, WorkflowValidationError,
)


def plan_update(
    request: PurchaseRequestRecord,
    patch: RequestPatch,
    actor: Actor,
    now: datetime,
    policy: WorkflowPolicy = WorkflowPolicy(),
) -> RequestChanges:
    """Check permissions for patch and return the changes to write."""
    values: dict = {}
    expected_status = None

    if patch.status is not None:
        raise_for_decision(can_transition(
            request.status, patch.status, actor.role, actor.id,
            request.requester_id, policy,
        ))
        # metadata riding along with a transition obeys the same edit rule
        if patch.has_metadata:
            raise_for_decision(can_edit_metadata(
                request.status, actor.role, actor.id, request.requester_id, policy,
            ))
        target = RequestStatus(patch.status)
        values["status"] = target
        if target == RequestStatus.APPROVED:
            values["approver_id"] = actor.id
            values["approved_at"] = now
        elif target == RequestStatus.REJECTED:
            values["approver_id"] = actor.id
            values["rejected_at"] = now
        expected_status = RequestStatus.PENDING
    elif patch.has_metadata:
        raise_for_decision(can_edit_metadata(
            request.status, actor.role, actor.id, request.requester_id, policy,
        ))
        if policy.metadata_edit_policy != MetadataEditPolicy.UNRESTRICTED:
            expected_status = RequestStatus.PENDING

    if patch.reason is not None:
        if values.get("status") not in DECISION_STATUSES:
            raise WorkflowValidationError(
                "A reason can only accompany an APPROVED or REJECTED decision",
                "reason",
            )
        values["reason"] = patch.reason

    if patch.title is not None:
        values["title"] = patch.title
    if patch.description is not None:
        values["description"] = patch.description

    if values:
        values["updated_at"] = now
    return RequestChanges(values=values, expected_status=expected_status)


def raise_for_decision(decision: Decision) -> None:
    """Map a denied Decision onto the error taxonomy."""
    if decision.allowed:
        return
    if decision.code == INVALID_STATUS:
        raise WorkflowValidationError(decision.reason, "status")
    if decision.code == ILLEGAL_TRANSITION:
        raise ConflictError(decision.reason, ILLEGAL_TRANSITION)
    raise AuthorizationError(decision.reason, decision.code)
