"""Purchase Request Workflow — create/list/get/update against in-memory repositories.

Invariants:
    - total_amount is the exact sum of quantity * unit_price
    - REQUESTER lists own requests only; APPROVER/ADMIN list everything
    - Self-approval denied for every role
    - Non-PENDING requests cannot transition (409)
    - A lost race on the conditional update surfaces as ConflictError
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from approvals.core.authorization import WorkflowPolicy
from approvals.core.domain_types import (
    CancelPolicy, MetadataEditPolicy, RequestId, RequestStatus,
)
from approvals.core.entities import NewPurchaseItem, RequestPatch
from approvals.core.errors import (
    AuthorizationError, ConflictError, ResourceNotFoundError,
    WorkflowValidationError,
)
from approvals.services.purchase_request_workflow import PurchaseRequestWorkflow


def _pens(qty=10, price="2.50"):
    return [NewPurchaseItem("pen", qty, Decimal(price))]


async def _create(workflow, actor, title="Office pens", items=None):
    return await workflow.create(title, None, items or _pens(), actor.id)


# --- create -------------------------------------------------------------------

async def test_create_computes_totals_and_starts_pending(workflow, people):
    record = await _create(workflow, people["alice"])
    assert record.status == RequestStatus.PENDING
    assert record.total_amount == Decimal("25.00")
    assert record.items[0].total_price == Decimal("25.00")
    assert record.approver_id is None
    assert record.reason is None


async def test_create_total_is_sum_of_item_totals(workflow, people):
    items = [
        NewPurchaseItem("paper", 3, Decimal("0.10")),
        NewPurchaseItem("stapler", 1, Decimal("19.99")),
        NewPurchaseItem("ink", 7, Decimal("33.33")),
    ]
    record = await _create(workflow, people["alice"], items=items)
    assert record.total_amount == sum(i.total_price for i in record.items)
    assert record.total_amount == Decimal("253.60")


async def test_create_embeds_requester_summary(workflow, people):
    record = await _create(workflow, people["alice"])
    assert record.requester.id == people["alice"].id
    assert record.requester.name == "Alice"
    assert record.requester.email == "alice@x.com"
    assert not hasattr(record.requester, "password_hash")


async def test_create_rejects_empty_items(workflow, people):
    with pytest.raises(WorkflowValidationError):
        await workflow.create("Nothing", None, [], people["alice"].id)


async def test_create_rejects_non_positive_quantity(workflow, people):
    with pytest.raises(WorkflowValidationError):
        await _create(workflow, people["alice"], items=_pens(qty=0))


async def test_create_rejects_non_positive_price(workflow, people):
    with pytest.raises(WorkflowValidationError):
        await _create(workflow, people["alice"], items=_pens(price="0"))


# --- list ---------------------------------------------------------------------

async def test_requester_lists_only_own_requests(workflow, people):
    await _create(workflow, people["alice"])
    await _create(workflow, people["alice"])
    await _create(workflow, people["carol"])

    page = await workflow.list(people["alice"])
    assert page.total == 2
    assert {r.requester_id for r in page.items} == {people["alice"].id}


@pytest.mark.parametrize("who", ["bob", "dana"])
async def test_approver_and_admin_list_everything(workflow, people, who):
    await _create(workflow, people["alice"])
    await _create(workflow, people["carol"])
    await _create(workflow, people["dana"])

    page = await workflow.list(people[who])
    assert page.total == 3
    assert len(page.items) == 3


async def test_list_is_newest_first(workflow, people):
    first = await _create(workflow, people["alice"], title="First")
    second = await _create(workflow, people["alice"], title="Second")

    page = await workflow.list(people["alice"])
    assert [r.id for r in page.items] == [second.id, first.id]


async def test_list_without_paging_reports_single_page(workflow, people):
    for _ in range(3):
        await _create(workflow, people["alice"])

    page = await workflow.list(people["bob"])
    assert (page.page, page.limit, page.total, page.total_pages) == (1, 3, 3, 1)


async def test_list_with_limit_paginates(workflow, people):
    for i in range(5):
        await _create(workflow, people["alice"], title=f"Request {i}")

    page = await workflow.list(people["bob"], page=2, limit=2)
    assert page.total == 5
    assert page.total_pages == 3
    assert [r.title for r in page.items] == ["Request 2", "Request 1"]


async def test_list_filters_by_status(workflow, people):
    kept = await _create(workflow, people["alice"])
    approved = await _create(workflow, people["alice"])
    await workflow.update_status(
        approved.id, RequestPatch(status=RequestStatus.APPROVED), people["bob"],
    )

    page = await workflow.list(people["bob"], status=RequestStatus.PENDING)
    assert [r.id for r in page.items] == [kept.id]


# --- get_by_id ----------------------------------------------------------------

async def test_get_missing_request_raises_not_found(workflow, people):
    with pytest.raises(ResourceNotFoundError):
        await workflow.get_by_id(RequestId(uuid4()), people["bob"])


async def test_other_requester_cannot_view(workflow, people):
    record = await _create(workflow, people["alice"])
    with pytest.raises(AuthorizationError):
        await workflow.get_by_id(record.id, people["carol"])


async def test_approver_can_view_any_request(workflow, people):
    record = await _create(workflow, people["alice"])
    fetched = await workflow.get_by_id(record.id, people["bob"])
    assert fetched.id == record.id


# --- update_status ------------------------------------------------------------

async def test_approver_approves_and_is_recorded(workflow, people, clock):
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id,
        RequestPatch(status=RequestStatus.APPROVED, reason="Budget ok"),
        people["bob"],
    )
    assert updated.status == RequestStatus.APPROVED
    assert updated.approver_id == people["bob"].id
    assert updated.approved_at == clock.current
    assert updated.rejected_at is None
    assert updated.reason == "Budget ok"


async def test_reject_sets_rejected_at_and_approver(workflow, people):
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.REJECTED), people["dana"],
    )
    assert updated.status == RequestStatus.REJECTED
    assert updated.approver_id == people["dana"].id
    assert updated.rejected_at is not None
    assert updated.approved_at is None


async def test_cancel_sets_no_approver(workflow, people):
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.CANCELLED), people["alice"],
    )
    assert updated.status == RequestStatus.CANCELLED
    assert updated.approver_id is None
    assert updated.reason is None


@pytest.mark.parametrize("who", ["alice", "bob", "dana"])
@pytest.mark.parametrize("target", [RequestStatus.APPROVED, RequestStatus.REJECTED])
async def test_self_decision_always_denied(workflow, people, who, target):
    record = await _create(workflow, people[who])
    with pytest.raises(AuthorizationError) as exc_info:
        await workflow.update_status(record.id, RequestPatch(status=target), people[who])
    assert exc_info.value.http_status == 403


async def test_requester_cannot_approve_others(workflow, people):
    record = await _create(workflow, people["alice"])
    with pytest.raises(AuthorizationError):
        # carol cannot even view alice's request
        await workflow.update_status(
            record.id, RequestPatch(status=RequestStatus.APPROVED), people["carol"],
        )


async def test_terminal_request_cannot_transition_again(workflow, people):
    record = await _create(workflow, people["alice"])
    await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.APPROVED), people["bob"],
    )
    with pytest.raises(ConflictError):
        await workflow.update_status(
            record.id, RequestPatch(status=RequestStatus.REJECTED), people["dana"],
        )


async def test_owner_re_approving_after_approval_gets_forbidden_not_conflict(
    workflow, people,
):
    record = await _create(workflow, people["alice"])
    await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.APPROVED), people["bob"],
    )
    with pytest.raises(AuthorizationError):
        await workflow.update_status(
            record.id, RequestPatch(status=RequestStatus.APPROVED), people["alice"],
        )


async def test_lost_race_raises_conflict(workflow, people, request_repo):
    record = await _create(workflow, people["alice"])

    original_get = request_repo.get

    async def stale_get(request_id):
        snapshot = await original_get(request_id)
        request_repo.force_status(request_id, RequestStatus.APPROVED)
        return snapshot

    request_repo.get = stale_get
    with pytest.raises(ConflictError) as exc_info:
        await workflow.update_status(
            record.id, RequestPatch(status=RequestStatus.REJECTED), people["dana"],
        )
    assert exc_info.value.code == "CONCURRENT_MODIFICATION"


async def test_status_write_is_conditioned_on_pending(workflow, people, request_repo):
    record = await _create(workflow, people["alice"])
    await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.APPROVED), people["bob"],
    )
    assert request_repo.update_calls[-1].expected_status == RequestStatus.PENDING


async def test_reason_without_decision_is_rejected(workflow, people):
    record = await _create(workflow, people["alice"])
    with pytest.raises(WorkflowValidationError):
        await workflow.update_status(
            record.id, RequestPatch(reason="just because"), people["alice"],
        )


async def test_empty_patch_returns_request_unchanged(workflow, people, request_repo):
    record = await _create(workflow, people["alice"])
    same = await workflow.update_status(record.id, RequestPatch(), people["alice"])
    assert same == record
    assert request_repo.update_calls == []


# --- configurable policy ------------------------------------------------------

async def test_default_policy_blocks_approver_cancel(workflow, people):
    record = await _create(workflow, people["alice"])
    with pytest.raises(AuthorizationError):
        await workflow.update_status(
            record.id, RequestPatch(status=RequestStatus.CANCELLED), people["bob"],
        )


async def test_permissive_cancel_policy_lets_approver_cancel(request_repo, clock, people):
    workflow = PurchaseRequestWorkflow(
        request_repo,
        WorkflowPolicy(cancel_policy=CancelPolicy.ANY_VIEWER),
        clock,
    )
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.CANCELLED), people["bob"],
    )
    assert updated.status == RequestStatus.CANCELLED


async def test_owner_edits_title_while_pending(workflow, people):
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id, RequestPatch(title="Blue pens"), people["alice"],
    )
    assert updated.title == "Blue pens"
    assert updated.status == RequestStatus.PENDING


async def test_approver_decision_cannot_carry_title_edit(workflow, people, request_repo):
    record = await _create(workflow, people["alice"])
    with pytest.raises(AuthorizationError):
        await workflow.update_status(
            record.id,
            RequestPatch(status=RequestStatus.APPROVED, title="Hijacked", description="x"),
            people["bob"],
        )
    unchanged = await workflow.get_by_id(record.id, people["alice"])
    assert unchanged.title == "Office pens"
    assert unchanged.status == RequestStatus.PENDING
    assert request_repo.update_calls == []


async def test_owner_cancel_with_title_edit(workflow, people):
    record = await _create(workflow, people["alice"])
    updated = await workflow.update_status(
        record.id,
        RequestPatch(status=RequestStatus.CANCELLED, title="No longer needed"),
        people["alice"],
    )
    assert updated.status == RequestStatus.CANCELLED
    assert updated.title == "No longer needed"


async def test_default_policy_blocks_edit_after_decision(workflow, people):
    record = await _create(workflow, people["alice"])
    await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.REJECTED), people["bob"],
    )
    with pytest.raises(ConflictError):
        await workflow.update_status(
            record.id, RequestPatch(description="changed"), people["alice"],
        )


async def test_unrestricted_edit_policy_allows_approver_edit_after_decision(
    request_repo, clock, people,
):
    workflow = PurchaseRequestWorkflow(
        request_repo,
        WorkflowPolicy(metadata_edit_policy=MetadataEditPolicy.UNRESTRICTED),
        clock,
    )
    record = await _create(workflow, people["alice"])
    await workflow.update_status(
        record.id, RequestPatch(status=RequestStatus.APPROVED), people["bob"],
    )
    updated = await workflow.update_status(
        record.id, RequestPatch(title="Renamed"), people["bob"],
    )
    assert updated.title == "Renamed"
    assert request_repo.update_calls[-1].expected_status is None
