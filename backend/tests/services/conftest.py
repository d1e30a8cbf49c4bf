"""Service test fixtures — in-memory repositories, workflow and auth service.

Invariants:
    - No database: every fixture is backed by tests/services/fakes.py
    - One shared FakeClock per test so users and requests order consistently
    - Default WorkflowPolicy unless a test builds its own workflow
"""

import pytest

from approvals.core.domain_types import Role
from approvals.core.entities import Actor
from approvals.infrastructure.tokens import TokenService
from approvals.services.auth_service import AuthService
from approvals.services.purchase_request_workflow import PurchaseRequestWorkflow
from tests.services.fakes import (
    FakeClock, InMemoryPurchaseRequestRepository, InMemoryUserRepository,
    PlainTextHasher,
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user_repo(clock):
    return InMemoryUserRepository(clock)


@pytest.fixture
def request_repo(user_repo, clock):
    return InMemoryPurchaseRequestRepository(user_repo, clock)


@pytest.fixture
def token_service():
    return TokenService(secret="unit-test-secret", expire_days=7)


@pytest.fixture
def auth_service(user_repo, token_service):
    return AuthService(user_repo, PlainTextHasher(), token_service)


@pytest.fixture
def workflow(request_repo, clock):
    return PurchaseRequestWorkflow(request_repo, clock=clock)


@pytest.fixture
async def people(user_repo):
    """Register one user per role plus a second requester; return their Actors."""
    async def _actor(email, name, role):
        user = await user_repo.add(email, "plain$secret1", name, role)
        return Actor(id=user.id, email=user.email, role=user.role)

    return {
        "alice": await _actor("alice@x.com", "Alice", Role.REQUESTER),
        "carol": await _actor("carol@x.com", "Carol", Role.REQUESTER),
        "bob": await _actor("bob@x.com", "Bob", Role.APPROVER),
        "dana": await _actor("dana@x.com", "Dana", Role.ADMIN),
    }
