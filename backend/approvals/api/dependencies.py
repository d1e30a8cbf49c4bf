"""API Dependencies — FastAPI providers wiring repositories, services and the caller identity.

Invariants:
    - Every service gets repositories bound to the request's DB session
    - get_current_actor raises AuthenticationError (401) for a missing or bad
      bearer token; it never returns None
    - Settings read through get_settings() so tests can override via env

Design Decisions:
    - HTTPBearer(auto_error=False): FastAPI's own 403 for a missing header is
      replaced by our 401 envelope
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from approvals.config import get_settings
from approvals.core.authorization import WorkflowPolicy
from approvals.core.entities import Actor
from approvals.core.errors import AuthenticationError
from approvals.infrastructure.database import get_db
from approvals.infrastructure.passwords import BcryptPasswordHasher
from approvals.infrastructure.purchase_request_repository import (
    SqlPurchaseRequestRepository,
)
from approvals.infrastructure.tokens import TokenService
from approvals.infrastructure.user_repository import SqlUserRepository
from approvals.services.auth_service import AuthService
from approvals.services.purchase_request_workflow import PurchaseRequestWorkflow

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.jwt_expire_days,
    )


def get_workflow_policy() -> WorkflowPolicy:
    settings = get_settings()
    return WorkflowPolicy(
        cancel_policy=settings.cancel_policy,
        metadata_edit_policy=settings.metadata_edit_policy,
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        users=SqlUserRepository(db),
        hasher=BcryptPasswordHasher(get_settings().bcrypt_rounds),
        tokens=tokens,
    )


def get_workflow(
    db: AsyncSession = Depends(get_db),
    policy: WorkflowPolicy = Depends(get_workflow_policy),
) -> PurchaseRequestWorkflow:
    return PurchaseRequestWorkflow(SqlPurchaseRequestRepository(db), policy)


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Actor:
    """Resolve the bearer token into the calling Actor."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token not provided", "TOKEN_MISSING")
    return tokens.verify(credentials.credentials)
