"""Auth Routes — register, login and current-user endpoints.

Invariants:
    - Bodies validated by Pydantic before reaching the handler (400 on failure)
    - Responses built from UserResponse: the password hash never leaves the service
    - /me requires a bearer token; a token for a deleted user yields 404
"""

import logging

from fastapi import APIRouter, Depends, status

from approvals.api.dependencies import get_auth_service, get_current_actor
from approvals.core.entities import Actor
from approvals.schemas.auth import (
    LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserResponse,
)
from approvals.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest, auth: AuthService = Depends(get_auth_service),
):
    """Create a user account."""
    user = await auth.register(body.email, body.password, body.name, body.role)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest, auth: AuthService = Depends(get_auth_service),
):
    """Exchange credentials for a bearer token."""
    token, user = await auth.login(body.email, body.password)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(
    actor: Actor = Depends(get_current_actor),
    auth: AuthService = Depends(get_auth_service),
):
    return UserResponse.model_validate(await auth.get_user(actor.id))
