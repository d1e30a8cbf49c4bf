"""Auth Service — registration, login and current-user lookup.

Invariants:
    - Duplicate email -> ConflictError regardless of other fields
    - Wrong email and wrong password are indistinguishable to the caller (401)
    - Hashing runs off the event loop (bcrypt is CPU-bound)
    - Passwords never logged; emails logged for audit

Design Decisions:
    - Hasher and token service injected: tests use a low bcrypt cost factor
"""

import asyncio
import logging
from typing import Protocol

from approvals.core.domain_types import Role, UserId
from approvals.core.entities import UserRecord
from approvals.core.errors import (
    AuthenticationError, ConflictError, ResourceNotFoundError,
)
from approvals.core.repository_protocols import UserRepository
from approvals.infrastructure.tokens import TokenService

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, password_hash: str) -> bool: ...


class AuthService:
    """Identity workflows over the user repository."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self, email: str, password: str, name: str, role: Role | None = None,
    ) -> UserRecord:
        if await self.users.get_by_email(email):
            logger.info(f"Registration rejected, email in use: {email}")
            raise ConflictError(
                "Email already registered", "EMAIL_ALREADY_REGISTERED",
            )
        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user = await self.users.add(
            email=email,
            password_hash=password_hash,
            name=name,
            role=role or Role.REQUESTER,
        )
        logger.info(
            f"User registered: {email}",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return user

    async def login(self, email: str, password: str) -> tuple[str, UserRecord]:
        """Verify credentials and issue a bearer token."""
        user = await self.users.get_by_email(email)
        if user is None:
            logger.info(f"Login failed, unknown email: {email}")
            raise AuthenticationError("Invalid credentials", "INVALID_CREDENTIALS")

        valid = await asyncio.to_thread(
            self.hasher.verify, password, user.password_hash,
        )
        if not valid:
            logger.info(
                f"Login failed, wrong password: {email}",
                extra={"user_id": str(user.id)},
            )
            raise AuthenticationError("Invalid credentials", "INVALID_CREDENTIALS")

        logger.info(f"Login succeeded: {email}", extra={"user_id": str(user.id)})
        return self.tokens.issue(user), user

    async def get_user(self, user_id: UserId) -> UserRecord:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user
