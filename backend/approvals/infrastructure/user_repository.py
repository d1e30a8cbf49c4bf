"""SQL User Repository — SQLAlchemy implementation of core UserRepository.

Invariants:
    - Returns core UserRecord values, never ORM instances
    - A unique-email race on insert surfaces as ConflictError, not a DB error
    - Email lookups are exact (case-sensitive)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from approvals.core.domain_types import Role, UserId
from approvals.core.entities import UserRecord, UserSummary
from approvals.core.errors import ConflictError
from approvals.models.user import User

logger = logging.getLogger(__name__)


def to_user_record(user: User) -> UserRecord:
    return UserRecord(
        id=UserId(user.id),
        email=user.email,
        name=user.name,
        role=Role(user.role),
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


def to_user_summary(user: User) -> UserSummary:
    return UserSummary(id=UserId(user.id), name=user.name, email=user.email)


class SqlUserRepository:
    """Identity store backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self, email: str, password_hash: str, name: str, role: Role,
    ) -> UserRecord:
        user = User(
            email=email, password_hash=password_hash,
            name=name, role=Role(role).value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                "Email already registered", "EMAIL_ALREADY_REGISTERED",
            )
        await self.db.refresh(user)
        return to_user_record(user)

    async def get_by_id(self, user_id: UserId) -> UserRecord | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return to_user_record(user) if user else None

    async def get_by_email(self, email: str) -> UserRecord | None:
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return to_user_record(user) if user else None
