"""User ORM — persists registered identities and their role.

Invariants:
    - id is UUID primary key
    - email is unique and stored exactly as submitted (case-sensitive)
    - password_hash is a bcrypt hash, never the plain password
    - role is one of Role (REQUESTER | APPROVER | ADMIN)

Design Decisions:
    - role stored as String(20) holding the enum value: readable in SQL, no
      native ENUM type to migrate when roles change
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from approvals.db.base import Base


class User(Base):
    """Registered user — requester, approver or admin."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="REQUESTER",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
