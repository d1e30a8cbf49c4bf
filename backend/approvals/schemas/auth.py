"""Auth Schemas — register/login bodies and public user shapes.

Invariants:
    - RegisterRequest.password: 6-72 chars (bcrypt reads at most 72 bytes)
    - RegisterRequest.name: >= 2 chars after stripping
    - email kept exactly as typed (case-sensitive identity)
    - UserResponse never carries the password hash

Design Decisions:
    - Email checked with a pattern instead of EmailStr: EmailStr normalizes the
      address, but stored emails are compared byte-for-byte
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from approvals.core.domain_types import Role
from approvals.schemas import ApiModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(ApiModel):
    email: str = Field(max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=2, max_length=200)
    role: Role | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must have at least 2 characters")
        return v


class LoginRequest(ApiModel):
    email: str = Field(max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=72)


class UserResponse(ApiModel):
    """User response — public-facing user data."""
    id: UUID
    email: str
    name: str
    role: Role
    created_at: datetime


class RegisterResponse(ApiModel):
    message: str = "User created successfully"
    user: UserResponse


class LoginResponse(ApiModel):
    token: str
    user: UserResponse
