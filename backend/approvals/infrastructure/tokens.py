"""Bearer Tokens — issue and verify signed JWTs asserting identity and role.

Invariants:
    - Payload carries sub/id, email, role, iat, exp — nothing else
    - Every PyJWT failure maps to AuthenticationError (401), never 500
    - A token whose role is not a known Role is rejected

Design Decisions:
    - HS256 with a shared secret from settings: single service, no key rotation
    - Expiry (7 days by default) enforced here by PyJWT, not by the policy layer
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from approvals.core.domain_types import Role, UserId
from approvals.core.entities import Actor, UserRecord
from approvals.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


class TokenService:
    """Signs and verifies bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = timedelta(days=expire_days)

    def issue(self, user: UserRecord, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "id": str(user.id),
            "email": user.email,
            "role": Role(user.role).value,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Actor:
        try:
            payload = jwt.decode(
                token, self.secret, algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired", "TOKEN_EXPIRED")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise AuthenticationError("Invalid token", "TOKEN_INVALID")

        try:
            return Actor(
                id=UserId(UUID(payload["sub"])),
                email=payload.get("email", ""),
                role=Role(payload.get("role")),
            )
        except (ValueError, TypeError):
            raise AuthenticationError("Invalid token", "TOKEN_INVALID")
