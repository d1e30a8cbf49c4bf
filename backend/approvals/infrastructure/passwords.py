"""Password Hashing — bcrypt hash and verify for the identity store.

Invariants:
    - Plain passwords are never stored or logged
    - bcrypt only reads the first 72 bytes; input is truncated explicitly so
      newer bcrypt releases do not reject long UTF-8 passwords
    - verify_password never raises on a malformed hash; it returns False

Design Decisions:
    - bcrypt directly (no passlib wrapper): one algorithm, nothing to configure
      beyond the cost factor
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password with bcrypt at the given cost factor."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


class BcryptPasswordHasher:
    """Injectable hasher bound to a configured cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return hash_password(password, self.rounds)

    def verify(self, password: str, password_hash: str) -> bool:
        return verify_password(password, password_hash)
