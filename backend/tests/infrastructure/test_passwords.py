"""Password Hashing — bcrypt at a low cost factor."""

from approvals.infrastructure.passwords import (
    BcryptPasswordHasher, hash_password, verify_password,
)


def test_hash_is_not_the_password():
    hashed = hash_password("secret1", rounds=4)
    assert hashed != "secret1"
    assert hashed.startswith("$2")


def test_verify_round_trip():
    hashed = hash_password("secret1", rounds=4)
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_same_password_gets_distinct_salts():
    assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)


def test_malformed_hash_returns_false():
    assert verify_password("secret1", "plain$secret1") is False


def test_long_utf8_password_is_accepted():
    password = "ção" * 30
    hashed = hash_password(password, rounds=4)
    assert verify_password(password, hashed)


def test_hasher_uses_configured_rounds():
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = hasher.hash("secret1")
    assert hashed.split("$")[2] == "04"
    assert hasher.verify("secret1", hashed)
