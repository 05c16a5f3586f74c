"""Unit tests for password hashing and token signing."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from tripplanner.config import Settings
from tripplanner.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="unit-secret", jwt_expires_minutes=60)


def test_hash_then_verify() -> None:
    stored = hash_password("hunter22", iterations=1_000)

    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password("hunter22", stored)
    assert not verify_password("hunter23", stored)


def test_hashes_are_salted() -> None:
    assert hash_password("same", 1_000) != hash_password("same", 1_000)


@pytest.mark.parametrize("stored", ["", "plaintext", "md5$1$00$00", "pbkdf2_sha256$x$zz$zz"])
def test_verify_rejects_malformed_hashes(stored: str) -> None:
    assert verify_password("anything", stored) is False


def test_token_round_trip(settings: Settings) -> None:
    token = create_access_token(42, "a@example.com", True, settings)

    payload = decode_access_token(token, settings)

    assert payload["sub"] == "42"
    assert payload["email"] == "a@example.com"
    assert payload["is_admin"] is True


def test_expired_token_rejected(settings: Settings) -> None:
    issued = datetime.now(UTC) - timedelta(hours=2)
    token = create_access_token(1, "a@example.com", False, settings, now=issued)

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token, settings)


def test_token_signed_with_other_secret_rejected(settings: Settings) -> None:
    token = create_access_token(1, "a@example.com", False, Settings(jwt_secret="other-secret"))

    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(token, settings)
