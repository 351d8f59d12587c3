"""Tests for JWT issuing and verification."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from common.auth import InvalidTokenError, JWTAuth, TokenClaims


SECRET = "unit-test-secret"


@pytest.fixture
def auth():
    return JWTAuth(secret=SECRET, expire_days=7)


def test_round_trip_claims(auth):
    token = auth.create_token("admin-1", "owner@example.com", 3)

    assert auth.verify_token(token) == TokenClaims(
        admin_id="admin-1", email="owner@example.com", token_version=3
    )


def test_expiry_is_seven_days(auth):
    token = auth.create_token("admin-1", "owner@example.com", 0)
    payload = jwt.get_unverified_claims(token)

    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_tokens_are_unique_per_issue(auth):
    first = auth.create_token("admin-1", "owner@example.com", 0)
    second = auth.create_token("admin-1", "owner@example.com", 0)

    assert first != second


def test_tampered_token_rejected(auth):
    token = auth.create_token("admin-1", "owner@example.com", 0)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])

    with pytest.raises(InvalidTokenError):
        auth.verify_token(tampered)


def test_other_secret_rejected(auth):
    token = JWTAuth(secret="someone-else").create_token("admin-1", "owner@example.com", 0)

    with pytest.raises(InvalidTokenError):
        auth.verify_token(token)


def test_expired_token_rejected():
    expired = JWTAuth(secret=SECRET, expire_days=-1)
    token = expired.create_token("admin-1", "owner@example.com", 0)

    with pytest.raises(InvalidTokenError):
        JWTAuth(secret=SECRET).verify_token(token)


def test_garbage_rejected(auth):
    with pytest.raises(InvalidTokenError):
        auth.verify_token("not.a.jwt")


def test_missing_version_claim_rejected(auth):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "admin-1", "email": "owner@example.com", "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        auth.verify_token(token)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        JWTAuth(secret="")
