"""Tests for shared response, exception and password helpers."""

from datetime import datetime, timezone

from common.utils import (
    ConflictException,
    LockedException,
    ValidationException,
    error_response,
    success_response,
    validate_password,
)


def test_validate_password_length_bounds():
    assert validate_password("abcdef") == (True, [])

    ok, errors = validate_password("abc")
    assert not ok
    assert errors == ["Password must be at least 6 characters"]

    ok, errors = validate_password("x" * 129)
    assert not ok
    assert "no more than 128" in errors[0]


def test_validate_password_blank():
    ok, errors = validate_password("      ")

    assert not ok
    assert "Password must not be blank" in errors


def test_validate_password_optional_rules():
    ok, errors = validate_password("abcdefg", require_digit=True)
    assert not ok
    assert errors == ["Password must contain at least one digit"]

    assert validate_password("abcdef1", require_letter=True, require_digit=True)[0]


def test_locked_exception_detail():
    lock_until = datetime(2026, 3, 1, 12, 15, tzinfo=timezone.utc)

    exc = LockedException(lock_until, 42)

    assert exc.status_code == 403
    assert exc.detail == {
        "message": "Account locked. Try again in 42 seconds.",
        "code": "ACCOUNT_LOCKED",
        "details": {"lockUntil": "2026-03-01T12:15:00+00:00", "retryAfter": 42},
        "lockUntil": "2026-03-01T12:15:00+00:00",
        "retryAfter": 42,
    }
    assert exc.headers == {"Retry-After": "42"}


def test_conflict_is_reported_as_bad_request():
    exc = ConflictException("Admin already exists")

    assert exc.status_code == 400
    assert exc.detail == {"message": "Admin already exists", "code": "CONFLICT"}


def test_validation_exception_merges_errors():
    exc = ValidationException(errors=["too short"], details={"field": "password"})

    assert exc.status_code == 422
    assert exc.detail["details"] == {"errors": ["too short"], "field": "password"}


def test_response_envelopes():
    assert success_response({"a": 1}) == {"success": True, "data": {"a": 1}}
    assert success_response(message="done") == {"success": True, "message": "done"}
    assert error_response("Server error", code="STORE_ERROR", error="boom") == {
        "message": "Server error",
        "code": "STORE_ERROR",
        "error": "boom",
    }
