"""
Auth system pipeline functions.

Stateless orchestration logic for admin authentication flows. Every
collaborator is passed in, so the flows run against any ``DataStore``.
"""

import asyncio
import hmac
import logging
from datetime import datetime, timezone
from typing import Optional

from common.auth import JWTAuth, PasswordHasher
from common.utils import validate_password
from common.utils.exceptions import (
    BadRequestException,
    ConflictException,
    InternalServerException,
    InvalidCredentialsException,
    LockedException,
    NotFoundException,
    ValidationException,
)
from portfolio.auth.models import Admin, AdminSession, AdminUpdate, public_admin
from portfolio.auth.services.admin_service import AdminService
from portfolio.auth.services.lockout_policy import LockoutPolicy
from portfolio.auth.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


def _require_valid_password(password: str, min_length: int) -> None:
    is_valid, errors = validate_password(password, min_length=min_length)
    if not is_valid:
        raise ValidationException(
            message="Password does not meet requirements",
            errors=errors
        )


async def _record_session(
    session_manager: SessionManager,
    admin_id: str,
    token: str,
    ip_address: str,
    user_agent: str
) -> Optional[AdminSession]:
    """Create the session row for a new token. Failures are logged, never raised."""
    try:
        return await session_manager.create_session(
            admin_id=admin_id,
            token=token,
            ip_address=ip_address,
            user_agent=user_agent
        )
    except Exception as e:
        logger.warning(f"Failed to record session for admin {admin_id}: {e}")
        return None


async def registration_pipeline(
    admin_service: AdminService,
    session_manager: SessionManager,
    jwt_auth: JWTAuth,
    password_hasher: PasswordHasher,
    name: str,
    email: str,
    password: str,
    ip_address: str,
    user_agent: str,
    min_password_length: int = 6,
    created_by: Optional[Admin] = None
) -> dict:
    """
    Orchestrates admin registration.

    Anonymous registration only bootstraps the first admin. Once any admin
    exists, new admins can only be added by an authenticated admin
    (``created_by``).

    Args:
        admin_service: For admin lookup and creation
        session_manager: For recording the session of the issued token
        jwt_auth: Token issuer
        password_hasher: bcrypt hasher
        name: Display name
        email: Login email
        password: Plaintext password
        ip_address: Client IP address
        user_agent: Client User-Agent header
        min_password_length: Password policy minimum
        created_by: Authenticated admin adding this account, if any

    Returns:
        dict with token and admin

    Raises:
        ValidationException: Password too weak
        ConflictException: An admin with this email already exists, or an
            anonymous caller tried to register after bootstrap
    """
    _require_valid_password(password, min_password_length)

    if created_by is None and await admin_service.count() > 0:
        logger.warning(f"Anonymous registration refused for {email}: an admin already exists")
        raise ConflictException(
            message="Admin already exists",
            code="CONFLICT"
        )

    existing = await admin_service.get_by_email(email)
    if existing:
        raise ConflictException(
            message="Admin already exists",
            code="CONFLICT"
        )

    password_hash = await asyncio.to_thread(password_hasher.hash_password, password)
    admin = await admin_service.create(email=email, password_hash=password_hash, name=name)

    token = jwt_auth.create_token(admin["id"], admin["email"], admin["tokenVersion"])
    await _record_session(session_manager, admin["id"], token, ip_address, user_agent)

    if created_by is None:
        logger.info(f"Admin registered: {admin['id']}")
    else:
        logger.info(f"Admin {admin['id']} added by admin {created_by['id']}")

    return {
        "token": token,
        "admin": public_admin(admin)
    }


async def login_pipeline(
    admin_service: AdminService,
    session_manager: SessionManager,
    jwt_auth: JWTAuth,
    password_hasher: PasswordHasher,
    lockout_policy: LockoutPolicy,
    email: str,
    password: str,
    ip_address: str,
    user_agent: str
) -> dict:
    """
    Orchestrates admin login.

    Returns:
        dict with token and admin

    Raises:
        InvalidCredentialsException: Unknown email or wrong password
        LockedException: Account is locked, or this failure locked it
    """
    admin = await admin_service.get_by_email(email)
    if not admin:
        await asyncio.to_thread(password_hasher.verify_dummy, password)
        raise InvalidCredentialsException()

    now = datetime.now(timezone.utc)
    state = LockoutPolicy.from_record(admin)

    if lockout_policy.is_locked(state, now):
        raise LockedException(state.lock_until, lockout_policy.retry_after(state, now))

    is_match = await asyncio.to_thread(
        password_hasher.verify_password, password, admin.get("passwordHash", "")
    )

    if not is_match:
        failed = lockout_policy.register_failure(state, now)
        await admin_service.update(
            admin["id"],
            AdminUpdate(loginAttempts=failed.attempts, lockUntil=failed.lock_until)
        )

        if lockout_policy.is_locked(failed, now):
            logger.warning(
                f"Admin {admin['id']} locked after {failed.attempts} failed logins"
            )
            raise LockedException(failed.lock_until, lockout_policy.retry_after(failed, now))

        raise InvalidCredentialsException()

    cleared = lockout_policy.register_success()
    await admin_service.update(
        admin["id"],
        AdminUpdate(loginAttempts=cleared.attempts, lockUntil=cleared.lock_until, lastLogin=now)
    )
    admin["lastLogin"] = now

    token = jwt_auth.create_token(admin["id"], admin["email"], admin.get("tokenVersion", 0))
    await _record_session(session_manager, admin["id"], token, ip_address, user_agent)

    logger.info(f"Admin logged in: {admin['id']}")

    return {
        "token": token,
        "admin": public_admin(admin)
    }


async def change_password_pipeline(
    admin_service: AdminService,
    session_manager: SessionManager,
    password_hasher: PasswordHasher,
    admin: Admin,
    current_password: str,
    new_password: str,
    min_password_length: int = 6
) -> dict:
    """
    Change the password of an authenticated admin.

    Bumps the token version and deletes every session, so all existing
    tokens (including the caller's) stop working.

    Raises:
        ValidationException: New password too weak
        BadRequestException: Current password is wrong
    """
    _require_valid_password(new_password, min_password_length)

    is_match = await asyncio.to_thread(
        password_hasher.verify_password, current_password, admin.get("passwordHash", "")
    )
    if not is_match:
        raise BadRequestException(
            message="Current password is incorrect",
            code="INVALID_CURRENT_PASSWORD"
        )

    password_hash = await asyncio.to_thread(password_hasher.hash_password, new_password)
    await admin_service.update(
        admin["id"],
        AdminUpdate(
            passwordHash=password_hash,
            tokenVersion=admin.get("tokenVersion", 0) + 1
        )
    )
    revoked_count = await session_manager.revoke_all_sessions(admin["id"])

    logger.info(f"Password changed for admin {admin['id']}")

    return {
        "message": "Password changed successfully. Please login again.",
        "revokedCount": revoked_count
    }


async def reset_password_pipeline(
    admin_service: AdminService,
    session_manager: SessionManager,
    password_hasher: PasswordHasher,
    reset_secret: Optional[str],
    email: str,
    secret_code: str,
    new_password: str,
    min_password_length: int = 6
) -> dict:
    """
    Reset a password with the shared recovery code.

    Skips the current-password check, clears any lockout, bumps the token
    version and deletes every session.

    Raises:
        ValidationException: New password too weak
        NotFoundException: No admin with this email
        BadRequestException: Wrong recovery code
    """
    if not reset_secret:
        raise InternalServerException(
            message="Password reset is not configured",
            code="RESET_NOT_CONFIGURED"
        )

    _require_valid_password(new_password, min_password_length)

    admin = await admin_service.get_by_email(email)
    if not admin:
        raise NotFoundException(
            message="Admin not found",
            code="ADMIN_NOT_FOUND"
        )

    if not hmac.compare_digest(secret_code.encode("utf-8"), reset_secret.encode("utf-8")):
        logger.warning(f"Invalid password reset code for admin {admin['id']}")
        raise BadRequestException(
            message="Invalid secret code",
            code="INVALID_SECRET_CODE"
        )

    password_hash = await asyncio.to_thread(password_hasher.hash_password, new_password)
    await admin_service.update(
        admin["id"],
        AdminUpdate(
            passwordHash=password_hash,
            loginAttempts=0,
            lockUntil=None,
            tokenVersion=admin.get("tokenVersion", 0) + 1
        )
    )
    await session_manager.revoke_all_sessions(admin["id"])

    logger.info(f"Password reset for admin {admin['id']}")

    return {"message": "Password reset successfully. Please login."}


async def logout_pipeline(
    session_manager: SessionManager,
    admin_id: str,
    session_id: str
) -> dict:
    """End the caller's own session."""
    await session_manager.revoke_session(admin_id, session_id)

    logger.info(f"Admin logged out: {admin_id}")

    return {"message": "Logged out successfully"}


async def get_sessions_pipeline(
    session_manager: SessionManager,
    admin_id: str,
    current_token_hash: str
) -> list[dict]:
    """
    Get all active sessions for an admin.

    Args:
        session_manager: For session retrieval
        admin_id: Owning admin
        current_token_hash: Hash of current session token (to mark as current)

    Returns:
        List of session dicts with isCurrent flag, newest first
    """
    sessions = await session_manager.get_admin_sessions(admin_id)

    return [
        {
            "id": session["id"],
            "ipAddress": session.get("ipAddress"),
            "deviceInfo": session.get("deviceInfo", {}),
            "userAgent": session.get("userAgent"),
            "createdAt": session.get("createdAt"),
            "expiresAt": session.get("expiresAt"),
            "isCurrent": session.get("tokenHash") == current_token_hash
        }
        for session in sessions
    ]


async def revoke_session_pipeline(
    session_manager: SessionManager,
    admin_id: str,
    session_id: str
) -> dict:
    """
    Revoke one of the admin's sessions.

    Raises:
        NotFoundException: No such session for this admin
    """
    success = await session_manager.revoke_session(admin_id, session_id)

    if not success:
        raise NotFoundException(
            message="Session not found",
            code="SESSION_NOT_FOUND"
        )

    return {"message": "Session revoked successfully"}


async def revoke_all_sessions_pipeline(
    session_manager: SessionManager,
    admin_id: str,
    current_token_hash: str,
    except_current: bool = True
) -> dict:
    """
    Revoke all sessions for an admin.

    Args:
        session_manager: For session revocation
        admin_id: Owning admin
        current_token_hash: Hash of current session token
        except_current: If True, keep current session

    Returns:
        dict with revoked count and message
    """
    revoked_count = await session_manager.revoke_all_sessions(
        admin_id=admin_id,
        except_token_hash=current_token_hash if except_current else None
    )

    return {
        "revokedCount": revoked_count,
        "message": "Sessions revoked successfully"
    }
