"""
FastAPI router for admin authentication endpoints.

Registration, login, password management and session management.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from portfolio.auth import pipelines
from portfolio.auth.dependencies import (
    AuthServices,
    get_auth_services,
    get_client_ip,
    get_user_agent,
    optional_auth,
    require_auth,
)
from portfolio.auth.middleware import AuthContext
from portfolio.auth.models import public_admin
from portfolio.auth.schemas import (
    AdminResponse,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    RevokeAllSessionsResponse,
    SessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

Services = Annotated[AuthServices, Depends(get_auth_services)]
CurrentAdmin = Annotated[AuthContext, Depends(require_auth)]
OptionalAdmin = Annotated[Optional[AuthContext], Depends(optional_auth)]


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(request: Request, body: RegisterRequest, services: Services, caller: OptionalAdmin):
    """
    Register an admin account.

    Open without a token only while no admin exists; afterwards the caller
    must be an authenticated admin. Fails if the email is already taken.
    """
    return await pipelines.registration_pipeline(
        admin_service=services.admin_service,
        session_manager=services.session_manager,
        jwt_auth=services.jwt_auth,
        password_hasher=services.password_hasher,
        name=body.name,
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
        min_password_length=services.min_password_length,
        created_by=caller.admin if caller else None
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: Request, body: LoginRequest, services: Services):
    """Authenticate with email and password."""
    return await pipelines.login_pipeline(
        admin_service=services.admin_service,
        session_manager=services.session_manager,
        jwt_auth=services.jwt_auth,
        password_hasher=services.password_hasher,
        lockout_policy=services.lockout_policy,
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request)
    )


@router.get("/me", response_model=AdminResponse)
async def me(context: CurrentAdmin):
    """Return the authenticated admin."""
    return public_admin(context.admin)


@router.post("/logout", response_model=MessageResponse)
async def logout(context: CurrentAdmin, services: Services):
    """End the current session."""
    return await pipelines.logout_pipeline(
        session_manager=services.session_manager,
        admin_id=context.admin["id"],
        session_id=context.session["id"]
    )


@router.put("/change-password", response_model=MessageResponse)
async def change_password(body: ChangePasswordRequest, context: CurrentAdmin, services: Services):
    """
    Change the current admin's password.

    Every session, including this one, is signed out.
    """
    return await pipelines.change_password_pipeline(
        admin_service=services.admin_service,
        session_manager=services.session_manager,
        password_hasher=services.password_hasher,
        admin=context.admin,
        current_password=body.currentPassword,
        new_password=body.newPassword,
        min_password_length=services.min_password_length
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, services: Services):
    """Reset a password using the shared recovery code."""
    return await pipelines.reset_password_pipeline(
        admin_service=services.admin_service,
        session_manager=services.session_manager,
        password_hasher=services.password_hasher,
        reset_secret=services.reset_secret,
        email=body.email,
        secret_code=body.secretCode,
        new_password=body.newPassword,
        min_password_length=services.min_password_length
    )


@router.get("/sessions", response_model=List[SessionResponse])
async def list_sessions(context: CurrentAdmin, services: Services):
    """List the current admin's active sessions, newest first."""
    return await pipelines.get_sessions_pipeline(
        session_manager=services.session_manager,
        admin_id=context.admin["id"],
        current_token_hash=context.token_hash
    )


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def revoke_session(session_id: str, context: CurrentAdmin, services: Services):
    """Revoke one of the current admin's sessions."""
    return await pipelines.revoke_session_pipeline(
        session_manager=services.session_manager,
        admin_id=context.admin["id"],
        session_id=session_id
    )


@router.delete("/sessions", response_model=RevokeAllSessionsResponse)
async def revoke_all_sessions(
    context: CurrentAdmin,
    services: Services,
    revoke_all: bool = Query(default=False, alias="all", description="Also end the current session")
):
    """Revoke every other session, or every session when ``all=true``."""
    return await pipelines.revoke_all_sessions_pipeline(
        session_manager=services.session_manager,
        admin_id=context.admin["id"],
        current_token_hash=context.token_hash,
        except_current=not revoke_all
    )
