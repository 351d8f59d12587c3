"""
FastAPI dependencies for Auth system.

The services are built once at startup by ``build_auth_services`` and kept
on ``app.state.auth``; route handlers receive them through ``Depends``.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Optional

import httpx
from fastapi import Depends, Request

from common.auth import JWTAuth, PasswordHasher
from common.database import DataStore
from portfolio.auth.middleware import AuthContext, AuthMiddleware
from portfolio.auth.services.admin_service import AdminService
from portfolio.auth.services.device_detector import DeviceDetector
from portfolio.auth.services.geo_ip_service import GeoIPService
from portfolio.auth.services.lockout_policy import LockoutPolicy
from portfolio.auth.services.session_manager import SessionManager
from portfolio.config import Settings


@dataclass
class AuthServices:
    """Everything the auth routes need, wired together."""
    admin_service: AdminService
    session_manager: SessionManager
    jwt_auth: JWTAuth
    password_hasher: PasswordHasher
    lockout_policy: LockoutPolicy
    middleware: AuthMiddleware
    reset_secret: Optional[str]
    min_password_length: int


def build_auth_services(
    store: DataStore,
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None
) -> AuthServices:
    """
    Wire the auth services around a data store.

    Args:
        store: Data store handle (shared by all services)
        settings: Application settings
        http_client: Shared HTTP client for geolocation lookups

    Raises:
        ValueError: JWT secret not configured
    """
    jwt_auth = JWTAuth(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_days=settings.JWT_EXPIRE_DAYS
    )
    admin_service = AdminService(store)
    session_manager = SessionManager(
        store=store,
        device_detector=DeviceDetector(),
        geo_service=GeoIPService(
            api_url=settings.GEOIP_API_URL,
            timeout=settings.GEOIP_TIMEOUT_SECONDS,
            http_client=http_client
        ),
        expiration_days=settings.SESSION_EXPIRE_DAYS
    )

    return AuthServices(
        admin_service=admin_service,
        session_manager=session_manager,
        jwt_auth=jwt_auth,
        password_hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        lockout_policy=LockoutPolicy(
            max_attempts=settings.LOCKOUT_MAX_ATTEMPTS,
            lock_duration=timedelta(seconds=settings.LOCKOUT_DURATION_SECONDS)
        ),
        middleware=AuthMiddleware(jwt_auth, session_manager, admin_service),
        reset_secret=settings.PASSWORD_RESET_SECRET,
        min_password_length=settings.PASSWORD_MIN_LENGTH
    )


def get_auth_services(request: Request) -> AuthServices:
    """Get the auth services attached to the application."""
    services = getattr(request.app.state, "auth", None)
    if services is None:
        raise RuntimeError("Auth services not initialized. Call build_auth_services first.")
    return services


async def require_auth(
    request: Request,
    services: Annotated[AuthServices, Depends(get_auth_services)]
) -> AuthContext:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(context: Annotated[AuthContext, Depends(require_auth)]):
            return {"admin_id": context.admin["id"]}
    """
    return await services.middleware.require_auth(request)


async def optional_auth(
    request: Request,
    services: Annotated[AuthServices, Depends(get_auth_services)]
) -> Optional[AuthContext]:
    """Dependency that authenticates the caller when a bearer token is sent."""
    return await services.middleware.optional_auth(request)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "0.0.0.0"


def get_user_agent(request: Request) -> str:
    """Extract User-Agent from request."""
    return request.headers.get("User-Agent", "")
