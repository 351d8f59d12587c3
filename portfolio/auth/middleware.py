"""
Authentication middleware for protected routes.

A request is authenticated only if its bearer token
  1. has a valid signature and has not expired,
  2. still has a live session row (looked up by token hash), and
  3. carries the admin's current token version.
Revoking a session row or bumping the version therefore invalidates a token
that is otherwise still well-formed.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from common.auth import InvalidTokenError, JWTAuth
from common.utils.exceptions import UnauthorizedException
from portfolio.auth.models import Admin, AdminSession
from portfolio.auth.services.admin_service import AdminService
from portfolio.auth.services.session_manager import SessionManager
from portfolio.auth.services.token_hasher import TokenHasher

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """The authenticated caller."""
    admin: Admin
    session: AdminSession
    token_hash: str


class AuthMiddleware:
    """
    Validates bearer token and session, and attaches the admin to the request.
    """

    def __init__(
        self,
        jwt_auth: JWTAuth,
        session_manager: SessionManager,
        admin_service: AdminService
    ):
        """
        Initialize AuthMiddleware.

        Args:
            jwt_auth: Token verifier
            session_manager: For session validation
            admin_service: For loading the token's admin
        """
        self._jwt_auth = jwt_auth
        self._session_manager = session_manager
        self._admin_service = admin_service

    async def authenticate(self, token: Optional[str]) -> AuthContext:
        """
        Check a bearer token.

        Raises:
            UnauthorizedException: Missing, invalid, expired or revoked token
        """
        if not token:
            raise UnauthorizedException(
                message="No token, authorization denied",
                code="AUTH_REQUIRED"
            )

        try:
            claims = self._jwt_auth.verify_token(token)
        except InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            raise UnauthorizedException(
                message="Token is not valid",
                code="INVALID_TOKEN"
            )

        token_hash = TokenHasher.hash_token(token)
        session = await self._session_manager.find_by_token_hash(token_hash)

        if not session or session.get("adminId") != claims.admin_id:
            raise UnauthorizedException(
                message="Session expired or revoked",
                code="SESSION_REVOKED"
            )

        admin = await self._admin_service.get_by_id(claims.admin_id)

        if not admin:
            raise UnauthorizedException(
                message="Token is not valid",
                code="INVALID_TOKEN"
            )

        if admin.get("tokenVersion", 0) != claims.token_version:
            raise UnauthorizedException(
                message="Session expired or revoked",
                code="SESSION_REVOKED"
            )

        return AuthContext(admin=admin, session=session, token_hash=token_hash)

    async def require_auth(self, request: Request) -> AuthContext:
        """
        Validate request is authenticated.

        Side Effects:
            - Attaches admin to request.state.admin
            - Attaches current session to request.state.session
        """
        context = await self.authenticate(self._extract_token(request))

        request.state.admin = context.admin
        request.state.session = context.session
        request.state.token_hash = context.token_hash

        return context

    async def optional_auth(self, request: Request) -> Optional[AuthContext]:
        """
        Authenticate only if an Authorization header was sent.

        No header means an anonymous caller (None). A header that is
        present but invalid is rejected like on a protected route.
        """
        if not request.headers.get("Authorization"):
            return None
        return await self.require_auth(request)

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract bearer token from Authorization header.

        Expected format: "Authorization: Bearer <token>"
        """
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            return None

        parts = auth_header.split()

        if len(parts) != 2:
            return None

        scheme, token = parts

        if scheme.lower() != "bearer":
            return None

        return token
