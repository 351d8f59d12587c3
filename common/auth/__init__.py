"""
Authentication module - JWT token service and bcrypt password hashing.
"""

from common.auth.jwt_auth import JWTAuth, TokenClaims, InvalidTokenError
from common.auth.password_hasher import PasswordHasher

__all__ = ["JWTAuth", "TokenClaims", "InvalidTokenError", "PasswordHasher"]
