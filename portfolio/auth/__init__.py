"""
Auth System

Admin identity verification and access control: password login with
lockout, JWT issuance, and server-side session tracking.
"""

from portfolio.auth.middleware import AuthContext, AuthMiddleware
from portfolio.auth.dependencies import AuthServices, build_auth_services, require_auth

__all__ = [
    "AuthContext",
    "AuthMiddleware",
    "AuthServices",
    "build_auth_services",
    "require_auth",
]
