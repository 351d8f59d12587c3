"""
JWT bearer-token service.

Issues and verifies signed tokens that carry an admin identity and the
token version (epoch) that was current when the token was issued.

Example:
    auth = JWTAuth(secret="your-secret-key", expire_days=7)

    token = auth.create_token(admin_id="42", email="a@x.com", token_version=0)
    claims = auth.verify_token(token)
    print(claims.admin_id, claims.token_version)

Signature and expiry are all this class checks. Whether the token still
maps to a live session is decided by the caller.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError


class InvalidTokenError(ValueError):
    """Token is malformed, has a bad signature, or is expired."""


@dataclass(frozen=True)
class TokenClaims:
    """Identity decoded from a verified token."""
    admin_id: str
    email: str
    token_version: int


class JWTAuth:
    """
    HMAC-signed JWT issuer/verifier.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_days: int = 7,
    ):
        """
        Initialize JWT auth.

        Args:
            secret: Secret key for JWT signing
            algorithm: JWT algorithm (default: HS256)
            expire_days: Absolute token lifetime

        Raises:
            ValueError: If no secret is given
        """
        if not secret:
            raise ValueError("JWT secret is not configured")

        self._secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(days=expire_days)

    def create_token(self, admin_id: str, email: str, token_version: int) -> str:
        """
        Create a signed token for the admin.

        Each token gets a random ``jti`` so two logins in the same second
        still produce distinct tokens (and distinct session rows).
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": admin_id,
            "email": email,
            "ver": token_version,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self.access_token_expire,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenClaims:
        """
        Verify and decode a token.

        Raises:
            InvalidTokenError: If token is malformed, tampered with, or expired
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        admin_id = payload.get("sub")
        email = payload.get("email")
        version = payload.get("ver")

        if not isinstance(admin_id, str) or not isinstance(email, str):
            raise InvalidTokenError("Invalid token: missing identity claims")
        if not isinstance(version, int) or isinstance(version, bool):
            raise InvalidTokenError("Invalid token: missing version claim")

        return TokenClaims(admin_id=admin_id, email=email, token_version=version)
