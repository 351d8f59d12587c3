"""
bcrypt password hashing.

Passwords are pre-hashed with SHA-256 before bcrypt so that inputs longer
than bcrypt's 72-byte limit are still fully significant. Hashes produced
by plain bcrypt (no pre-hash) continue to verify.
"""

import base64
import hashlib
import secrets

import bcrypt as bcrypt_lib


class PasswordHasher:
    """
    Salted one-way password hashing with a fixed cost factor.
    """

    def __init__(self, rounds: int = 12):
        """
        Args:
            rounds: bcrypt cost factor
        """
        self.rounds = rounds
        # Stand-in digest checked when there is no stored hash to verify against
        self._dummy_hash = self.hash_password(secrets.token_hex(16))

    def _prehash_password(self, password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Never raises for a wrong password or an unreadable hash; returns False.
        """
        if not hashed:
            return False

        hashed_bytes = hashed.encode("utf-8")

        try:
            if bcrypt_lib.checkpw(self._prehash_password(password), hashed_bytes):
                return True
        except ValueError:
            return False

        # Legacy hashes were made from the raw password
        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            return False

    def verify_dummy(self, password: str) -> bool:
        """
        Spend the same bcrypt work as a failed ``verify_password``.

        Used when the account does not exist, so the response time does not
        tell unknown emails apart from wrong passwords. Always False.
        """
        self.verify_password(password, self._dummy_hash)
        return False
