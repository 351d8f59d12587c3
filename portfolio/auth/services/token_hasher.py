"""
Token hashing utilities.

Sessions are keyed by a digest of the bearer token so the token itself is
never stored.
"""

import hashlib


class TokenHasher:
    """
    Handles token hashing.
    """

    @staticmethod
    def hash_token(token: str) -> str:
        """
        Digest a bearer token for the ``tokenHash`` column.

        Args:
            token: Encoded JWT as sent by the client

        Returns:
            64-character hex SHA-256 digest
        """
        return hashlib.sha256(token.encode()).hexdigest()
