"""
Session management for admin authentication.

Each issued bearer token has one row in the ``admin_sessions`` table, keyed
by the SHA-256 hash of the token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from common.database import DataStore, TableMissingError, gt, ne
from portfolio.auth.models import SESSIONS_TABLE, AdminSession
from portfolio.auth.services.device_detector import DeviceDetector, normalize_ip
from portfolio.auth.services.geo_ip_service import GeoIPService
from portfolio.auth.services.token_hasher import TokenHasher

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Handles session CRUD operations.
    """

    DEFAULT_EXPIRATION_DAYS = 7

    def __init__(
        self,
        store: DataStore,
        device_detector: DeviceDetector,
        geo_service: GeoIPService,
        expiration_days: int = DEFAULT_EXPIRATION_DAYS,
    ):
        """
        Initialize SessionManager.

        Args:
            store: Data store handle
            device_detector: Service for parsing User-Agent
            geo_service: Service for IP-to-location lookup
            expiration_days: Lifetime of a session row
        """
        self._store = store
        self._device_detector = device_detector
        self._geo_service = geo_service
        self._expiration = timedelta(days=expiration_days)

    async def ensure_indexes(self) -> None:
        await self._store.ensure_index(SESSIONS_TABLE, ["tokenHash"], unique=True)
        await self._store.ensure_index(SESSIONS_TABLE, ["adminId"])

    async def describe_client(self, user_agent: str, ip_address: str) -> Dict[str, Any]:
        """
        Build the device-info blob for a session.

        Device fields come from the User-Agent; location fields from a
        best-effort lookup of the (already normalized) IP.
        """
        device_info: Dict[str, Any] = dict(self._device_detector.detect(user_agent))
        device_info.update(await self._geo_service.lookup(ip_address))
        return device_info

    async def create_session(
        self,
        admin_id: str,
        token: str,
        ip_address: str,
        user_agent: str,
    ) -> AdminSession:
        """
        Record a session for a freshly issued token.

        Args:
            admin_id: Owning admin
            token: The issued bearer token (only its hash is stored)
            ip_address: Raw client address, possibly a forwarded-for chain
            user_agent: Client User-Agent header

        Returns:
            The stored session record
        """
        client_ip = normalize_ip(ip_address)
        now = datetime.now(timezone.utc)

        session = {
            "adminId": admin_id,
            "tokenHash": TokenHasher.hash_token(token),
            "ipAddress": client_ip,
            "userAgent": user_agent or "",
            "deviceInfo": await self.describe_client(user_agent, client_ip),
            "createdAt": now,
            "expiresAt": now + self._expiration,
        }

        created = await self._store.insert(SESSIONS_TABLE, session)
        logger.info(f"Session created for admin {admin_id}")
        return created

    async def find_by_token_hash(self, token_hash: str) -> Optional[AdminSession]:
        """Return the non-expired session for a token hash, or None."""
        now = datetime.now(timezone.utc)
        return await self._store.select_one(
            SESSIONS_TABLE,
            {"tokenHash": token_hash, "expiresAt": gt(now)},
        )

    async def get_admin_sessions(self, admin_id: str) -> List[AdminSession]:
        """
        Get all non-expired sessions for an admin, newest first.

        A missing sessions table reads as no sessions.
        """
        now = datetime.now(timezone.utc)
        try:
            return await self._store.select(
                SESSIONS_TABLE,
                {"adminId": admin_id, "expiresAt": gt(now)},
                order_by="createdAt",
                descending=True,
            )
        except TableMissingError:
            logger.warning("Sessions table missing; reporting no sessions")
            return []

    async def revoke_session(self, admin_id: str, session_id: str) -> bool:
        """
        Delete one session owned by the admin.

        Returns:
            True if removed, False if no such session belongs to the admin
        """
        deleted = await self._store.delete(
            SESSIONS_TABLE, {"id": session_id, "adminId": admin_id}
        )

        if deleted:
            logger.info(f"Session {session_id} revoked for admin {admin_id}")
            return True

        return False

    async def revoke_all_sessions(
        self,
        admin_id: str,
        except_token_hash: Optional[str] = None,
    ) -> int:
        """
        Delete every session of an admin.

        Args:
            admin_id: Owning admin
            except_token_hash: Optional token hash to keep (current session)

        Returns:
            Number of sessions removed
        """
        filters: Dict[str, Any] = {"adminId": admin_id}
        if except_token_hash:
            filters["tokenHash"] = ne(except_token_hash)

        removed_count = await self._store.delete(SESSIONS_TABLE, filters)

        logger.info(f"Revoked {removed_count} sessions for admin {admin_id}")
        return removed_count
