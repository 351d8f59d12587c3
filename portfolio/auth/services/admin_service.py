"""
Admin service for admin identity records.

Handles admin creation, lookup, and partial updates.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from common.database import DataStore, DuplicateRecordError
from common.utils.exceptions import ConflictException
from portfolio.auth.models import ADMINS_TABLE, Admin, AdminUpdate

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AdminService:
    """
    Manages admin records in the ``admins`` table.
    """

    def __init__(self, store: DataStore):
        """
        Initialize AdminService.

        Args:
            store: Data store handle
        """
        self._store = store

    async def ensure_indexes(self) -> None:
        """Create the unique constraints the admins table relies on."""
        await self._store.ensure_index(ADMINS_TABLE, ["email"], unique=True)
        await self._store.ensure_index(ADMINS_TABLE, ["id"], unique=True)

    async def get_by_email(self, email: str) -> Optional[Admin]:
        return await self._store.select_one(ADMINS_TABLE, {"email": normalize_email(email)})

    async def get_by_id(self, admin_id: str) -> Optional[Admin]:
        return await self._store.select_one(ADMINS_TABLE, {"id": admin_id})

    async def count(self) -> int:
        return await self._store.count(ADMINS_TABLE)

    async def create(self, email: str, password_hash: str, name: str) -> Admin:
        """
        Create a new admin record.

        Args:
            email: Login email (stored lowercased)
            password_hash: bcrypt digest of the password
            name: Display name

        Returns:
            Created admin record

        Raises:
            ConflictException: Email already registered
        """
        record = {
            "email": normalize_email(email),
            "passwordHash": password_hash,
            "name": name,
            "role": "admin",
            "loginAttempts": 0,
            "lockUntil": None,
            "lastLogin": None,
            "tokenVersion": 0,
            "createdAt": datetime.now(timezone.utc),
        }

        try:
            admin = await self._store.insert(ADMINS_TABLE, record)
        except DuplicateRecordError:
            raise ConflictException(
                message="Admin already exists",
                code="CONFLICT"
            )

        logger.info(f"Admin created: {admin['id']}")
        return admin

    async def update(self, admin_id: str, update: AdminUpdate) -> int:
        """
        Write the explicitly-set fields of ``update``.

        Returns:
            Number of records matched (0 or 1)
        """
        return await self._store.update(ADMINS_TABLE, {"id": admin_id}, update.changes())
