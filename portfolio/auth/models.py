"""
Admin and session record shapes.

Records are plain dicts (camelCase keys) as returned by the data store.
"""

from datetime import datetime
from typing import Any, Dict, Optional, TypedDict

from pydantic import BaseModel

ADMINS_TABLE = "admins"
SESSIONS_TABLE = "admin_sessions"


class Admin(TypedDict, total=False):
    id: str
    email: str
    passwordHash: str
    name: str
    role: str
    loginAttempts: int
    lockUntil: Optional[datetime]
    lastLogin: Optional[datetime]
    tokenVersion: int
    createdAt: datetime


class AdminSession(TypedDict, total=False):
    id: str
    adminId: str
    tokenHash: str
    ipAddress: str
    userAgent: str
    deviceInfo: Dict[str, Any]
    createdAt: datetime
    expiresAt: datetime


class AdminUpdate(BaseModel):
    """
    Partial update of an admin record.

    Only fields that were explicitly set are written; setting a field to
    None clears the stored value.
    """
    passwordHash: Optional[str] = None
    name: Optional[str] = None
    loginAttempts: Optional[int] = None
    lockUntil: Optional[datetime] = None
    lastLogin: Optional[datetime] = None
    tokenVersion: Optional[int] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def public_admin(admin: Admin) -> Dict[str, Any]:
    """Fields of an admin record that may be returned to clients."""
    return {
        "id": admin["id"],
        "email": admin["email"],
        "name": admin.get("name"),
        "role": admin.get("role", "admin"),
        "lastLogin": admin.get("lastLogin"),
        "createdAt": admin.get("createdAt"),
    }
