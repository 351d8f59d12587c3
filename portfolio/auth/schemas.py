"""
Pydantic models for Auth system request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, EmailStr


class RegisterRequest(BaseModel):
    """Request body for admin registration."""
    name: str = Field(default="Admin", min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request body for admin login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Request body for changing the current admin's password."""
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    """Request body for recovery with the shared secret code."""
    email: EmailStr
    secretCode: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)


class AdminResponse(BaseModel):
    """Public admin fields."""
    id: str
    email: EmailStr
    name: Optional[str] = None
    role: str = "admin"
    lastLogin: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Response for successful authentication (login/register)."""
    token: str
    admin: AdminResponse


class DeviceInfoSchema(BaseModel):
    """Device and location details recorded with a session."""
    deviceType: str = Field(default="desktop", description="mobile | tablet | desktop")
    browser: str = "Unknown"
    browserVersion: Optional[str] = None
    os: str = "Unknown"
    osVersion: Optional[str] = None
    displayName: str = Field(default="Unknown device", description="Human-readable device description")
    city: str = "Unknown"
    region: str = "Unknown"
    country: str = "Unknown"
    isp: str = "Unknown"


class SessionResponse(BaseModel):
    """Session information in API responses."""
    id: str
    ipAddress: Optional[str] = None
    deviceInfo: DeviceInfoSchema
    userAgent: Optional[str] = None
    createdAt: datetime
    expiresAt: datetime
    isCurrent: bool = Field(default=False)


class MessageResponse(BaseModel):
    message: str


class RevokeAllSessionsResponse(BaseModel):
    """Response for revoking many sessions."""
    revokedCount: int
    message: str = "Sessions revoked successfully"
