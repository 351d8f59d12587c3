"""
Auth System Services

Contains service classes for authentication operations.
"""

from portfolio.auth.services.token_hasher import TokenHasher
from portfolio.auth.services.device_detector import DeviceDetector, normalize_ip
from portfolio.auth.services.geo_ip_service import GeoIPService
from portfolio.auth.services.lockout_policy import LockoutPolicy, LockState
from portfolio.auth.services.session_manager import SessionManager
from portfolio.auth.services.admin_service import AdminService

__all__ = [
    "TokenHasher",
    "DeviceDetector",
    "normalize_ip",
    "GeoIPService",
    "LockoutPolicy",
    "LockState",
    "SessionManager",
    "AdminService",
]
