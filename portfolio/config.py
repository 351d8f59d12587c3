"""
Portfolio application settings.

Extends the base settings with admin-authentication configuration.
"""

from typing import List, Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Portfolio-specific settings."""

    # ==========================================================================
    # Password Recovery
    # ==========================================================================
    # Shared code for the unauthenticated reset path. No default.
    PASSWORD_RESET_SECRET: Optional[str] = None

    # ==========================================================================
    # Login Lockout
    # ==========================================================================
    LOCKOUT_MAX_ATTEMPTS: int = 5
    LOCKOUT_DURATION_SECONDS: int = 15 * 60

    # ==========================================================================
    # Sessions
    # ==========================================================================
    SESSION_EXPIRE_DAYS: int = 7

    # IP geolocation (ip-api.com compatible JSON endpoint)
    GEOIP_API_URL: str = "http://ip-api.com/json/{ip}"
    GEOIP_TIMEOUT_SECONDS: float = 3.0

    # ==========================================================================
    # Passwords
    # ==========================================================================
    BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 6

    def missing_settings(self) -> List[str]:
        errors = super().missing_settings()

        if not self.PASSWORD_RESET_SECRET:
            errors.append("PASSWORD_RESET_SECRET is required for password recovery")

        if self.LOCKOUT_MAX_ATTEMPTS < 1:
            errors.append("LOCKOUT_MAX_ATTEMPTS must be at least 1")

        return errors


# Global settings instance
settings = Settings()
