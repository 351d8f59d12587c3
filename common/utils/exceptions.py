"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes
for consistent API error responses.

Example:
    from common.utils import NotFoundException

    @router.get("/admins/{admin_id}")
    async def get_admin(admin_id: str):
        admin = await admin_service.get_by_id(admin_id)
        if not admin:
            raise NotFoundException("Admin not found", code="ADMIN_NOT_FOUND")
        return admin
"""

from datetime import datetime
from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            headers: Optional response headers
        """
        detail: Dict[str, Any] = {"message": message}

        if code:
            detail["code"] = code

        if details is not None:
            detail["details"] = details

        self.message = message
        self.code = code

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )


class BadRequestException(APIException):
    """400 Bad Request - Invalid input or malformed request."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class InvalidCredentialsException(BadRequestException):
    """400 - Email/password pair rejected. Never says which half was wrong."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid authentication."""

    def __init__(
        self,
        message: str = "Unauthorized",
        code: str = "UNAUTHORIZED",
        details: Optional[Any] = None,
    ):
        super().__init__(401, message, code, details)


class LockedException(APIException):
    """403 Forbidden - Account temporarily locked after repeated failures."""

    def __init__(self, lock_until: datetime, retry_after: int):
        self.lock_until = lock_until
        self.retry_after = retry_after

        super().__init__(
            status_code=403,
            message=f"Account locked. Try again in {retry_after} seconds.",
            code="ACCOUNT_LOCKED",
            details={"lockUntil": lock_until.isoformat(), "retryAfter": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

        # Also at the top level of the body
        self.detail["lockUntil"] = lock_until.isoformat()
        self.detail["retryAfter"] = retry_after


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """400 Conflict - Resource already exists (reported as a bad request)."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class ValidationException(APIException):
    """422 Validation Error - Request validation failed."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
        errors: Optional[list] = None,
    ):
        detail_info = details
        if errors:
            detail_info = {"errors": errors, **(details or {})}
        super().__init__(422, message, code, detail_info)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)
