"""
Utilities module - Common helpers for API responses, exceptions, and validation.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    InvalidCredentialsException,
    UnauthorizedException,
    LockedException,
    NotFoundException,
    ConflictException,
    ValidationException,
    InternalServerException,
)
from common.utils.password import validate_password

__all__ = [
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "InvalidCredentialsException",
    "UnauthorizedException",
    "LockedException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "InternalServerException",
    "validate_password",
]
