"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection and a generic table store
- auth: JWT token service and bcrypt password hashing
- utils: Standard responses, exceptions, password validation, logging
- config: Base settings class
"""

from common.database import MongoDB, DataStore, MongoStore, StoreError
from common.auth import JWTAuth, PasswordHasher
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    NotFoundException,
    ValidationException,
    validate_password,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "DataStore",
    "MongoStore",
    "StoreError",
    # Auth
    "JWTAuth",
    "PasswordHasher",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "NotFoundException",
    "ValidationException",
    "validate_password",
    # Config
    "BaseAppSettings",
]
