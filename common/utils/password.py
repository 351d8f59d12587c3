"""
Password strength validation.

Example:
    from common.utils import validate_password

    is_valid, errors = validate_password("abc", min_length=6)
    if not is_valid:
        print("Password errors:", errors)
"""

import re
from typing import List, Tuple


def validate_password(
    password: str,
    min_length: int = 6,
    max_length: int = 128,
    require_letter: bool = False,
    require_digit: bool = False,
) -> Tuple[bool, List[str]]:
    """
    Validate password strength.

    Args:
        password: The password to validate
        min_length: Minimum password length
        max_length: Maximum password length
        require_letter: Require at least one letter
        require_digit: Require at least one digit

    Returns:
        Tuple of (is_valid: bool, errors: List[str])
    """
    errors: List[str] = []

    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters")

    if len(password) > max_length:
        errors.append(f"Password must be no more than {max_length} characters")

    if not password.strip():
        errors.append("Password must not be blank")

    if require_letter and not re.search(r"[A-Za-z]", password):
        errors.append("Password must contain at least one letter")

    if require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return len(errors) == 0, errors
