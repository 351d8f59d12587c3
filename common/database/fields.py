"""
Field-name translation between application records and stored rows.

Application code works with camelCase keys (``tokenHash``, ``lockUntil``);
rows are persisted with snake_case columns (``token_hash``, ``lock_until``).
The two functions below are inverses of each other for every key made of
lowercase words, and are only applied at the data-store boundary.
"""

import re
from typing import Any, Dict

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """``tokenHash`` -> ``token_hash``"""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    """``token_hash`` -> ``tokenHash``"""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake_keys(record: Dict[str, Any]) -> Dict[str, Any]:
    """Rename the top-level keys of an application record to column names."""
    return {camel_to_snake(key): value for key, value in record.items()}


def to_camel_keys(row: Dict[str, Any]) -> Dict[str, Any]:
    """Rename the top-level columns of a stored row to application keys."""
    return {snake_to_camel(key): value for key, value in row.items()}
