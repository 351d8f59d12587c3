"""
Generic table-style data store.

Services talk to a ``DataStore``: insert / select / update / delete by
filter, plus count. ``MongoStore`` is the Motor-backed implementation; each
logical table is a collection and each row a flat document.

Filters are ``{field: value}`` equality maps. Comparison operators are
expressed with the helpers in this module:

    await store.select(
        "admin_sessions",
        {"adminId": admin_id, "expiresAt": gt(now)},
        order_by="createdAt",
        descending=True,
    )

Keys are camelCase on the application side and snake_case in storage; the
translation happens here and nowhere else.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from common.database.fields import camel_to_snake, to_camel_keys, to_snake_keys

logger = logging.getLogger(__name__)

# MongoDB server error code for a missing collection/namespace
_NAMESPACE_NOT_FOUND = 26


class StoreError(Exception):
    """Underlying data-store failure (connectivity, constraint, etc.)."""


class DuplicateRecordError(StoreError):
    """A unique constraint rejected the write."""


class TableMissingError(StoreError):
    """The target table does not exist."""


@dataclass(frozen=True)
class Op:
    """Comparison operator applied to a filter value."""
    operator: str
    value: Any


def gt(value: Any) -> Op:
    return Op("gt", value)


def ne(value: Any) -> Op:
    return Op("ne", value)


Filters = Dict[str, Any]


class DataStore(ABC):
    """
    Abstract table store.

    Records passed in and returned are plain dicts with camelCase keys.
    Every inserted record receives a string ``id`` if it has none.
    """

    @abstractmethod
    async def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it as stored (including ``id``)."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return every record matching ``filters``."""

    async def select_one(self, table: str, filters: Filters) -> Optional[Dict[str, Any]]:
        """Return the first record matching ``filters`` or None."""
        rows = await self.select(table, filters, limit=1)
        return rows[0] if rows else None

    @abstractmethod
    async def update(self, table: str, filters: Filters, changes: Dict[str, Any]) -> int:
        """Apply ``changes`` to every matching record; return how many matched."""

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> int:
        """Delete every matching record; return how many were removed."""

    @abstractmethod
    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        """Count matching records."""

    async def ensure_index(self, table: str, fields: Sequence[str], unique: bool = False) -> None:
        """Create an index if the backend supports it. No-op by default."""


class MongoStore(DataStore):
    """``DataStore`` over a Motor database; one collection per table."""

    _OPERATORS = {"gt": "$gt", "ne": "$ne"}

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MongoStore.

        Args:
            db: Motor database handle
        """
        self._db = db

    def _query(self, filters: Optional[Filters]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        for key, value in (filters or {}).items():
            column = camel_to_snake(key)
            if isinstance(value, Op):
                query[column] = {self._OPERATORS[value.operator]: value.value}
            else:
                query[column] = value
        return query

    def _translate(self, table: str, error: PyMongoError) -> StoreError:
        if isinstance(error, DuplicateKeyError):
            return DuplicateRecordError(f"Duplicate record in {table}: {error}")
        if isinstance(error, OperationFailure) and error.code == _NAMESPACE_NOT_FOUND:
            return TableMissingError(f"Table {table} does not exist")
        return StoreError(f"{table}: {error}")

    async def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = to_snake_keys(record)
        row.setdefault("id", str(uuid.uuid4()))

        try:
            # insert_one mutates its argument with an ObjectId ``_id``
            await self._db[table].insert_one(dict(row))
        except PyMongoError as e:
            raise self._translate(table, e) from e

        logger.debug(f"Inserted row {row['id']} into {table}")
        return to_camel_keys(row)

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self._db[table].find(self._query(filters), {"_id": 0})
            if order_by:
                cursor = cursor.sort(
                    camel_to_snake(order_by), DESCENDING if descending else ASCENDING
                )
            if limit:
                cursor = cursor.limit(limit)
            rows = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._translate(table, e) from e

        return [to_camel_keys(row) for row in rows]

    async def update(self, table: str, filters: Filters, changes: Dict[str, Any]) -> int:
        if not changes:
            return 0

        try:
            result = await self._db[table].update_many(
                self._query(filters), {"$set": to_snake_keys(changes)}
            )
        except PyMongoError as e:
            raise self._translate(table, e) from e

        return result.matched_count

    async def delete(self, table: str, filters: Filters) -> int:
        try:
            result = await self._db[table].delete_many(self._query(filters))
        except PyMongoError as e:
            raise self._translate(table, e) from e

        return result.deleted_count

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        try:
            return await self._db[table].count_documents(self._query(filters))
        except PyMongoError as e:
            raise self._translate(table, e) from e

    async def ensure_index(self, table: str, fields: Sequence[str], unique: bool = False) -> None:
        keys = [(camel_to_snake(field), ASCENDING) for field in fields]
        try:
            await self._db[table].create_index(keys, unique=unique)
        except PyMongoError as e:
            raise self._translate(table, e) from e
        logger.debug(f"Ensured index on {table}: {[k for k, _ in keys]} (unique={unique})")
