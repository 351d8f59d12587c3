"""
Database module - async MongoDB connection and a generic table store.

Usage:
    from common.database import MongoDB, MongoStore

    db = MongoDB()
    await db.connect(uri, database_name)
    store = MongoStore(db.db)
    admin = await store.select_one("admins", {"email": "a@x.com"})
"""

from common.database.mongodb import MongoDB
from common.database.store import (
    DataStore,
    MongoStore,
    StoreError,
    DuplicateRecordError,
    TableMissingError,
    gt,
    ne,
)
from common.database.fields import to_camel_keys, to_snake_keys

__all__ = [
    "MongoDB",
    "DataStore",
    "MongoStore",
    "StoreError",
    "DuplicateRecordError",
    "TableMissingError",
    "gt",
    "ne",
    "to_camel_keys",
    "to_snake_keys",
]
