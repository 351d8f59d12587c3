"""Shared test fixtures for the portfolio admin backend tests."""

import copy
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from common.database import DataStore, DuplicateRecordError, StoreError
from common.database.store import Op
from portfolio.auth.dependencies import build_auth_services
from portfolio.auth.services.device_detector import DeviceDetector
from portfolio.auth.services.geo_ip_service import GeoIPService
from portfolio.auth.services.session_manager import SessionManager
from portfolio.config import Settings


# ─────────────────────────────────────────────────────────────────
# In-memory DataStore
# ─────────────────────────────────────────────────────────────────


def _compare(actual: Any, op: Op) -> bool:
    if op.operator == "ne":
        return actual != op.value
    if actual is None:
        return False
    if op.operator == "gt":
        return actual > op.value
    raise ValueError(f"Unsupported operator {op.operator}")


class InMemoryStore(DataStore):
    """Dict-backed DataStore with unique constraints, for orchestrator tests."""

    def __init__(self, unique: Optional[Dict[str, List[Sequence[str]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.unique = defaultdict(list, unique or {
            "admins": [("email",), ("id",)],
            "admin_sessions": [("tokenHash",)],
        })
        self.failing_tables: set = set()

    def _check_available(self, table: str) -> None:
        if table in self.failing_tables:
            raise StoreError(f"{table}: connection refused")

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        for key, value in (filters or {}).items():
            actual = row.get(key)
            if isinstance(value, Op):
                if not _compare(actual, value):
                    return False
            elif actual != value:
                return False
        return True

    async def insert(self, table, record):
        self._check_available(table)
        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid.uuid4()))

        for fields in self.unique[table]:
            key = tuple(row.get(f) for f in fields)
            if any(tuple(r.get(f) for f in fields) == key for r in self.tables[table]):
                raise DuplicateRecordError(f"Duplicate record in {table}: {fields}")

        self.tables[table].append(row)
        return copy.deepcopy(row)

    async def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        self._check_available(table)
        rows = [r for r in self.tables[table] if self._matches(r, filters)]
        if order_by:
            rows = sorted(rows, key=lambda r: r.get(order_by), reverse=descending)
        if limit:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    async def update(self, table, filters, changes):
        self._check_available(table)
        matched = 0
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(copy.deepcopy(changes))
                matched += 1
        return matched

    async def delete(self, table, filters):
        self._check_available(table)
        keep = [r for r in self.tables[table] if not self._matches(r, filters)]
        removed = len(self.tables[table]) - len(keep)
        self.tables[table] = keep
        return removed

    async def count(self, table, filters=None):
        self._check_available(table)
        return len([r for r in self.tables[table] if self._matches(r, filters)])


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        JWT_SECRET="test-signing-secret",
        PASSWORD_RESET_SECRET="41534153",
        BCRYPT_ROUNDS=4,
        LOCKOUT_MAX_ATTEMPTS=5,
        LOCKOUT_DURATION_SECONDS=900,
        ENVIRONMENT="test",
    )


@pytest.fixture
def session_manager(store):
    # Tests use documentation-range addresses, which are never looked up remotely
    return SessionManager(store, DeviceDetector(), GeoIPService())


@pytest.fixture
def services(store, test_settings):
    return build_auth_services(store, test_settings)


@pytest.fixture
def app(services, test_settings):
    from api import create_app

    app = create_app(test_settings)
    app.state.auth = services
    return app


@pytest.fixture
def client(app):
    # Not entered as a context manager, so the MongoDB lifespan never runs
    return TestClient(app)


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like insert_one,
    # delete_many, count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def past():
    return datetime.now(timezone.utc) - timedelta(minutes=1)
