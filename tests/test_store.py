"""Tests for the Motor-backed data store and its key mapping."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from common.database import (
    DuplicateRecordError,
    MongoStore,
    StoreError,
    TableMissingError,
    gt,
    ne,
)
from common.database.fields import camel_to_snake, snake_to_camel, to_camel_keys, to_snake_keys


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_cursor(rows):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=rows)
    return cursor


# ─────────────────────────────────────────────────────────────────
# Key mapping
# ─────────────────────────────────────────────────────────────────


class TestFieldMapping:
    @pytest.mark.parametrize("camel,snake", [
        ("tokenHash", "token_hash"),
        ("lockUntil", "lock_until"),
        ("adminId", "admin_id"),
        ("id", "id"),
        ("email", "email"),
    ])
    def test_names_are_inverse(self, camel, snake):
        assert camel_to_snake(camel) == snake
        assert snake_to_camel(snake) == camel

    def test_only_top_level_keys_are_renamed(self):
        record = {"deviceInfo": {"deviceType": "mobile"}, "ipAddress": "203.0.113.9"}

        row = to_snake_keys(record)

        assert row == {"device_info": {"deviceType": "mobile"}, "ip_address": "203.0.113.9"}
        assert to_camel_keys(row) == record


# ─────────────────────────────────────────────────────────────────
# MongoStore
# ─────────────────────────────────────────────────────────────────


class TestMongoStore:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_stores_snake_case(self, mock_db, mock_collection):
        store = MongoStore(mock_db)

        created = await store.insert("admins", {"email": "a@example.com", "loginAttempts": 0})

        stored = mock_collection.insert_one.await_args.args[0]
        assert stored["login_attempts"] == 0
        assert stored["id"] == created["id"]
        assert created["loginAttempts"] == 0
        assert "_id" not in created
        mock_db.__getitem__.assert_called_with("admins")

    @pytest.mark.asyncio
    async def test_duplicate_key_becomes_duplicate_record(self, mock_db, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key", code=11000)
        store = MongoStore(mock_db)

        with pytest.raises(DuplicateRecordError):
            await store.insert("admins", {"email": "a@example.com"})

    @pytest.mark.asyncio
    async def test_select_translates_filters_and_sorting(self, mock_db, mock_collection):
        cursor = make_cursor([{"id": "s1", "admin_id": "a1", "token_hash": "abc"}])
        mock_collection.find.return_value = cursor
        store = MongoStore(mock_db)

        rows = await store.select(
            "admin_sessions",
            {"adminId": "a1", "expiresAt": gt(NOW), "tokenHash": ne("keep")},
            order_by="createdAt",
            descending=True,
        )

        query, projection = mock_collection.find.call_args.args
        assert query == {
            "admin_id": "a1",
            "expires_at": {"$gt": NOW},
            "token_hash": {"$ne": "keep"},
        }
        assert projection == {"_id": 0}
        cursor.sort.assert_called_once_with("created_at", DESCENDING)
        cursor.limit.assert_not_called()
        assert rows == [{"id": "s1", "adminId": "a1", "tokenHash": "abc"}]

    @pytest.mark.asyncio
    async def test_select_one_limits_to_first_row(self, mock_db, mock_collection):
        cursor = make_cursor([{"id": "a1", "email": "a@example.com"}])
        mock_collection.find.return_value = cursor
        store = MongoStore(mock_db)

        row = await store.select_one("admins", {"email": "a@example.com"})

        assert row == {"id": "a1", "email": "a@example.com"}
        cursor.limit.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_select_one_none_when_empty(self, mock_db, mock_collection):
        mock_collection.find.return_value = make_cursor([])
        store = MongoStore(mock_db)

        assert await store.select_one("admins", {"email": "nobody@example.com"}) is None

    @pytest.mark.asyncio
    async def test_missing_collection_becomes_table_missing(self, mock_db, mock_collection):
        cursor = make_cursor([])
        cursor.to_list.side_effect = OperationFailure("ns not found", code=26)
        mock_collection.find.return_value = cursor
        store = MongoStore(mock_db)

        with pytest.raises(TableMissingError):
            await store.select("admin_sessions", {"adminId": "a1"})

    @pytest.mark.asyncio
    async def test_connectivity_failure_becomes_store_error(self, mock_db, mock_collection):
        mock_collection.delete_many.side_effect = ServerSelectionTimeoutError("no servers")
        store = MongoStore(mock_db)

        with pytest.raises(StoreError) as exc_info:
            await store.delete("admin_sessions", {"adminId": "a1"})

        assert not isinstance(exc_info.value, (DuplicateRecordError, TableMissingError))

    @pytest.mark.asyncio
    async def test_update_sets_snake_case_and_returns_matched(self, mock_db, mock_collection):
        mock_collection.update_many.return_value = MagicMock(matched_count=1)
        store = MongoStore(mock_db)

        matched = await store.update("admins", {"id": "a1"}, {"loginAttempts": 2, "lockUntil": None})

        assert matched == 1
        mock_collection.update_many.assert_awaited_once_with(
            {"id": "a1"}, {"$set": {"login_attempts": 2, "lock_until": None}}
        )

    @pytest.mark.asyncio
    async def test_empty_update_is_skipped(self, mock_db, mock_collection):
        store = MongoStore(mock_db)

        assert await store.update("admins", {"id": "a1"}, {}) == 0
        mock_collection.update_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_returns_deleted_count(self, mock_db, mock_collection):
        mock_collection.delete_many.return_value = MagicMock(deleted_count=3)
        store = MongoStore(mock_db)

        assert await store.delete("admin_sessions", {"adminId": "a1"}) == 3
        mock_collection.delete_many.assert_awaited_once_with({"admin_id": "a1"})

    @pytest.mark.asyncio
    async def test_count(self, mock_db, mock_collection):
        mock_collection.count_documents.return_value = 4
        store = MongoStore(mock_db)

        assert await store.count("admins") == 4
        mock_collection.count_documents.assert_awaited_once_with({})

    @pytest.mark.asyncio
    async def test_ensure_index_uses_column_names(self, mock_db, mock_collection):
        store = MongoStore(mock_db)

        await store.ensure_index("admin_sessions", ["tokenHash"], unique=True)

        mock_collection.create_index.assert_awaited_once_with(
            [("token_hash", ASCENDING)], unique=True
        )
