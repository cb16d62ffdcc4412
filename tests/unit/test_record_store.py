"""Unit tests for the MongoDB record store.

Tests query construction, retry logic and connection management.
"""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import ConnectionFailure

from moodly.records.models import DailyRecord
from moodly.records.store import (
    MongoRecordStore,
    MongoStorageClient,
    retry_on_connection_failure,
)

OID = "65a1b2c3d4e5f6a7b8c9d0e1"


def _doc(day: str, mood: int) -> dict:
    return {
        "_id": ObjectId(OID),
        "date": day,
        "metrics": {"mood": mood},
        "checkboxes": {"gym": True},
    }


class TestMongoRecordStore:
    """Tests for MongoRecordStore."""

    def test_creates_unique_date_index(self) -> None:
        collection = MagicMock()
        MongoRecordStore(collection)
        collection.create_index.assert_called_once_with([("date", 1)], unique=True)

    def test_save_returns_inserted_id(self) -> None:
        collection = MagicMock()
        collection.insert_one.return_value.inserted_id = ObjectId(OID)
        store = MongoRecordStore(collection)

        record_id = store.save(DailyRecord(date=date(2024, 1, 5), metrics={"mood": 4.0}))

        assert record_id == OID
        saved = collection.insert_one.call_args[0][0]
        assert saved["date"] == "2024-01-05"
        assert saved["metrics"] == {"mood": 4.0}
        assert "created_at" in saved
        assert "id" not in saved

    def test_get_by_id(self) -> None:
        collection = MagicMock()
        collection.find_one.return_value = _doc("2024-01-05", 4)
        store = MongoRecordStore(collection)

        record = store.get_by_id(OID)

        assert record is not None
        assert record.id == OID
        assert record.metric("mood") == 4.0
        collection.find_one.assert_called_once_with({"_id": ObjectId(OID)})

    def test_get_by_id_invalid_id(self) -> None:
        """Malformed IDs are treated as not found."""
        collection = MagicMock()
        store = MongoRecordStore(collection)

        assert store.get_by_id("not-an-id") is None
        collection.find_one.assert_not_called()

    def test_update(self) -> None:
        collection = MagicMock()
        collection.update_one.return_value.matched_count = 1
        store = MongoRecordStore(collection)

        updated = store.update(
            DailyRecord(id=OID, date=date(2024, 1, 5), metrics={"mood": 2.0}, note="tired")
        )

        assert updated is True
        query, change = collection.update_one.call_args[0]
        assert query == {"_id": ObjectId(OID)}
        assert change["$set"]["metrics"] == {"mood": 2.0}
        assert change["$set"]["note"] == "tired"

    def test_update_without_id(self) -> None:
        store = MongoRecordStore(MagicMock())
        assert store.update(DailyRecord(date=date(2024, 1, 5))) is False

    def test_delete(self) -> None:
        collection = MagicMock()
        collection.delete_one.return_value.deleted_count = 1
        store = MongoRecordStore(collection)

        assert store.delete(OID) is True
        assert store.delete("bad") is False

    def test_get_by_date_range(self) -> None:
        collection = MagicMock()
        collection.find.return_value.sort.return_value = [
            _doc("2024-01-05", 4),
            _doc("2024-01-06", 3),
        ]
        store = MongoRecordStore(collection)

        records = store.get_by_date_range(date(2024, 1, 1), date(2024, 1, 7))

        assert [r.date for r in records] == [date(2024, 1, 5), date(2024, 1, 6)]
        collection.find.assert_called_once_with(
            {"date": {"$gte": "2024-01-01", "$lte": "2024-01-07"}}
        )
        collection.find.return_value.sort.assert_called_once_with("date", 1)

    def test_list_dates(self) -> None:
        collection = MagicMock()
        collection.find.return_value.sort.return_value = [
            {"date": "2024-01-06"},
            {"date": "2024-01-05"},
        ]
        store = MongoRecordStore(collection)

        assert store.list_dates() == [date(2024, 1, 6), date(2024, 1, 5)]


class TestRetryDecorator:
    """Tests for retry_on_connection_failure."""

    def test_retries_then_succeeds(self) -> None:
        calls = MagicMock(side_effect=[ConnectionFailure("down"), "ok"])

        @retry_on_connection_failure(max_retries=3, base_delay=0.01)
        def operation() -> str:
            return calls()

        with patch("moodly.records.store.time.sleep") as sleep:
            assert operation() == "ok"

        assert calls.call_count == 2
        sleep.assert_called_once_with(0.01)

    def test_raises_after_max_retries(self) -> None:
        @retry_on_connection_failure(max_retries=2, base_delay=0.01)
        def operation() -> str:
            raise ConnectionFailure("down")

        with patch("moodly.records.store.time.sleep"):
            with pytest.raises(ConnectionFailure):
                operation()


class TestMongoStorageClient:
    """Tests for connection management."""

    def test_records_requires_connection(self) -> None:
        client = MongoStorageClient()
        with pytest.raises(RuntimeError):
            _ = client.records

    @patch("moodly.records.store.MongoClient")
    def test_context_manager_connects_and_disconnects(self, mock_client_cls: MagicMock) -> None:
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client

        with MongoStorageClient(database_name="moodly_test") as client:
            assert isinstance(client.records, MongoRecordStore)
            mock_client.admin.command.assert_called_once_with("ping")

        mock_client.close.assert_called_once()
        with pytest.raises(RuntimeError):
            _ = client.records

    @patch("moodly.records.store.MongoClient")
    def test_connect_failure_propagates(self, mock_client_cls: MagicMock) -> None:
        mock_client_cls.return_value.admin.command.side_effect = ConnectionFailure("down")

        with pytest.raises(ConnectionFailure):
            MongoStorageClient().connect()
