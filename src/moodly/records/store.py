"""Record stores for daily entries.

Provides the MongoDB-backed store with connection management and retry
logic, plus a read-only store over a JSON export.
"""

import json
import logging
import time
from collections.abc import Callable
from datetime import UTC, date, datetime
from functools import wraps
from pathlib import Path
from typing import Any, Protocol, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from .models import DailyRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStoreError(Exception):
    """Raised when a record store cannot perform an operation."""


class RecordStore(Protocol):
    """Protocol for daily record persistence."""

    def save(self, record: DailyRecord) -> str:
        """Insert a record and return its ID."""
        ...

    def get_by_id(self, record_id: str) -> DailyRecord | None:
        """Get a record by ID."""
        ...

    def update(self, record: DailyRecord) -> bool:
        """Replace the stored fields of an existing record."""
        ...

    def delete(self, record_id: str) -> bool:
        """Delete a record by ID."""
        ...

    def get_all(self) -> list[DailyRecord]:
        """Get every record, oldest first."""
        ...

    def get_by_date_range(self, start: date, end: date) -> list[DailyRecord]:
        """Get records between two dates (inclusive), oldest first."""
        ...

    def list_dates(self) -> list[date]:
        """Get the date of every record."""
        ...


def retry_on_connection_failure(
    max_retries: int = 5,
    base_delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for exponential backoff retry on connection failures.

    Args:
        max_retries: Maximum number of retry attempts.
        base_delay: Base delay in seconds (doubles each retry).

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            "Connection failed (attempt %d/%d), retrying in %.1fs: %s",
                            attempt + 1,
                            max_retries,
                            delay,
                            str(e),
                        )
                        time.sleep(delay)
                    else:
                        logger.error(
                            "Connection failed after %d attempts: %s",
                            max_retries,
                            str(e),
                        )

            if last_exception:
                raise last_exception
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


def _object_id(record_id: str) -> ObjectId | None:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        return None


class MongoRecordStore:
    """Daily records stored in a MongoDB collection.

    Dates are stored as ISO strings so lexicographic order is date order.
    """

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize store with MongoDB collection.

        Args:
            collection: MongoDB collection for daily entries.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("date", ASCENDING)], unique=True)

    @retry_on_connection_failure()
    def save(self, record: DailyRecord) -> str:
        """Save a record and return its ID.

        Args:
            record: The record to save.

        Returns:
            The generated document ID.
        """
        doc = record.to_dict()
        doc.pop("id", None)
        doc["created_at"] = record.created_at or datetime.now(UTC)
        result = self._collection.insert_one(doc)
        return str(result.inserted_id)

    @retry_on_connection_failure()
    def get_by_id(self, record_id: str) -> DailyRecord | None:
        """Retrieve a record by ID.

        Args:
            record_id: The record ID.

        Returns:
            The record or None if not found.
        """
        oid = _object_id(record_id)
        if oid is None:
            return None

        doc = self._collection.find_one({"_id": oid})
        if doc is None:
            return None
        return DailyRecord.from_dict(doc)

    @retry_on_connection_failure()
    def update(self, record: DailyRecord) -> bool:
        """Update metrics, checkboxes and note of an existing record.

        Args:
            record: Record carrying the ID of the document to update.

        Returns:
            True if a document matched.
        """
        oid = _object_id(record.id)
        if oid is None:
            return False

        doc = record.to_dict()
        result = self._collection.update_one(
            {"_id": oid},
            {
                "$set": {
                    "date": doc["date"],
                    "metrics": doc["metrics"],
                    "checkboxes": doc["checkboxes"],
                    "note": doc["note"],
                    "location": doc["location"],
                }
            },
        )
        return result.matched_count > 0

    @retry_on_connection_failure()
    def delete(self, record_id: str) -> bool:
        """Delete a record by ID.

        Returns:
            True if a document was removed.
        """
        oid = _object_id(record_id)
        if oid is None:
            return False
        result = self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    @retry_on_connection_failure()
    def get_all(self) -> list[DailyRecord]:
        """Get every record, oldest first."""
        cursor = self._collection.find().sort("date", ASCENDING)
        return [DailyRecord.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def get_by_date_range(self, start: date, end: date) -> list[DailyRecord]:
        """Get records within a date range.

        Args:
            start: First date (inclusive).
            end: Last date (inclusive).

        Returns:
            List of records, oldest first.
        """
        cursor = self._collection.find(
            {"date": {"$gte": start.isoformat(), "$lte": end.isoformat()}}
        ).sort("date", ASCENDING)
        return [DailyRecord.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def list_dates(self) -> list[date]:
        """Get the date of every record, most recent first."""
        cursor = self._collection.find({}, {"date": 1}).sort("date", -1)
        return [date.fromisoformat(doc["date"]) for doc in cursor]


class JSONRecordStore:
    """Read-only record store over a JSON export.

    The file holds either a list of records or an object with an
    ``entries`` list.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._records: list[DailyRecord] | None = None

    def _load(self) -> list[DailyRecord]:
        if self._records is None:
            if not self._path.exists():
                raise FileNotFoundError(f"Records file not found: {self._path}")
            with open(self._path, encoding="utf-8") as f:
                raw = json.load(f)
            entries = raw.get("entries", []) if isinstance(raw, dict) else raw
            if not isinstance(entries, list):
                raise RecordStoreError(f"Expected a list of entries in {self._path}")
            records = [DailyRecord.from_dict(entry) for entry in entries]
            self._records = sorted(records, key=lambda r: r.date)
            logger.debug(f"Loaded {len(self._records)} records from {self._path}")
        return self._records

    def save(self, record: DailyRecord) -> str:
        raise RecordStoreError("JSON record store is read-only")

    def update(self, record: DailyRecord) -> bool:
        raise RecordStoreError("JSON record store is read-only")

    def delete(self, record_id: str) -> bool:
        raise RecordStoreError("JSON record store is read-only")

    def get_by_id(self, record_id: str) -> DailyRecord | None:
        return next((r for r in self._load() if r.id == record_id), None)

    def get_all(self) -> list[DailyRecord]:
        return list(self._load())

    def get_by_date_range(self, start: date, end: date) -> list[DailyRecord]:
        return [r for r in self._load() if start <= r.date <= end]

    def list_dates(self) -> list[date]:
        return [r.date for r in reversed(self._load())]


class MongoStorageClient:
    """High-level MongoDB storage client.

    Manages connection and provides access to the record store.
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "moodly",
        collection_name: str = "entries",
        connect_timeout_ms: int = 5000,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Name of the database to use.
            collection_name: Name of the entries collection.
            connect_timeout_ms: Connection timeout in milliseconds.
            server_selection_timeout_ms: Server selection timeout in milliseconds.
        """
        self._uri = uri
        self._database_name = database_name
        self._collection_name = collection_name
        self._client: MongoClient[dict[str, Any]] | None = None
        self._db: Database[dict[str, Any]] | None = None
        self._records: MongoRecordStore | None = None

        self._connect_timeout_ms = connect_timeout_ms
        self._server_selection_timeout_ms = server_selection_timeout_ms

        self._connected = False

    def connect(self) -> None:
        """Connect to MongoDB.

        Raises:
            ConnectionFailure: If the server cannot be reached.
        """
        if self._connected:
            return

        try:
            self._client = MongoClient(
                self._uri,
                connectTimeoutMS=self._connect_timeout_ms,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            )

            # Verify connection
            self._client.admin.command("ping")

            self._db = self._client[self._database_name]
            self._records = MongoRecordStore(self._db[self._collection_name])
            self._connected = True

            logger.info("Connected to MongoDB at %s", self._uri)

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            self._connected = False
            raise

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            self._records = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    @property
    def records(self) -> MongoRecordStore:
        """Get the record store.

        Raises:
            RuntimeError: If not connected.
        """
        if self._records is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._records

    def __enter__(self) -> "MongoStorageClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "JSONRecordStore",
    "MongoRecordStore",
    "MongoStorageClient",
    "RecordStore",
    "RecordStoreError",
    "retry_on_connection_failure",
]
