"""Daily record model and record stores."""

from .models import HABIT_COLUMNS, DailyRecord, Location, parse_date
from .store import (
    JSONRecordStore,
    MongoRecordStore,
    MongoStorageClient,
    RecordStore,
    RecordStoreError,
)

__all__ = [
    "HABIT_COLUMNS",
    "DailyRecord",
    "JSONRecordStore",
    "Location",
    "MongoRecordStore",
    "MongoStorageClient",
    "RecordStore",
    "RecordStoreError",
    "parse_date",
]
