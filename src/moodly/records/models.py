"""Data models for daily wellbeing records.

A record is one day of self-reported metrics and habit checkboxes.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from moodly.config import DEFAULT_METRICS

# Column names used by the flat (one column per field) document layout
HABIT_COLUMNS: dict[str, str] = {
    "healthy_food": "healthyFood",
    "caffeine": "caffeine",
    "gym": "gym",
    "hard_work": "hardWork",
    "day_off": "dayOff",
    "alcohol": "alcohol",
    "misc": "misc",
}


def parse_date(value: Any) -> date:
    """Parse a date, datetime or ISO 8601 string into a date.

    Strings may be a calendar date or a full timestamp; anything else,
    including trailing text after the date, is rejected.

    Raises:
        ValueError: If the string is not an ISO date or timestamp.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) > 10:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


def _coerce_metric(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # NaN and infinities are treated as not reported
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class Location:
    """Where a record was written."""

    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class DailyRecord:
    """One day of metrics and habits.

    Metrics map a metric name to a 1-5 rating or None when not reported.
    Checkboxes map an open-ended habit name to whether it happened.
    """

    date: date
    metrics: dict[str, float | None] = field(default_factory=dict)
    checkboxes: dict[str, bool] = field(default_factory=dict)
    id: str = ""
    note: str | None = None
    location: Location | None = None
    created_at: datetime | None = None

    def metric(self, name: str) -> float | None:
        """Return a metric value, or None when absent."""
        return self.metrics.get(name)

    def has_habit(self, name: str) -> bool:
        """Return True when the habit was checked on this day."""
        return bool(self.checkboxes.get(name, False))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        doc: dict[str, Any] = {
            "date": self.date.isoformat(),
            "metrics": dict(self.metrics),
            "checkboxes": dict(self.checkboxes),
            "note": self.note,
            "location": (
                {
                    "name": self.location.name,
                    "latitude": self.location.latitude,
                    "longitude": self.location.longitude,
                }
                if self.location
                else None
            ),
            "created_at": self.created_at,
        }
        if self.id:
            doc["id"] = self.id
        return doc

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyRecord":
        """Create from a stored document.

        Accepts the nested layout (``metrics``/``checkboxes``) as well as the
        flat layout with one column per metric and habit.
        """
        raw_metrics = data.get("metrics")
        if isinstance(raw_metrics, dict):
            metrics = {name: _coerce_metric(value) for name, value in raw_metrics.items()}
        else:
            metrics = {name: _coerce_metric(data.get(name)) for name in DEFAULT_METRICS}

        raw_checkboxes = data.get("checkboxes")
        if isinstance(raw_checkboxes, dict):
            checkboxes = {str(name): bool(value) for name, value in raw_checkboxes.items()}
        else:
            checkboxes = {
                habit: bool(data[column])
                for column, habit in HABIT_COLUMNS.items()
                if column in data and data[column] is not None
            }

        location = None
        raw_location = data.get("location")
        if isinstance(raw_location, dict) and raw_location.get("name"):
            location = Location(
                name=str(raw_location["name"]),
                latitude=float(raw_location.get("latitude", 0.0)),
                longitude=float(raw_location.get("longitude", 0.0)),
            )

        created_at = data.get("created_at") or data.get("createdAt")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            date=parse_date(data["date"]),
            metrics=metrics,
            checkboxes=checkboxes,
            note=data.get("note"),
            location=location,
            created_at=created_at,
        )


__all__ = [
    "HABIT_COLUMNS",
    "DailyRecord",
    "Location",
    "parse_date",
]
