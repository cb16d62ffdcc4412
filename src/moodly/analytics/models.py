"""Result types produced by the analytics engine."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any


class InsightType(Enum):
    """Families of statistical observations."""

    HABIT_IMPACT = "habit_impact"
    METRIC_LINK = "metric_link"
    HABIT_PATTERN = "habit_pattern"
    COMPARISON = "comparison"
    WEEKLY_PATTERN = "weekly_pattern"
    PRECURSOR = "precursor"
    TREND = "trend"
    SYNERGY = "synergy"


@dataclass(frozen=True)
class Insight:
    """A ranked, explained observation about the records.

    ``score`` is a non-negative magnitude used only for ranking.
    """

    type: InsightType
    label: str
    text: str
    score: float
    details: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "label": self.label,
            "text": self.text,
            "score": self.score,
        }
        if self.details is not None:
            data["details"] = self.details
        return data


@dataclass(frozen=True)
class StreakData:
    """Consecutive-day participation metrics."""

    current_streak: int = 0
    longest_streak: int = 0
    last_entry_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastEntryDate": self.last_entry_date.isoformat() if self.last_entry_date else None,
        }


__all__ = ["Insight", "InsightType", "StreakData"]
