"""Weekly and monthly recap generation.

Aggregates the records of a period and renders them as a recap email.
"""

import calendar
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Protocol

from moodly.analytics.insights import InsightGenerator
from moodly.analytics.models import Insight
from moodly.config import AnalyticsConfig, ReportsConfig
from moodly.records.models import DailyRecord

from .template import render_digest_html

logger = logging.getLogger(__name__)

TOP_HABITS = 5


class DigestPeriod(Enum):
    """Recap periods."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class PeriodStats:
    """Aggregated statistics for a set of records."""

    avg_mood: float = 0.0
    avg_energy: float = 0.0
    avg_sleep: float = 0.0
    avg_focus: float = 0.0
    total_entries: int = 0
    top_habits: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class DigestReport:
    """A rendered recap ready to send."""

    period: DigestPeriod
    start: date
    end: date
    stats: PeriodStats
    insights: list[Insight]
    subject: str
    html: str


class RecordDataSource(Protocol):
    """Protocol for fetching records by date range."""

    def get_by_date_range(self, start: date, end: date) -> list[DailyRecord]:
        """Get records between two dates (inclusive), oldest first."""
        ...


def _rounded_mean(records: list[DailyRecord], metric: str) -> float:
    values = [float(r.metric(metric)) for r in records if r.metric(metric) is not None]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def calculate_stats(records: list[DailyRecord]) -> PeriodStats:
    """Aggregate averages and habit counts.

    Averages use only reported values and are rounded to one decimal.
    Habits are ranked by how often they were checked.
    """
    if not records:
        return PeriodStats()

    counts: Counter[str] = Counter()
    for record in records:
        for habit, checked in record.checkboxes.items():
            if checked:
                counts[habit] += 1

    return PeriodStats(
        avg_mood=_rounded_mean(records, "mood"),
        avg_energy=_rounded_mean(records, "energy"),
        avg_sleep=_rounded_mean(records, "sleep"),
        avg_focus=_rounded_mean(records, "focus"),
        total_entries=len(records),
        top_habits=counts.most_common(TOP_HABITS),
    )


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_range(period: DigestPeriod, today: date | None = None) -> tuple[date, date]:
    """Date range covered by a recap ending today.

    Weekly covers the last seven days, monthly the last calendar month.
    """
    end = today or date.today()
    if period == DigestPeriod.WEEKLY:
        return end - timedelta(days=7), end
    return _one_month_before(end), end


def select_periods(
    reports: ReportsConfig,
    requested: str | None = None,
) -> list[DigestPeriod]:
    """Decide which recaps to send.

    An explicit request wins; otherwise the enabled report flags decide.

    Raises:
        ValueError: If requested is not a known period
    """
    if requested:
        return [DigestPeriod(requested.lower())]

    periods: list[DigestPeriod] = []
    if reports.weekly_reports:
        periods.append(DigestPeriod.WEEKLY)
    if reports.monthly_reports:
        periods.append(DigestPeriod.MONTHLY)
    return periods


class DigestGenerator:
    """Generates recap emails from stored records."""

    def __init__(
        self,
        data_source: RecordDataSource | None = None,
        reports: ReportsConfig | None = None,
        analytics: AnalyticsConfig | None = None,
    ) -> None:
        """Initialize digest generator.

        Args:
            data_source: Source for daily records
            reports: Recap settings
            analytics: Thresholds for the insights section
        """
        self._data_source = data_source
        self._reports = reports or ReportsConfig()
        self._insights = InsightGenerator(analytics)

    def generate(self, period: DigestPeriod, today: date | None = None) -> DigestReport | None:
        """Generate the recap for a period ending today.

        Args:
            period: Weekly or monthly
            today: Last day of the period, defaults to the current date

        Returns:
            DigestReport, or None when the period has no records
        """
        start, end = period_range(period, today)

        if not self._data_source:
            return None

        records = self._data_source.get_by_date_range(start, end)
        if not records:
            logger.info(f"No records between {start} and {end}")
            return None

        stats = calculate_stats(records)

        insights: list[Insight] = []
        if self._reports.include_insights:
            insights = self._insights.generate(records)[: self._reports.max_insights]

        html = render_digest_html(period.label, stats, start, end, insights)
        return DigestReport(
            period=period,
            start=start,
            end=end,
            stats=stats,
            insights=insights,
            subject=f"Your {period.label} Moodly Recap",
            html=html,
        )


__all__ = [
    "DigestGenerator",
    "DigestPeriod",
    "DigestReport",
    "PeriodStats",
    "RecordDataSource",
    "calculate_stats",
    "period_range",
    "select_periods",
]
