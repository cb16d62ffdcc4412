"""Insight generation for daily wellbeing records.

Turns an ordered collection of daily records into ranked, explained
statistical findings: habit and metric correlations, with/without
comparisons, weekday patterns, next-day effects, long-term trends and
habit synergies.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations
from typing import TypeVar

from moodly.config import AnalyticsConfig
from moodly.records.models import DailyRecord

from .formatting import format_habit, habit_action
from .models import Insight, InsightType
from .stats import mean, pearson

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Sunday first, matching the 0-6 weekday numbering used in the text
DAYS_OF_WEEK = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MOOD = "mood"
SLEEP = "sleep"


def weekday_index(record: DailyRecord) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (record.date.weekday() + 1) % 7


def habit_vocabulary(records: Iterable[DailyRecord]) -> list[str]:
    """Union of checkbox keys across all records, in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        for key in record.checkboxes:
            seen.setdefault(key, None)
    return list(seen)


class InsightGenerator:
    """Generates ranked insights from daily records.

    Records must be sorted by date, oldest first, for the next-day and
    trend families to be meaningful.
    """

    def __init__(self, config: AnalyticsConfig | None = None) -> None:
        """Initialize insight generator.

        Args:
            config: Thresholds and tuning; defaults when omitted
        """
        self._config = config or AnalyticsConfig()

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    def generate(self, records: Sequence[DailyRecord]) -> list[Insight]:
        """Compute every insight family and rank the results.

        Args:
            records: Daily records, oldest first

        Returns:
            Insights sorted by descending score; empty when there are too
            few records for meaningful statistics
        """
        if len(records) < self._config.min_records:
            logger.info(
                f"Not enough data for insights "
                f"({len(records)} records, need {self._config.min_records})"
            )
            return []

        habits = habit_vocabulary(records)

        insights: list[Insight] = []
        insights.extend(self._habit_metric_correlations(records, habits))
        insights.extend(self._metric_correlations(records))
        insights.extend(self._habit_correlations(records, habits))
        insights.extend(self._habit_comparisons(records, habits))
        insights.extend(self._weekly_patterns(records))
        insights.extend(self._sleep_precursor(records))
        insights.extend(self._long_term_trends(records))
        insights.extend(self._habit_synergies(records, habits))

        logger.debug(f"Generated {len(insights)} insights from {len(records)} records")
        return sorted(insights, key=lambda insight: insight.score, reverse=True)

    def _map_pairs(
        self, func: Callable[[T], Insight | None], items: Sequence[T]
    ) -> list[Insight]:
        """Apply func to every item, sharded over threads when configured.

        Results keep the order of items either way.
        """
        if self._config.max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
                results = list(pool.map(func, items))
        else:
            results = [func(item) for item in items]
        return [insight for insight in results if insight is not None]

    # ------------------------------------------------------------------
    # Correlations
    # ------------------------------------------------------------------

    def _habit_metric_correlations(
        self, records: Sequence[DailyRecord], habits: list[str]
    ) -> list[Insight]:
        """Correlate each habit with each metric."""
        pairs = [(metric, habit) for metric in self._config.metrics for habit in habits]

        def analyze(pair: tuple[str, str]) -> Insight | None:
            metric, habit = pair
            present = [r for r in records if r.metric(metric) is not None]
            habit_values = [1.0 if r.has_habit(habit) else 0.0 for r in present]
            metric_values = [float(r.metric(metric)) for r in present]

            correlation = pearson(habit_values, metric_values)
            if correlation is None or abs(correlation) <= self._config.habit_metric_threshold:
                return None

            action = habit_action(habit)
            if metric == MOOD:
                direction = "improves" if correlation > 0 else "worsens"
                text = f"Your mood tends to {direction} when you {action}."
            else:
                direction = "higher" if correlation > 0 else "lower"
                text = f"Your {metric} tends to be {direction} when you {action}."

            return Insight(
                type=InsightType.HABIT_IMPACT,
                label="Habit Impact",
                text=text,
                score=abs(correlation),
                details=f"Correlation: {correlation:.2f}",
            )

        return self._map_pairs(analyze, pairs)

    def _metric_correlations(self, records: Sequence[DailyRecord]) -> list[Insight]:
        """Correlate each unordered pair of metrics."""
        pairs = list(combinations(self._config.metrics, 2))

        def analyze(pair: tuple[str, str]) -> Insight | None:
            first, second = pair
            present = [
                r for r in records if r.metric(first) is not None and r.metric(second) is not None
            ]
            correlation = pearson(
                [float(r.metric(first)) for r in present],
                [float(r.metric(second)) for r in present],
            )
            if correlation is None or abs(correlation) <= self._config.metric_metric_threshold:
                return None

            kind = "positive" if correlation > 0 else "negative"
            return Insight(
                type=InsightType.METRIC_LINK,
                label="Metric Link",
                text=f"There is a {kind} link between your {first} and your {second}.",
                score=abs(correlation),
                details=f"Correlation: {correlation:.2f}",
            )

        return self._map_pairs(analyze, pairs)

    def _habit_correlations(
        self, records: Sequence[DailyRecord], habits: list[str]
    ) -> list[Insight]:
        """Correlate each unordered pair of habits."""
        pairs = list(combinations(habits, 2))

        def analyze(pair: tuple[str, str]) -> Insight | None:
            first, second = pair
            correlation = pearson(
                [1.0 if r.has_habit(first) else 0.0 for r in records],
                [1.0 if r.has_habit(second) else 0.0 for r in records],
            )
            if correlation is None or abs(correlation) <= self._config.habit_habit_threshold:
                return None

            frequency = "often" if correlation > 0 else "rarely"
            return Insight(
                type=InsightType.HABIT_PATTERN,
                label="Habit Pattern",
                text=(
                    f"{format_habit(first)} and {format_habit(second).lower()} "
                    f"{frequency} happen together."
                ),
                score=abs(correlation),
                details=f"Correlation: {correlation:.2f}",
            )

        return self._map_pairs(analyze, pairs)

    # ------------------------------------------------------------------
    # Grouped aggregates
    # ------------------------------------------------------------------

    def _habit_comparisons(
        self, records: Sequence[DailyRecord], habits: list[str]
    ) -> list[Insight]:
        """Compare average mood on days with and without each habit."""
        rated = [r for r in records if r.metric(MOOD) is not None]
        insights: list[Insight] = []

        for habit in habits:
            with_habit = [float(r.metric(MOOD)) for r in rated if r.has_habit(habit)]
            without_habit = [float(r.metric(MOOD)) for r in rated if not r.has_habit(habit)]
            if not with_habit or not without_habit:
                continue

            avg_with = mean(with_habit)
            avg_without = mean(without_habit)
            diff = avg_with - avg_without
            if abs(diff) <= self._config.comparison_threshold:
                continue

            better = "better" if diff > 0 else "worse"
            insights.append(
                Insight(
                    type=InsightType.COMPARISON,
                    label="Comparison",
                    text=(
                        f"You feel {better} on days with {format_habit(habit).lower()} "
                        f"(average of {avg_with:.1f} on those days vs {avg_without:.1f} otherwise)."
                    ),
                    score=abs(diff),
                )
            )

        return insights

    def _weekly_patterns(self, records: Sequence[DailyRecord]) -> list[Insight]:
        """Find the weekday with the highest average for each metric.

        Ties go to the weekday that appears first in the records.
        """
        insights: list[Insight] = []

        for metric in self._config.metrics:
            by_day: dict[int, list[float]] = {}
            for record in records:
                value = record.metric(metric)
                if value is None:
                    continue
                by_day.setdefault(weekday_index(record), []).append(float(value))

            best_day = -1
            best_avg = float("-inf")
            for day, values in by_day.items():
                avg = mean(values)
                if avg > best_avg:
                    best_avg = avg
                    best_day = day

            if best_day == -1:
                continue

            insights.append(
                Insight(
                    type=InsightType.WEEKLY_PATTERN,
                    label="Weekly Trend",
                    text=(
                        f"Your {metric} peaks on {DAYS_OF_WEEK[best_day]}s "
                        f"(average: {best_avg:.1f})."
                    ),
                    score=self._config.weekly_pattern_score,
                )
            )

        return insights

    # ------------------------------------------------------------------
    # Temporal
    # ------------------------------------------------------------------

    def _sleep_precursor(self, records: Sequence[DailyRecord]) -> list[Insight]:
        """Correlate one day's sleep with the next day's mood."""
        sleep_values: list[float] = []
        next_day_moods: list[float] = []
        for today, tomorrow in zip(records, records[1:]):
            sleep = today.metric(SLEEP)
            mood = tomorrow.metric(MOOD)
            if sleep is None or mood is None:
                continue
            sleep_values.append(float(sleep))
            next_day_moods.append(float(mood))

        correlation = pearson(sleep_values, next_day_moods)
        if correlation is None:
            return []

        threshold = self._config.lag_threshold
        if correlation > threshold:
            text = "Good sleep often leads to better mood the next day."
        elif correlation < -threshold:
            text = "More sleep tends to be followed by a lower mood the next day."
        else:
            return []

        return [
            Insight(
                type=InsightType.PRECURSOR,
                label="Precursor",
                text=text,
                score=abs(correlation),
                details=f"Correlation: {correlation:.2f}",
            )
        ]

    def _long_term_trends(self, records: Sequence[DailyRecord]) -> list[Insight]:
        """Compare the first and second half of the records per metric.

        The first half takes the extra record when the count is odd.
        """
        if len(records) < self._config.trend_min_records:
            return []

        midpoint = (len(records) + 1) // 2
        first_half = records[:midpoint]
        second_half = records[midpoint:]
        insights: list[Insight] = []

        for metric in self._config.metrics:
            first = [float(r.metric(metric)) for r in first_half if r.metric(metric) is not None]
            second = [float(r.metric(metric)) for r in second_half if r.metric(metric) is not None]
            if not first or not second:
                continue

            first_avg = mean(first)
            second_avg = mean(second)
            decline = first_avg - second_avg

            if decline > self._config.trend_threshold:
                insights.append(
                    Insight(
                        type=InsightType.TREND,
                        label="Warning",
                        text=(
                            f"Your {metric} has declined recently "
                            f"(from {first_avg:.1f} to {second_avg:.1f} on average)."
                        ),
                        score=decline,
                    )
                )
            elif decline < -self._config.trend_threshold:
                insights.append(
                    Insight(
                        type=InsightType.TREND,
                        label="Improving Trend",
                        text=(
                            f"Your {metric} has been improving "
                            f"(from {first_avg:.1f} to {second_avg:.1f} on average)."
                        ),
                        score=abs(decline),
                    )
                )

        return insights

    # ------------------------------------------------------------------
    # Combinations
    # ------------------------------------------------------------------

    def _habit_synergies(
        self, records: Sequence[DailyRecord], habits: list[str]
    ) -> list[Insight]:
        """Find habit pairs whose joint mood beats either habit alone."""
        rated = [r for r in records if r.metric(MOOD) is not None]
        pairs = list(combinations(habits, 2))
        min_group = self._config.synergy_min_group

        def analyze(pair: tuple[str, str]) -> Insight | None:
            first, second = pair
            both: list[float] = []
            only_first: list[float] = []
            only_second: list[float] = []
            for record in rated:
                has_first = record.has_habit(first)
                has_second = record.has_habit(second)
                mood = float(record.metric(MOOD))
                if has_first and has_second:
                    both.append(mood)
                elif has_first:
                    only_first.append(mood)
                elif has_second:
                    only_second.append(mood)

            if len(both) < min_group or len(only_first) < min_group or len(only_second) < min_group:
                return None

            both_avg = mean(both)
            expected = max(mean(only_first), mean(only_second))
            synergy = both_avg - expected
            if synergy <= self._config.synergy_threshold:
                return None

            return Insight(
                type=InsightType.SYNERGY,
                label="Habit Synergy",
                text=(
                    f"{format_habit(first)} and {format_habit(second).lower()} together "
                    f"boost your mood more than either alone "
                    f"(average of {both_avg:.1f} vs {expected:.1f})."
                ),
                score=synergy,
            )

        return self._map_pairs(analyze, pairs)


def generate_insights(
    records: Sequence[DailyRecord],
    config: AnalyticsConfig | None = None,
) -> list[Insight]:
    """Generate ranked insights for records sorted oldest first."""
    return InsightGenerator(config).generate(records)


__all__ = [
    "DAYS_OF_WEEK",
    "InsightGenerator",
    "generate_insights",
    "habit_vocabulary",
    "weekday_index",
]
