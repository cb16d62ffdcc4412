"""Tests for insight generation."""

import logging
from datetime import date, timedelta

import pytest

from moodly.analytics.insights import (
    InsightGenerator,
    generate_insights,
    habit_vocabulary,
    weekday_index,
)
from moodly.analytics.models import Insight, InsightType
from moodly.analytics.stats import pearson
from moodly.config import AnalyticsConfig
from moodly.records.models import DailyRecord

# Wednesday
START = date(2024, 1, 3)


def make_records(
    moods: list[float | None],
    start: date = START,
    **columns: list,
) -> list[DailyRecord]:
    """Build consecutive daily records.

    Keyword arguments named after a metric (energy, sleep, focus, stress)
    are metric columns; anything else is a habit column of booleans.
    """
    metric_names = {"energy", "sleep", "focus", "stress"}
    records = []
    for i, mood in enumerate(moods):
        metrics: dict[str, float | None] = {"mood": mood}
        checkboxes: dict[str, bool] = {}
        for name, values in columns.items():
            if name in metric_names:
                metrics[name] = values[i]
            elif values[i] is not None:
                checkboxes[name] = values[i]
        records.append(
            DailyRecord(
                id=f"r{i}",
                date=start + timedelta(days=i),
                metrics=metrics,
                checkboxes=checkboxes,
            )
        )
    return records


def of_type(insights: list[Insight], insight_type: InsightType) -> list[Insight]:
    return [i for i in insights if i.type == insight_type]


class TestSampleSizeGuard:
    """Tests for the minimum record count."""

    @pytest.mark.parametrize("count", [0, 1, 4])
    def test_fewer_than_five_records_returns_empty(self, count: int) -> None:
        """Returns no insights below five records."""
        records = make_records([5, 1, 5, 1][:count] or [], gym=[True, False, True, False][:count])
        assert generate_insights(records) == []

    def test_five_records_produce_insights(self) -> None:
        """Five records are enough to analyze."""
        records = make_records([5, 1, 5, 1, 5], gym=[True, False, True, False, True])
        assert generate_insights(records) != []

    def test_min_records_is_configurable(self) -> None:
        """The guard follows the configured minimum."""
        records = make_records([5, 1, 5, 1, 5], gym=[True, False, True, False, True])
        config = AnalyticsConfig(min_records=10)
        assert generate_insights(records, config) == []

    def test_guard_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Skipping analysis is reported with the record counts."""
        with caplog.at_level(logging.INFO, logger="moodly.analytics.insights"):
            generate_insights(make_records([5, 1, 5, 1]))
        assert "Not enough data for insights (4 records, need 5)" in caplog.text



class TestHabitVocabulary:
    """Tests for habit discovery."""

    def test_union_of_all_checkbox_keys(self) -> None:
        """Habits seen only in later records are included."""
        records = [
            DailyRecord(date=START, checkboxes={"gym": True}),
            DailyRecord(date=START + timedelta(days=1), checkboxes={"alcohol": False}),
            DailyRecord(date=START + timedelta(days=2), checkboxes={"gym": False, "misc": True}),
        ]
        assert habit_vocabulary(records) == ["gym", "alcohol", "misc"]

    def test_weekday_index_starts_on_sunday(self) -> None:
        """Sunday is 0 and Saturday is 6."""
        assert weekday_index(DailyRecord(date=date(2024, 1, 7))) == 0
        assert weekday_index(DailyRecord(date=date(2024, 1, 3))) == 3
        assert weekday_index(DailyRecord(date=date(2024, 1, 6))) == 6


class TestHabitImpact:
    """Tests for habit-metric correlations."""

    def test_habit_on_best_days_scores_close_to_one(self) -> None:
        """A habit present exactly on mood-5 days correlates perfectly."""
        records = make_records(
            [5, 1, 5, 1, 5, 1],
            gym=[True, False, True, False, True, False],
        )
        impacts = of_type(generate_insights(records), InsightType.HABIT_IMPACT)

        assert len(impacts) == 1
        assert impacts[0].score == pytest.approx(1.0)
        assert impacts[0].label == "Habit Impact"
        assert "improves" in impacts[0].text
        assert "go to the gym" in impacts[0].text
        assert impacts[0].details == "Correlation: 1.00"

    def test_negative_mood_correlation_worsens(self) -> None:
        """A habit on the worst days is reported as worsening mood."""
        records = make_records(
            [1, 5, 1, 5, 1, 5],
            alcohol=[True, False, True, False, True, False],
        )
        impact = of_type(generate_insights(records), InsightType.HABIT_IMPACT)[0]
        assert "worsens" in impact.text
        assert "drink alcohol" in impact.text

    def test_other_metrics_use_higher_lower(self) -> None:
        """Non-mood metrics are phrased as higher or lower."""
        records = make_records(
            [3, 3, 3, 3, 3, 3],
            energy=[5, 2, 5, 2, 5, 2],
            gym=[True, False, True, False, True, False],
        )
        impact = of_type(generate_insights(records), InsightType.HABIT_IMPACT)[0]
        assert impact.text == "Your energy tends to be higher when you go to the gym."

    def test_constant_habit_is_skipped(self) -> None:
        """A habit present every day has no variance."""
        records = make_records([5, 1, 5, 1, 5], gym=[True] * 5)
        assert of_type(generate_insights(records), InsightType.HABIT_IMPACT) == []

    def test_missing_metric_values_keep_vectors_aligned(self) -> None:
        """Days without a mood are left out of the mood correlation."""
        records = make_records(
            [5, None, 5, 1, None, 1],
            gym=[True, True, True, False, False, False],
        )
        impacts = of_type(generate_insights(records), InsightType.HABIT_IMPACT)
        assert len(impacts) == 1
        assert impacts[0].score == pytest.approx(1.0)

    def test_missing_habit_key_counts_as_absent(self) -> None:
        """Records that never mention a habit count as not doing it."""
        records = make_records(
            [5, 1, 5, 1, 5, 1],
            gym=[True, None, True, None, True, None],
        )
        impacts = of_type(generate_insights(records), InsightType.HABIT_IMPACT)
        assert impacts[0].score == pytest.approx(1.0)

    def test_threshold_is_exclusive(self) -> None:
        """A correlation equal to the threshold is not reported."""
        moods = [5, 4, 2, 3, 1, 4]
        gym = [True, False, False, True, False, True]
        records = make_records(moods, gym=gym)
        correlation = pearson([1.0 if g else 0.0 for g in gym], [float(m) for m in moods])
        assert correlation is not None

        at_threshold = AnalyticsConfig(metrics=("mood",), habit_metric_threshold=abs(correlation))
        just_below = AnalyticsConfig(
            metrics=("mood",), habit_metric_threshold=abs(correlation) - 0.00001
        )

        assert of_type(generate_insights(records, at_threshold), InsightType.HABIT_IMPACT) == []
        assert len(of_type(generate_insights(records, just_below), InsightType.HABIT_IMPACT)) == 1


class TestMetricLinks:
    """Tests for metric-metric correlations."""

    def test_positive_and_negative_links(self) -> None:
        """Energy tracking mood is positive, focus mirroring it is negative."""
        moods = [1, 2, 3, 4, 5, 3]
        records = make_records(
            moods,
            energy=list(moods),
            focus=[6 - m for m in moods],
        )
        links = of_type(generate_insights(records), InsightType.METRIC_LINK)
        texts = [link.text for link in links]

        assert "There is a positive link between your mood and your energy." in texts
        assert "There is a negative link between your mood and your focus." in texts
        assert all(link.score == pytest.approx(1.0) for link in links)

    def test_absent_metric_produces_no_link(self) -> None:
        """A metric nobody reports has no pairs."""
        records = make_records([1, 2, 3, 4, 5])
        assert of_type(generate_insights(records), InsightType.METRIC_LINK) == []


class TestHabitPatterns:
    """Tests for habit-habit correlations."""

    def test_habits_always_together(self) -> None:
        """Two habits that always co-occur often happen together."""
        pattern = [True, False, True, False, True, False]
        records = make_records([3, 4, 2, 5, 3, 4], gym=pattern, healthyFood=list(pattern))
        patterns = of_type(generate_insights(records), InsightType.HABIT_PATTERN)

        assert len(patterns) == 1
        assert patterns[0].text == "Gym and healthy food often happen together."
        assert patterns[0].score == pytest.approx(1.0)

    def test_habits_never_together(self) -> None:
        """Mutually exclusive habits rarely happen together."""
        pattern = [True, False, True, False, True, False]
        records = make_records(
            [3, 4, 2, 5, 3, 4],
            gym=pattern,
            dayOff=[not p for p in pattern],
        )
        pattern_insight = of_type(generate_insights(records), InsightType.HABIT_PATTERN)[0]
        assert "rarely happen together" in pattern_insight.text


class TestComparisons:
    """Tests for with/without mood averages."""

    def test_feel_better_with_habit(self) -> None:
        """Mood averages are compared and rounded for display."""
        records = make_records(
            [5, 2, 4, 2, 5, 3],
            gym=[True, False, True, False, True, False],
        )
        comparison = of_type(generate_insights(records), InsightType.COMPARISON)[0]

        assert comparison.text == (
            "You feel better on days with gym (average of 4.7 on those days vs 2.3 otherwise)."
        )
        assert comparison.score == pytest.approx(14 / 3 - 7 / 3)

    def test_small_difference_is_ignored(self) -> None:
        """Differences of half a point or less are not reported."""
        records = make_records(
            [3, 3, 4, 3, 3, 3],
            gym=[True, False, True, False, True, False],
        )
        assert of_type(generate_insights(records), InsightType.COMPARISON) == []

    def test_difference_equal_to_threshold_is_ignored(self) -> None:
        """A difference of exactly half a point is not reported."""
        records = make_records(
            [4, 3, 3, 3, 3],
            gym=[True, True, False, False, False],
        )
        assert of_type(generate_insights(records), InsightType.COMPARISON) == []
        just_below = AnalyticsConfig(comparison_threshold=0.49)
        assert len(of_type(generate_insights(records, just_below), InsightType.COMPARISON)) == 1



class TestWeeklyPatterns:
    """Tests for weekday peaks."""

    def test_peak_weekday(self) -> None:
        """The weekday with the highest average is named."""
        # Wed..Sun, then Mon..Wed
        records = make_records([2, 3, 5, 2, 2, 1, 2, 2])
        weekly = of_type(generate_insights(records), InsightType.WEEKLY_PATTERN)

        assert len(weekly) == 1
        assert weekly[0].text == "Your mood peaks on Fridays (average: 5.0)."
        assert weekly[0].score == 0.8

    def test_tie_goes_to_first_weekday_seen(self) -> None:
        """Equal averages keep the weekday that appeared first."""
        records = make_records([3, 3, 3, 3, 3])
        weekly = of_type(generate_insights(records), InsightType.WEEKLY_PATTERN)
        assert "Wednesdays" in weekly[0].text

    def test_one_insight_per_reported_metric(self) -> None:
        """Every metric with values gets its own weekly insight."""
        records = make_records([3, 4, 3, 4, 3], sleep=[4, 4, 5, 4, 4])
        weekly = of_type(generate_insights(records), InsightType.WEEKLY_PATTERN)
        assert [w.text.split()[1] for w in weekly] == ["mood", "sleep"]


class TestSleepPrecursor:
    """Tests for next-day effects."""

    def test_good_sleep_leads_to_better_mood(self) -> None:
        """Sleep that predicts the next day's mood is reported."""
        sleep = [1, 5, 2, 4, 3, 5, 1]
        moods = [3] + sleep[:-1]
        records = make_records(moods, sleep=sleep)
        precursors = of_type(generate_insights(records), InsightType.PRECURSOR)

        assert len(precursors) == 1
        assert precursors[0].text == "Good sleep often leads to better mood the next day."
        assert precursors[0].score == pytest.approx(1.0)

    def test_inverse_effect(self) -> None:
        """A negative next-day correlation produces the inverse insight."""
        sleep = [1, 5, 2, 4, 3, 5, 1]
        moods = [3] + [6 - s for s in sleep[:-1]]
        records = make_records(moods, sleep=sleep)
        precursor = of_type(generate_insights(records), InsightType.PRECURSOR)[0]
        assert "lower mood the next day" in precursor.text

    def test_no_sleep_data(self) -> None:
        """Without sleep values there is nothing to correlate."""
        records = make_records([1, 5, 2, 4, 3])
        assert of_type(generate_insights(records), InsightType.PRECURSOR) == []


class TestLongTermTrends:
    """Tests for first-half versus second-half trends."""

    def test_declining_mood(self) -> None:
        """A drop of more than a point is a warning."""
        records = make_records([5] * 5 + [2] * 5)
        trends = of_type(generate_insights(records), InsightType.TREND)

        assert len(trends) == 1
        assert trends[0].label == "Warning"
        assert "declined" in trends[0].text
        assert trends[0].score == pytest.approx(3.0)

    def test_improving_mood(self) -> None:
        """A rise of more than a point is improving."""
        records = make_records([2] * 5 + [4] * 5)
        trend = of_type(generate_insights(records), InsightType.TREND)[0]
        assert trend.label == "Improving Trend"
        assert trend.score == pytest.approx(2.0)

    def test_requires_ten_records(self) -> None:
        """Nine records are not enough for a trend."""
        records = make_records([5] * 5 + [1] * 4)
        assert of_type(generate_insights(records), InsightType.TREND) == []

    @pytest.mark.parametrize("moods", [[4] * 5 + [3] * 5, [3] * 5 + [4] * 5])
    def test_change_equal_to_threshold_is_ignored(self, moods: list[float]) -> None:
        """A change of exactly one point is neither a warning nor an improvement."""
        records = make_records(moods)
        assert of_type(generate_insights(records), InsightType.TREND) == []


    def test_first_half_takes_odd_record(self) -> None:
        """With an odd count the middle record belongs to the first half."""
        records = make_records([5] * 5 + [1] + [5] * 5)
        config = AnalyticsConfig(trend_threshold=0.5)
        trend = of_type(generate_insights(records, config), InsightType.TREND)[0]
        assert trend.label == "Improving Trend"
        assert trend.score == pytest.approx(5 - 26 / 6)


class TestSynergies:
    """Tests for habit pairs that boost mood together."""

    def test_pair_beats_either_alone(self) -> None:
        """Both habits together lift mood above the better single habit."""
        records = make_records(
            [5, 5, 3, 3, 3, 3, 1, 1],
            gym=[True, True, True, True, False, False, False, False],
            healthyFood=[True, True, False, False, True, True, False, False],
        )
        synergies = of_type(generate_insights(records), InsightType.SYNERGY)

        assert len(synergies) == 1
        assert synergies[0].score == pytest.approx(2.0)
        assert synergies[0].text.startswith("Gym and healthy food together boost your mood")

    def test_groups_need_two_records(self) -> None:
        """A single both-habits day is not enough evidence."""
        records = make_records(
            [5, 3, 3, 3, 3, 1, 1],
            gym=[True, True, True, False, False, False, False],
            healthyFood=[True, False, False, True, True, False, False],
        )
        assert of_type(generate_insights(records), InsightType.SYNERGY) == []


class TestRanking:
    """Tests for the merged, ranked output."""

    def _records(self) -> list[DailyRecord]:
        return make_records(
            [5, 5, 3, 3, 3, 3, 1, 1, 2, 4],
            sleep=[4, 3, 2, 5, 3, 1, 2, 4, 5, 3],
            gym=[True, True, True, True, False, False, False, False, True, False],
            healthyFood=[True, True, False, False, True, True, False, False, False, True],
        )

    def test_sorted_by_descending_score(self) -> None:
        """Higher scores come first."""
        scores = [i.score for i in generate_insights(self._records())]
        assert scores == sorted(scores, reverse=True)
        assert all(score >= 0 for score in scores)

    def test_idempotent(self) -> None:
        """The same input always gives the same output."""
        records = self._records()
        assert generate_insights(records) == generate_insights(records)

    def test_threaded_matches_serial(self) -> None:
        """Sharding pair families over threads does not change results."""
        records = self._records()
        serial = InsightGenerator(AnalyticsConfig(max_workers=1)).generate(records)
        threaded = InsightGenerator(AnalyticsConfig(max_workers=4)).generate(records)
        assert threaded == serial

    def test_does_not_mutate_input(self) -> None:
        """Records are left untouched."""
        records = self._records()
        snapshot = [r.to_dict() for r in records]
        generate_insights(records)
        assert [r.to_dict() for r in records] == snapshot

    def test_insight_to_dict(self) -> None:
        """Serialized insights omit empty details."""
        insight = Insight(type=InsightType.TREND, label="Warning", text="t", score=1.5)
        assert insight.to_dict() == {
            "type": "trend",
            "label": "Warning",
            "text": "t",
            "score": 1.5,
        }
