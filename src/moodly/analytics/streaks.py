"""Streak calculation over record dates."""

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from moodly.records.models import parse_date

from .models import StreakData

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def calculate_streak(
    dates: Iterable[date | str],
    today: date | None = None,
) -> StreakData:
    """Calculate current and longest consecutive-day streaks.

    The current streak is only active when the latest entry is from today
    or yesterday. Duplicate dates count once.

    Args:
        dates: Record dates in any order, as dates or ISO strings
        today: Reference day, defaults to the local calendar date

    Returns:
        StreakData with both streak lengths and the most recent date

    Raises:
        ValueError: If a string is not an ISO calendar date
    """
    unique = sorted({parse_date(d) for d in dates}, reverse=True)
    if not unique:
        return StreakData(current_streak=0, longest_streak=0, last_entry_date=None)

    reference = today or date.today()
    latest = unique[0]

    current = 0
    if latest in (reference, reference - ONE_DAY):
        expected = latest
        for day in unique:
            if day != expected:
                break
            current += 1
            expected -= ONE_DAY

    longest = 1
    run = 1
    for previous, day in zip(unique, unique[1:]):
        if day == previous - ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)

    result = StreakData(
        current_streak=current,
        longest_streak=max(longest, current),
        last_entry_date=latest,
    )
    logger.debug(f"Streak for {len(unique)} dates: {result}")
    return result


__all__ = ["calculate_streak"]
