"""Analytics module for Moodly.

Provides insight generation and streak calculation over daily records.
"""

from .formatting import format_habit, habit_action
from .insights import InsightGenerator, generate_insights, habit_vocabulary
from .models import Insight, InsightType, StreakData
from .streaks import calculate_streak

__all__ = [
    "Insight",
    "InsightGenerator",
    "InsightType",
    "StreakData",
    "calculate_streak",
    "format_habit",
    "generate_insights",
    "habit_action",
    "habit_vocabulary",
]
