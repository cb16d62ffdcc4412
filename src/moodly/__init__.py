"""Moodly - insights and streaks for a daily mood and habit journal.

Moodly analyzes daily wellbeing records with:
- Habit and metric correlations
- Weekday patterns, next-day effects and long-term trends
- Habit synergies
- Consecutive-day streaks
- Weekly and monthly recap emails

Usage:
    python -m moodly insights --records entries.json
    python -m moodly --profile prod digest auto --send
"""

__version__ = "0.1.0"
__author__ = "MPS Inc"

from .analytics import calculate_streak, generate_insights
from .config import MoodlyConfig
from .config.loader import load_config

__all__ = [
    "MoodlyConfig",
    "__version__",
    "calculate_streak",
    "generate_insights",
    "load_config",
]
