"""Readable labels for habit keys."""

import re

HABIT_ACTIONS: dict[str, str] = {
    "healthyFood": "eat healthy food",
    "caffeine": "have caffeine",
    "gym": "go to the gym",
    "hardWork": "work hard",
    "dayOff": "have a day off",
    "alcohol": "drink alcohol",
    "misc": "have miscellaneous entries",
}

_CAPITAL = re.compile(r"([A-Z])")


def format_habit(key: str) -> str:
    """Turn a camelCase habit key into readable text.

    >>> format_habit("healthyFood")
    'Healthy food'
    """
    text = _CAPITAL.sub(r" \1", key).lower().strip()
    return text[:1].upper() + text[1:]


def habit_action(key: str) -> str:
    """Verb phrase for a habit, e.g. ``gym`` -> ``go to the gym``."""
    return HABIT_ACTIONS.get(key) or format_habit(key).lower()


__all__ = ["HABIT_ACTIONS", "format_habit", "habit_action"]
