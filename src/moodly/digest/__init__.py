"""Digest module for Moodly.

Provides weekly and monthly recap emails.
"""

from .report import (
    DigestGenerator,
    DigestPeriod,
    DigestReport,
    PeriodStats,
    calculate_stats,
    period_range,
    select_periods,
)
from .template import mood_color, render_digest_html

__all__ = [
    "DigestGenerator",
    "DigestPeriod",
    "DigestReport",
    "PeriodStats",
    "calculate_stats",
    "mood_color",
    "period_range",
    "render_digest_html",
    "select_periods",
]
