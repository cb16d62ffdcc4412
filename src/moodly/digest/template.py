"""HTML rendering for recap emails."""

from datetime import date
from html import escape
from typing import TYPE_CHECKING

from moodly.analytics.formatting import format_habit
from moodly.analytics.models import Insight

if TYPE_CHECKING:
    from .report import PeriodStats

GREEN = "#4ade80"
YELLOW = "#facc15"
RED = "#f87171"

STYLE = """
    body { font-family: sans-serif; color: #333; line-height: 1.6; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { text-align: center; margin-bottom: 30px; }
    .card { background: #f9fafb; padding: 20px; border-radius: 10px; margin-bottom: 20px; }
    .metric-row { display: flex; justify-content: space-between; margin-bottom: 10px; }
    .metric-label, .metric-value { font-weight: bold; }
    .tag-list { list-style: none; padding: 0; }
    .tag-item { display: flex; justify-content: space-between; padding: 5px 0; border-bottom: 1px solid #eee; }
    .footer { text-align: center; font-size: 12px; color: #888; margin-top: 30px; }
"""


def mood_color(value: float) -> str:
    """Traffic-light color for an average mood."""
    if value >= 4:
        return GREEN
    if value >= 3:
        return YELLOW
    return RED


def _metric_row(label: str, value: float, color: str | None = None) -> str:
    style = f' style="color: {color}"' if color else ""
    return (
        '<div class="metric-row">'
        f'<span class="metric-label">{label}</span>'
        f'<span class="metric-value"{style}>{value}/5</span>'
        "</div>"
    )


def render_digest_html(
    period_label: str,
    stats: "PeriodStats",
    start: date,
    end: date,
    insights: list[Insight] | None = None,
) -> str:
    """Render the recap email body.

    Args:
        period_label: "Weekly" or "Monthly"
        stats: Aggregated statistics for the period
        start: First day of the period
        end: Last day of the period
        insights: Optional top insights to include

    Returns:
        Complete HTML document
    """
    rows = "".join(
        [
            _metric_row("Average Mood", stats.avg_mood, mood_color(stats.avg_mood)),
            _metric_row("Average Energy", stats.avg_energy),
            _metric_row("Average Sleep", stats.avg_sleep),
            _metric_row("Average Focus", stats.avg_focus),
        ]
    )

    tags = "".join(
        f'<li class="tag-item"><span>{escape(format_habit(tag))}</span><span>{count}x</span></li>'
        for tag, count in stats.top_habits
    )

    insight_card = ""
    if insights:
        items = "".join(
            f"<li><strong>{escape(i.label)}:</strong> {escape(i.text)}</li>" for i in insights
        )
        insight_card = f'<div class="card"><h2>Insights</h2><ul>{items}</ul></div>'

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Your {period_label} Moodly Recap</title>
<style>{STYLE}</style>
</head>
<body>
<div class="container">
<div class="header">
<h1>Your {period_label} Moodly Recap</h1>
<p>{start.isoformat()} - {end.isoformat()}</p>
</div>
<div class="card">
<h2>Overview</h2>
<p>You tracked your mood <strong>{stats.total_entries}</strong> times this {period_label.lower()}.</p>
{rows}
</div>
<div class="card">
<h2>Top Activities</h2>
<ul class="tag-list">{tags}</ul>
</div>
{insight_card}
<div class="footer">
<p>Sent by Moodly. You can change your email preferences in the app settings.</p>
</div>
</div>
</body>
</html>
"""


__all__ = ["mood_color", "render_digest_html"]
