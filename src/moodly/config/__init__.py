"""Configuration module for Moodly.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

DEFAULT_METRICS: tuple[str, ...] = ("mood", "energy", "sleep", "focus", "stress")


@dataclass(frozen=True)
class AnalyticsConfig:
    """Thresholds and tuning for insight generation.

    Correlation thresholds are exclusive: a value must be strictly greater
    than the threshold to produce an insight.
    """

    metrics: tuple[str, ...] = DEFAULT_METRICS
    min_records: int = 5
    habit_metric_threshold: float = 0.3
    metric_metric_threshold: float = 0.4
    habit_habit_threshold: float = 0.4
    comparison_threshold: float = 0.5
    weekly_pattern_score: float = 0.8
    lag_threshold: float = 0.3
    trend_min_records: int = 10
    trend_threshold: float = 1.0
    synergy_min_group: int = 2
    synergy_threshold: float = 0.7
    max_workers: int = 1

    def __post_init__(self) -> None:
        # YAML hands us lists
        object.__setattr__(self, "metrics", tuple(self.metrics))


@dataclass
class StorageConfig:
    """MongoDB record store configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "moodly"
    collection: str = "entries"
    connect_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000


@dataclass
class ReportsConfig:
    """Which recap emails are enabled."""

    weekly_reports: bool = True
    monthly_reports: bool = False
    include_insights: bool = True
    max_insights: int = 3


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class MoodlyConfig:
    """Main Moodly configuration."""

    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> MoodlyConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> MoodlyConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "DEFAULT_METRICS",
    "AnalyticsConfig",
    "ConfigLoader",
    "LoggingConfig",
    "MoodlyConfig",
    "ReportsConfig",
    "StorageConfig",
]
