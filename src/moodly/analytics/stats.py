"""Sample statistics used by the insight engine."""

import statistics
from collections.abc import Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean of a non-empty sequence."""
    return statistics.fmean(values)


def sample_std(values: Sequence[float]) -> float:
    """Sample (n-1) standard deviation; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return statistics.stdev(values)


def has_variance(values: Sequence[float]) -> bool:
    """True when the values can take part in a correlation."""
    return sample_std(values) > 0


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float | None:
    """Pearson sample correlation coefficient.

    Returns None when the vectors differ in length or either one has
    no variation, since the coefficient is undefined there.
    """
    if len(xs) != len(ys):
        return None
    if not has_variance(xs) or not has_variance(ys):
        return None
    return statistics.correlation(xs, ys)


__all__ = ["has_variance", "mean", "pearson", "sample_std"]
