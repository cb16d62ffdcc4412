"""Tests for sample statistics helpers."""

import pytest

from moodly.analytics.stats import has_variance, mean, pearson, sample_std


class TestSampleStatistics:
    """Tests for mean and standard deviation."""

    def test_mean(self) -> None:
        assert mean([1, 2, 3, 4]) == 2.5

    def test_sample_std_uses_n_minus_one(self) -> None:
        """Sample deviation divides by n-1."""
        assert sample_std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.138089935)

    def test_sample_std_single_value(self) -> None:
        assert sample_std([3]) == 0.0
        assert sample_std([]) == 0.0

    def test_has_variance(self) -> None:
        assert has_variance([1, 2])
        assert not has_variance([3, 3, 3])


class TestPearson:
    """Tests for the correlation coefficient."""

    def test_perfect_positive(self) -> None:
        assert pearson([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)

    def test_perfect_negative(self) -> None:
        assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_symmetric(self) -> None:
        """corr(x, y) equals corr(y, x)."""
        xs = [1.0, 0.0, 0.0, 1.0, 0.0, 1.0]
        ys = [5.0, 4.0, 2.0, 3.0, 1.0, 4.0]
        assert pearson(xs, ys) == pytest.approx(pearson(ys, xs), abs=1e-12)

    def test_zero_variance_is_undefined(self) -> None:
        assert pearson([1, 1, 1], [1, 2, 3]) is None
        assert pearson([1, 2, 3], [4, 4, 4]) is None

    def test_mismatched_lengths(self) -> None:
        assert pearson([1, 2, 3], [1, 2]) is None

    def test_too_few_points(self) -> None:
        assert pearson([1], [2]) is None
