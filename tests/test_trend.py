"""
Tests for trend and distribution helpers.
"""

import math
from datetime import datetime, timezone

import pytest

from release_lens.trend import (
    TrendDirection,
    clamp,
    classify_trend,
    coefficient_of_variation,
    compound_growth_rate,
    gini_coefficient,
    linear_regression_slope,
    releases_within,
    resolve_reference_time,
)


class TestLinearRegressionSlope:
    def test_fewer_than_two_points(self):
        assert linear_regression_slope([]) == 0.0
        assert linear_regression_slope([5]) == 0.0

    def test_rising_series(self):
        assert linear_regression_slope([1, 2, 3, 4]) == pytest.approx(1.0)

    def test_constant_series(self):
        assert linear_regression_slope([1, 1, 1]) == 0.0


class TestClassifyTrend:
    def test_single_point_is_stable(self):
        assert classify_trend([1]) == TrendDirection.STABLE

    def test_increasing(self):
        assert classify_trend([0, 1, 2]) == TrendDirection.INCREASING

    def test_decreasing(self):
        assert classify_trend([3, 2, 1]) == TrendDirection.DECREASING

    def test_all_ones_is_stable(self):
        assert classify_trend([1, 1, 1, 1]).value == "stable"


class TestCompoundGrowthRate:
    def test_empty_and_single(self):
        assert compound_growth_rate([]) == 0.0
        assert compound_growth_rate([3]) == 0.0

    def test_zero_initial_value(self):
        assert compound_growth_rate([0, 4, 8]) == 0.0

    def test_doubling_over_one_period(self):
        assert compound_growth_rate([2, 4]) == pytest.approx(100.0)

    def test_flat_series(self):
        assert compound_growth_rate([3, 3, 3]) == pytest.approx(0.0)


class TestGiniCoefficient:
    def test_empty(self):
        assert gini_coefficient([]) == 0.0

    def test_all_zero(self):
        assert gini_coefficient([0, 0, 0]) == 0.0

    def test_equal_distribution(self):
        assert gini_coefficient([5, 5, 5]) == 0.0

    def test_unequal_distribution(self):
        # Pairwise |diff| sum = 20, n = 2, mean = 5
        assert gini_coefficient([0, 10]) == pytest.approx(0.5)

    def test_never_nan(self):
        assert not math.isnan(gini_coefficient([1]))


class TestCoefficientOfVariation:
    def test_empty(self):
        assert coefficient_of_variation([]) is None

    def test_zero_mean(self):
        assert coefficient_of_variation([0, 0]) is None

    def test_constant_values(self):
        assert coefficient_of_variation([4, 4, 4]) == 0.0

    def test_population_standard_deviation(self):
        assert coefficient_of_variation([2, 4]) == pytest.approx(1 / 3)


def test_clamp():
    assert clamp(1.5) == 1.0
    assert clamp(-0.2) == 0.0
    assert clamp(0.4) == 0.4


class TestReferenceTime:
    def test_naive_value_becomes_utc(self):
        resolved = resolve_reference_time(datetime(2024, 1, 1))
        assert resolved.tzinfo == timezone.utc

    def test_default_is_aware(self):
        assert resolve_reference_time().tzinfo is not None


def test_releases_within_keeps_window_and_order(make_release, now):
    releases = [
        make_release("v3", days_ago=10),
        make_release("v2", days_ago=100),
        make_release("v1", days_ago=200),
    ]
    recent = releases_within(releases, 180, now)
    assert [r.tag_name for r in recent] == ["v3", "v2"]
