"""
Trend and distribution helpers shared by the analyzers.

Every helper returns a defined neutral value for empty or single-element
input instead of NaN or infinity.
"""

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Sequence

from release_lens.models import ReleaseNote

# Window sizes used across analyzers
EVOLUTION_WINDOW_DAYS = 180
SIX_MONTHS_DAYS = 180
THREE_MONTHS_DAYS = 90
DAYS_PER_MONTH = 30

# Slope beyond which a series counts as rising or falling
TREND_SLOPE_THRESHOLD = 0.1


class TrendDirection(str, Enum):
    """Direction of a focus-area series."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


def resolve_reference_time(now: datetime | None = None) -> datetime:
    """Return the reference instant, defaulting to the current UTC time."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def releases_within(
    releases: Sequence[ReleaseNote], days: int, now: datetime
) -> list[ReleaseNote]:
    """
    Filter releases created within the trailing window ending at `now`.

    Input order is preserved.
    """
    cutoff = now - timedelta(days=days)
    return [release for release in releases if release.created_at >= cutoff]


def linear_regression_slope(values: Sequence[float]) -> float:
    """
    Least-squares slope of `values` against their indices.

    Returns 0.0 for fewer than 2 points.
    """
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def classify_trend(values: Sequence[float]) -> TrendDirection:
    """Classify a series as increasing, stable or decreasing."""
    if len(values) < 2:
        return TrendDirection.STABLE

    slope = linear_regression_slope(values)
    if slope > TREND_SLOPE_THRESHOLD:
        return TrendDirection.INCREASING
    if slope < -TREND_SLOPE_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def compound_growth_rate(values: Sequence[float]) -> float:
    """
    Compound growth per period in percent: ((last/first)^(1/periods) - 1) * 100.

    Returns 0.0 for fewer than 2 points or when the first value is 0.
    """
    if len(values) < 2:
        return 0.0

    initial = values[0]
    final = values[-1]
    if initial <= 0 or final < 0:
        return 0.0

    periods = len(values) - 1
    return ((final / initial) ** (1 / periods) - 1) * 100


def gini_coefficient(values: Sequence[float]) -> float:
    """
    Gini coefficient of a distribution (0 = equal, 1 = maximally unequal).

    Returns 0.0 for empty input or an all-zero distribution.
    """
    n = len(values)
    if n == 0:
        return 0.0

    mean = sum(values) / n
    if mean == 0:
        return 0.0

    total_diff = sum(abs(a - b) for a in values for b in values)
    return total_diff / (2 * n * n * mean)


def coefficient_of_variation(values: Sequence[float]) -> float | None:
    """
    Population standard deviation divided by the mean.

    Returns None when there is no data or the mean is 0.
    """
    if not values:
        return None

    mean = sum(values) / len(values)
    if mean == 0:
        return None

    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return math.sqrt(variance) / mean


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
