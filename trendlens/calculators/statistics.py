"""Descriptive statistics over ordered trend point series.

Every function expects points already sorted by timestamp and returns None
when the metric is not applicable to the given series.
"""

import math

from trendlens.models.trend import Momentum, TrendDirection, TrendPoint

# Slope (value units per point) beyond which a trend counts as moving
DIRECTION_SLOPE_THRESHOLD = 0.1

MOMENTUM_POINTS = 3
MOMENTUM_GAIN_RATIO = 1.10
MOMENTUM_FADE_RATIO = 0.90


def _is_number(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def linear_regression_slope(points: list[TrendPoint]) -> float | None:
    """
    Ordinary least-squares slope of value against point index.

    Points are treated as equally spaced regardless of their dates.
    """
    if len(points) < 2:
        return None

    n = len(points)
    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for index, point in enumerate(points):
        sum_x += index
        sum_y += point.value
        sum_xy += index * point.value
        sum_xx += index * index

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    return slope if _is_number(slope) else None


def mean(points: list[TrendPoint]) -> float | None:
    """Arithmetic mean of the point values."""
    if not points:
        return None
    result = sum(p.value for p in points) / len(points)
    return result if _is_number(result) else None


def standard_deviation(points: list[TrendPoint]) -> float | None:
    """Population standard deviation of the point values (0 for a single point)."""
    avg = mean(points)
    if avg is None:
        return None
    variance = sum((p.value - avg) ** 2 for p in points) / len(points)
    result = math.sqrt(variance)
    return result if _is_number(result) else None


def average_value(points: list[TrendPoint]) -> float | None:
    """Mean rounded to 2 decimals, for display."""
    avg = mean(points)
    return round(avg, 2) if avg is not None else None


def coefficient_of_variation(points: list[TrendPoint]) -> float | None:
    """
    Volatility as (stddev / average) * 100, rounded to 2 decimals.

    The divisor is the displayed average (rounded to 2 decimals), so a series
    whose average rounds to 0 has no CV. Needs at least 2 points.
    """
    if len(points) < 2:
        return None

    avg = average_value(points)
    std_dev = standard_deviation(points)
    if avg is None or std_dev is None or avg == 0:
        return None

    cv = (std_dev / avg) * 100
    return round(cv, 2) if _is_number(cv) else None


def recent_momentum(points: list[TrendPoint]) -> Momentum | None:
    """Compare the mean of the last 3 points with the mean of the 3 before them."""
    if len(points) < MOMENTUM_POINTS * 2:
        return None

    last = points[-MOMENTUM_POINTS:]
    previous = points[-MOMENTUM_POINTS * 2:-MOMENTUM_POINTS]

    last_avg = sum(p.value for p in last) / MOMENTUM_POINTS
    prev_avg = sum(p.value for p in previous) / MOMENTUM_POINTS
    if not (_is_number(last_avg) and _is_number(prev_avg)):
        return None

    if last_avg > prev_avg * MOMENTUM_GAIN_RATIO:
        return Momentum.GAINING
    if last_avg < prev_avg * MOMENTUM_FADE_RATIO:
        return Momentum.FADING
    return Momentum.STABLE


def trend_direction(slope: float | None) -> TrendDirection | None:
    """Map a windowed slope to a direction label."""
    if slope is None:
        return None
    if slope > DIRECTION_SLOPE_THRESHOLD:
        return TrendDirection.UPWARD
    if slope < -DIRECTION_SLOPE_THRESHOLD:
        return TrendDirection.DOWNWARD
    return TrendDirection.FLAT


def moving_average(points: list[TrendPoint], window: int = 3) -> list[TrendPoint]:
    """
    Simple trailing moving average.

    Each output point is dated at the last point of its window, so the result
    has len(points) - window + 1 entries. Returns [] when window < 2 or there
    are fewer than `window` points.
    """
    if window < 2 or len(points) < window:
        return []

    averaged: list[TrendPoint] = []
    for start in range(len(points) - window + 1):
        window_slice = points[start:start + window]
        total = sum(p.value for p in window_slice)
        averaged.append(
            TrendPoint(timestamp=window_slice[-1].timestamp, value=round(total / window, 2))
        )
    return averaged
