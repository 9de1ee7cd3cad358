"""Calculators for trend statistics, categories and seasonality."""

from trendlens.calculators.categories import INSUFFICIENT_DATA, TrendCategorizer
from trendlens.calculators.seasonality import SeasonalityCalculator, primary_peak_months
from trendlens.calculators.statistics import (
    average_value,
    coefficient_of_variation,
    linear_regression_slope,
    mean,
    moving_average,
    recent_momentum,
    standard_deviation,
    trend_direction,
)

__all__ = [
    "INSUFFICIENT_DATA",
    "TrendCategorizer",
    "SeasonalityCalculator",
    "primary_peak_months",
    "average_value",
    "coefficient_of_variation",
    "linear_regression_slope",
    "mean",
    "moving_average",
    "recent_momentum",
    "standard_deviation",
    "trend_direction",
]
