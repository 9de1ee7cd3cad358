"""Tests for trend categorization."""

import pytest

from trendlens.calculators.categories import INSUFFICIENT_DATA, TrendCategorizer
from trendlens.models.trend import Momentum


@pytest.fixture
def categorizer():
    return TrendCategorizer(volatility_threshold_pct=35)


class TestTrendCategorizer:
    """Tests for TrendCategorizer."""

    @pytest.mark.parametrize(
        "slope,momentum,expected",
        [
            (0.6, Momentum.GAINING, "Accelerating Growth"),
            (0.6, Momentum.STABLE, "Strong Steady Growth"),
            (0.6, Momentum.FADING, "Slowing Growth"),
            (0.3, Momentum.GAINING, "Moderate Growth, Gaining"),
            (0.3, Momentum.STABLE, "Steady Growth"),
            (0.3, Momentum.FADING, "Growth Stalling"),
            (-0.6, Momentum.FADING, "Accelerating Decline"),
            (-0.6, Momentum.STABLE, "Strong Steady Decline"),
            (-0.6, Momentum.GAINING, "Decline Slowing"),
            (-0.3, Momentum.FADING, "Moderate Decline, Fading"),
            (-0.3, Momentum.STABLE, "Steady Decline"),
            (-0.3, Momentum.GAINING, "Decline Softening"),
            (0.0, Momentum.GAINING, "Recent Uptick from Flat"),
            (0.0, Momentum.STABLE, "Stable / Flat"),
            (0.0, Momentum.FADING, "Recent Dip from Flat"),
        ],
    )
    def test_category_table(self, categorizer, slope, momentum, expected):
        assert categorizer.categorize(slope, momentum, cv=10.0) == expected

    @pytest.mark.parametrize(
        "slope,band",
        [
            (0.5, "growth"),
            (0.1, "flat"),
            (-0.1, "flat"),
            (-0.5, "decline"),
            (0.51, "strong_growth"),
            (-0.51, "strong_decline"),
        ],
    )
    def test_band_boundaries(self, categorizer, slope, band):
        assert categorizer.slope_band(slope) == band

    def test_volatile_prefix(self, categorizer):
        result = categorizer.categorize(0.0, Momentum.GAINING, cv=50.0)
        assert result == "Volatile Recent Uptick from Flat"

    def test_threshold_is_exclusive(self, categorizer):
        assert categorizer.categorize(0.3, Momentum.STABLE, cv=35.0) == "Steady Growth"

    def test_custom_threshold(self):
        categorizer = TrendCategorizer(volatility_threshold_pct=50)
        assert categorizer.categorize(0.3, Momentum.STABLE, cv=40.0) == "Steady Growth"

    def test_unknown_cv_is_not_volatile(self, categorizer):
        assert categorizer.categorize(0.3, Momentum.STABLE, cv=None) == "Steady Growth"

    def test_insufficient_data(self, categorizer):
        assert categorizer.categorize(None, Momentum.STABLE, cv=10.0) == INSUFFICIENT_DATA
        assert categorizer.categorize(0.3, None, cv=10.0) == INSUFFICIENT_DATA
