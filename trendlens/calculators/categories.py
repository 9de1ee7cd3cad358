"""Trend categorization from slope, momentum and volatility."""

from trendlens.models.trend import Momentum

INSUFFICIENT_DATA = "Insufficient Data"


class TrendCategorizer:
    """
    Assigns one of 15 trend categories.

    Slope bands (value units per point):
    - strong growth:   slope > 0.5
    - growth:          0.1 < slope <= 0.5
    - strong decline:  slope < -0.5
    - decline:         -0.5 <= slope < -0.1
    - flat:            everything else

    Each band is split three ways by momentum. A coefficient of variation
    above the volatility threshold prefixes the label with "Volatile".
    """

    STRONG_SLOPE = 0.5
    SLOPE = 0.1
    VOLATILE_PREFIX = "Volatile"

    CATEGORY_TABLE: dict[str, dict[Momentum, str]] = {
        "strong_growth": {
            Momentum.GAINING: "Accelerating Growth",
            Momentum.STABLE: "Strong Steady Growth",
            Momentum.FADING: "Slowing Growth",
        },
        "growth": {
            Momentum.GAINING: "Moderate Growth, Gaining",
            Momentum.STABLE: "Steady Growth",
            Momentum.FADING: "Growth Stalling",
        },
        "strong_decline": {
            Momentum.FADING: "Accelerating Decline",
            Momentum.STABLE: "Strong Steady Decline",
            Momentum.GAINING: "Decline Slowing",
        },
        "decline": {
            Momentum.FADING: "Moderate Decline, Fading",
            Momentum.STABLE: "Steady Decline",
            Momentum.GAINING: "Decline Softening",
        },
        "flat": {
            Momentum.GAINING: "Recent Uptick from Flat",
            Momentum.STABLE: "Stable / Flat",
            Momentum.FADING: "Recent Dip from Flat",
        },
    }

    def __init__(self, volatility_threshold_pct: float = 35):
        self.volatility_threshold_pct = volatility_threshold_pct

    def slope_band(self, slope: float) -> str:
        """Classify a slope into one of the five bands."""
        if slope > self.STRONG_SLOPE:
            return "strong_growth"
        if slope > self.SLOPE:
            return "growth"
        if slope < -self.STRONG_SLOPE:
            return "strong_decline"
        if slope < -self.SLOPE:
            return "decline"
        return "flat"

    def is_volatile(self, cv: float | None) -> bool:
        return cv is not None and cv > self.volatility_threshold_pct

    def categorize(
        self,
        slope: float | None,
        momentum: Momentum | None,
        cv: float | None,
    ) -> str:
        """
        Categorize a windowed trend.

        Args:
            slope: Linear regression slope, None if not applicable
            momentum: Recent momentum, None if not applicable
            cv: Coefficient of variation in percent, None if not applicable

        Returns:
            Category label, "Insufficient Data" when slope or momentum is unknown
        """
        if slope is None or momentum is None:
            return INSUFFICIENT_DATA

        category = self.CATEGORY_TABLE[self.slope_band(slope)][momentum]

        if self.is_volatile(cv):
            return f"{self.VOLATILE_PREFIX} {category}"
        return category
