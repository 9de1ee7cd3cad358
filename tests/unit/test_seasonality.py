"""Tests for seasonal indexes."""

from datetime import date

import pytest

from trendlens.calculators.seasonality import SeasonalityCalculator, primary_peak_months
from trendlens.models.trend import MONTH_NAMES_SHORT, SeasonalIndex, TrendPoint
from trendlens.utils.dates import to_timestamp


def monthly_points(year: int, values_by_month: dict[int, float]) -> list[TrendPoint]:
    return [
        TrendPoint(timestamp=to_timestamp(date(year, month, 1)), value=value)
        for month, value in sorted(values_by_month.items())
    ]


@pytest.fixture
def december_peak_points() -> list[TrendPoint]:
    """Two years of flat data with a doubled December."""
    values = {month: (200 if month == 12 else 100) for month in range(1, 13)}
    return monthly_points(2022, values) + monthly_points(2023, values)


class TestSeasonalityCalculator:
    """Tests for SeasonalityCalculator."""

    def test_month_order(self, december_peak_points):
        indexes = SeasonalityCalculator().calculate(december_peak_points)
        assert [si.month for si in indexes] == MONTH_NAMES_SHORT

    def test_december_peak(self, december_peak_points):
        indexes = SeasonalityCalculator(peak_threshold_pct=25).calculate(december_peak_points)
        by_month = {si.month: si for si in indexes}

        assert by_month["Dec"].index == 184.6
        assert by_month["Dec"].is_peak
        assert by_month["Jan"].index == 92.3
        assert not by_month["Jan"].is_peak

    def test_higher_threshold_drops_peak(self, december_peak_points):
        indexes = SeasonalityCalculator(peak_threshold_pct=100).calculate(december_peak_points)
        assert not any(si.is_peak for si in indexes)

    def test_fewer_than_twelve_points(self):
        points = monthly_points(2023, {m: 10 * m for m in range(1, 12)})

        indexes = SeasonalityCalculator().calculate(points)

        assert len(indexes) == 12
        assert all(si.index == 0 and not si.is_peak for si in indexes)

    def test_zero_average(self):
        points = monthly_points(2023, {m: 0 for m in range(1, 13)})
        indexes = SeasonalityCalculator().calculate(points)
        assert all(si.index == 0 for si in indexes)

    def test_average_rounding_to_zero(self):
        points = monthly_points(2023, {m: 0.001 for m in range(1, 13)})
        indexes = SeasonalityCalculator().calculate(points)
        assert all(si.index == 0 and not si.has_signal for si in indexes)

    def test_index_uses_displayed_average(self):
        """Overall average 13/12 is shown as 1.08, and indexes divide by that."""
        points = monthly_points(2023, {m: (2 if m == 1 else 1) for m in range(1, 13)})

        by_month = {si.month: si for si in SeasonalityCalculator().calculate(points)}

        assert by_month["Jan"].index == 185.2
        assert by_month["Feb"].index == 92.6

    def test_flat_series_has_no_peaks(self):
        """Equal monthly averages give index 100 everywhere, below even the lowest threshold."""
        points = monthly_points(2022, {m: 50 for m in range(1, 13)}) + monthly_points(
            2023, {m: 50 for m in range(1, 13)}
        )

        indexes = SeasonalityCalculator(peak_threshold_pct=5).calculate(points)

        assert [si.index for si in indexes] == [100.0] * 12
        assert not any(si.is_peak for si in indexes)
        assert primary_peak_months(indexes) == MONTH_NAMES_SHORT

    def test_months_without_data(self):
        """Test that months with no observations get index 0."""
        first_half = {m: 50 for m in range(1, 7)}
        points = monthly_points(2022, first_half) + monthly_points(2023, first_half)

        indexes = SeasonalityCalculator().calculate(points)
        by_month = {si.month: si for si in indexes}

        assert by_month["Mar"].index == 100.0
        assert by_month["Sep"].index == 0
        assert not by_month["Sep"].has_signal


class TestPrimaryPeakMonths:
    """Tests for primary peak month selection."""

    def test_single_maximum(self, december_peak_points):
        indexes = SeasonalityCalculator().calculate(december_peak_points)
        assert primary_peak_months(indexes) == ["Dec"]

    def test_ties_included(self):
        indexes = [
            SeasonalIndex(month="Jan", index=120.0),
            SeasonalIndex(month="Feb", index=80.0),
            SeasonalIndex(month="Mar", index=120.0),
        ]
        assert primary_peak_months(indexes) == ["Jan", "Mar"]

    def test_no_signal(self):
        assert primary_peak_months([SeasonalIndex(month=m) for m in MONTH_NAMES_SHORT]) == []
        assert primary_peak_months([]) == []
