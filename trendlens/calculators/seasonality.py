"""Monthly seasonal index computation."""

from collections import defaultdict

from trendlens.calculators.statistics import average_value
from trendlens.models.trend import MONTH_NAMES_SHORT, SeasonalIndex, TrendPoint


class SeasonalityCalculator:
    """
    Computes a seasonal index per calendar month.

    All observations falling in the same calendar month are pooled across
    years (every January contributes to one January bucket). A month's index
    is its average value as a percentage of the overall series average.
    """

    MIN_POINTS = 12

    def __init__(self, peak_threshold_pct: float = 25):
        self.peak_threshold_pct = peak_threshold_pct

    @property
    def peak_index_threshold(self) -> float:
        """Index at or above which a month is flagged as a peak."""
        return 100 + self.peak_threshold_pct

    def calculate(self, points: list[TrendPoint]) -> list[SeasonalIndex]:
        """
        Calculate the 12 monthly indexes for a full point series.

        Months without observations get index 0. With fewer than 12 points,
        or an overall average that rounds to 0, every month gets index 0.
        """
        if len(points) < self.MIN_POINTS:
            return self._empty()

        overall = average_value(points)
        if overall is None or overall == 0:
            return self._empty()

        buckets: dict[int, list[float]] = defaultdict(list)
        for point in points:
            buckets[point.date.month - 1].append(point.value)

        indexes = []
        for month_number, month_name in enumerate(MONTH_NAMES_SHORT):
            values = buckets.get(month_number)
            if not values:
                indexes.append(SeasonalIndex(month=month_name))
                continue

            month_avg = sum(values) / len(values)
            index = round(month_avg / overall * 100, 1)
            indexes.append(
                SeasonalIndex(
                    month=month_name,
                    index=index,
                    is_peak=index >= self.peak_index_threshold,
                )
            )
        return indexes

    @staticmethod
    def _empty() -> list[SeasonalIndex]:
        return [SeasonalIndex(month=month) for month in MONTH_NAMES_SHORT]


def primary_peak_months(indexes: list[SeasonalIndex]) -> list[str]:
    """
    Months whose index equals the maximum index (ties included).

    Empty when the maximum is 0, i.e. there is no seasonal signal.
    """
    if not indexes:
        return []
    max_index = max(si.index for si in indexes)
    if max_index <= 0:
        return []
    return [si.month for si in indexes if si.index == max_index]
