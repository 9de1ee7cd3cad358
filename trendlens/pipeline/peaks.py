"""Peak-month tally and trend filters."""

from trendlens.models.trend import MONTH_NAMES_SHORT, KeywordTrend


def count_peak_months(trends: list[KeywordTrend]) -> dict[str, int]:
    """Count, per calendar month, how many keywords list it as a primary peak month."""
    counts = {month: 0 for month in MONTH_NAMES_SHORT}
    for trend in trends:
        for month in trend.primary_peak_months:
            if month in counts:
                counts[month] += 1
    return counts


def filter_by_peak_month(trends: list[KeywordTrend], month: str | None) -> list[KeywordTrend]:
    """Keep keywords whose primary peak months include `month`."""
    if not month:
        return list(trends)
    return [t for t in trends if month in t.primary_peak_months]


def filter_by_keyword(trends: list[KeywordTrend], term: str | None) -> list[KeywordTrend]:
    """Case-insensitive substring search on the keyword."""
    if not term:
        return list(trends)
    needle = term.lower()
    return [t for t in trends if needle in t.keyword.lower()]
