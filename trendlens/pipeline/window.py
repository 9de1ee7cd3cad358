"""Analysis window selection."""

import calendar
from datetime import datetime, timezone

from trendlens.models.trend import AnalysisWindow, TrendPoint
from trendlens.utils.dates import ensure_utc, from_timestamp


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by delta calendar months."""
    total = year * 12 + (month - 1) + delta
    return total // 12, total % 12 + 1


def compute_analysis_window(
    latest: datetime | int | None,
    window_months: int,
) -> AnalysisWindow | None:
    """
    Compute the inclusive analysis interval.

    The window ends at the last millisecond of the month containing `latest`
    and starts at the first instant of the month (window_months - 1) months
    earlier. Returns None when no latest date is known.

    Example: latest 2024-03-15, 24 months -> 2022-04-01T00:00:00.000Z to
    2024-03-31T23:59:59.999Z.
    """
    if latest is None:
        return None

    latest_dt = from_timestamp(latest) if isinstance(latest, int) else ensure_utc(latest)

    last_day = calendar.monthrange(latest_dt.year, latest_dt.month)[1]
    end = datetime(
        latest_dt.year, latest_dt.month, last_day, 23, 59, 59, 999000, tzinfo=timezone.utc
    )

    start_year, start_month = _shift_month(latest_dt.year, latest_dt.month, -(window_months - 1))
    start = datetime(start_year, start_month, 1, tzinfo=timezone.utc)

    return AnalysisWindow(start=start, end=end)


def filter_points(points: list[TrendPoint], window: AnalysisWindow | None) -> list[TrendPoint]:
    """Points inside the window; all points when there is no window."""
    if window is None:
        return list(points)
    return [p for p in points if window.contains(p.timestamp)]
