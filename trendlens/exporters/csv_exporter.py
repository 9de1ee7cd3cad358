"""CSV exporter for trend analytics."""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from trendlens.models.trend import MONTH_NAMES_SHORT, KeywordTrend, format_metric

logger = logging.getLogger(__name__)


class CSVExporter:
    """
    Export trend analytics to CSV for spreadsheet use.

    Supports:
    - One row per keyword with all windowed statistics and seasonal indexes
    - Peak-month tally
    """

    COLUMNS = [
        "keyword",
        "rank",
        "trend_category",
        "trend_direction",
        "momentum",
        "average_value",
        "volatility_cv",
        "slope",
        "primary_peak_months",
        "data_source",
        "points_total",
        "points_in_window",
        "weekly_change",
        "monthly_change",
        "yearly_change",
        "report_date",
    ] + [f"seasonal_{month.lower()}" for month in MONTH_NAMES_SHORT]

    def __init__(self, output_dir: str | Path = "data/output"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, filename: str | Path | None, prefix: str) -> Path:
        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{prefix}_{timestamp}.csv"
        path = Path(filename)
        return path if path.is_absolute() else self.output_dir / path

    def export_trends(
        self,
        trends: list[KeywordTrend],
        filename: str | Path | None = None,
    ) -> Path:
        """
        Export per-keyword statistics.

        Unknown metrics are written as "N/A", never as 0.

        Args:
            trends: Trend records (already sorted/filtered)
            filename: Output filename (auto-generated if None)

        Returns:
            Path to the exported file
        """
        output_path = self._resolve(filename, "trends")

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=self.COLUMNS)
            writer.writeheader()
            for trend in trends:
                writer.writerow(self._to_row(trend))

        logger.info(f"Exported {len(trends)} trends to {output_path}")
        return output_path

    def export_peak_counts(
        self,
        counts: dict[str, int],
        filename: str | Path | None = None,
    ) -> Path:
        """Export the month -> peaking keyword count tally."""
        output_path = self._resolve(filename, "peak_months")

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["month", "peaking_keywords"])
            for month in MONTH_NAMES_SHORT:
                writer.writerow([month, counts.get(month, 0)])

        logger.info(f"Exported peak-month counts to {output_path}")
        return output_path

    def _to_row(self, trend: KeywordTrend) -> dict[str, Any]:
        meta = trend.latest_metadata
        row = {
            "keyword": trend.keyword,
            "rank": meta.rank if meta.rank is not None else "",
            "trend_category": trend.trend_category,
            "trend_direction": format_metric(trend.trend_direction),
            "momentum": format_metric(trend.recent_momentum),
            "average_value": format_metric(trend.average_value),
            "volatility_cv": format_metric(trend.volatility),
            "slope": format_metric(round(trend.slope, 4) if trend.slope is not None else None),
            "primary_peak_months": "|".join(trend.primary_peak_months),
            "data_source": trend.data_source.value,
            "points_total": len(trend.all_points),
            "points_in_window": len(trend.points_in_window),
            "weekly_change": meta.weekly_change or "",
            "monthly_change": meta.monthly_change or "",
            "yearly_change": meta.yearly_change or "",
            "report_date": meta.report_date.date().isoformat(),
        }
        for si in trend.seasonal_indexes:
            row[f"seasonal_{si.month.lower()}"] = si.display_index
        return row
