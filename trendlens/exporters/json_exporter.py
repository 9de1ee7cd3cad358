"""JSON exporter for store snapshots and trend reports."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from trendlens.models.trend import AnalysisSettings, KeywordTrend, TrendReport, format_metric
from trendlens.pipeline.aggregator import SeriesStore

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT_VERSION = "1.0"


class JSONExporter:
    """
    Export and restore keyword trend data as JSON.

    Supports:
    - Store snapshots (the plain transport shape, round-trips exactly)
    - Trend reports with per-keyword statistics
    """

    def __init__(self, output_dir: str | Path = "data/output"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, filename: str | Path | None, prefix: str, suffix: str) -> Path:
        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{prefix}_{timestamp}.{suffix}"
        path = Path(filename)
        return path if path.is_absolute() else self.output_dir / path

    def save_store(
        self,
        store: SeriesStore,
        filename: str | Path | None = None,
        settings: AnalysisSettings | None = None,
    ) -> Path:
        """
        Write the whole series store to a JSON snapshot.

        Args:
            store: Series store to persist
            filename: Output filename (auto-generated if None)
            settings: Analysis settings to restore together with the store

        Returns:
            Path to the snapshot file
        """
        output_path = self._resolve(filename, "trend_store", "json")
        snapshot: dict[str, Any] = {
            "metadata": {
                "saved_at": datetime.now().isoformat(),
                "total_keywords": len(store),
                "format_version": SNAPSHOT_FORMAT_VERSION,
            },
            "series": store.to_transport(),
        }
        if settings is not None:
            snapshot["settings"] = settings.model_dump()

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved {len(store)} keywords to {output_path}")
        return output_path

    @staticmethod
    def load_snapshot(path: str | Path) -> tuple[SeriesStore, AnalysisSettings | None]:
        """
        Restore a series store and its analysis settings from save_store() output.

        A bare keyword mapping (no metadata wrapper) is also accepted and
        carries no settings.

        Raises:
            ValueError: when the file is not a valid snapshot
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid store snapshot: {path}")

        wrapped = isinstance(data.get("series"), dict)
        series = data["series"] if wrapped else data
        settings_data = data.get("settings") if wrapped else None

        store = SeriesStore.from_transport(series)
        settings = AnalysisSettings.model_validate(settings_data) if settings_data else None
        logger.info(f"Loaded {len(store)} keywords from {path}")
        return store, settings

    @staticmethod
    def load_store(path: str | Path) -> SeriesStore:
        """Restore only the series store from a snapshot."""
        return JSONExporter.load_snapshot(path)[0]

    def export_report(
        self,
        report: TrendReport,
        filename: str | Path | None = None,
        include_points: bool = False,
    ) -> Path:
        """
        Export a trend report with per-keyword statistics.

        Args:
            report: Result of an analytics pass
            filename: Output filename (auto-generated if None)
            include_points: Include full point series and moving averages

        Returns:
            Path to the exported file
        """
        output_path = self._resolve(filename, "trend_report", "json")

        output = {
            "metadata": {
                "exported_at": datetime.now().isoformat(),
                "total_keywords": len(report.trends),
                "analysis_window": (
                    {"start": report.window.start.isoformat(), "end": report.window.end.isoformat()}
                    if report.window
                    else None
                ),
                "latest_data_date": (
                    report.latest_data_date.isoformat() if report.latest_data_date else None
                ),
                "data_source_type": format_metric(report.data_source_type),
                "status_message": report.status_message,
            },
            "peak_month_counts": report.peak_month_counts,
            "trends": [self._to_document(t, include_points) for t in report.trends],
        }

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Exported {len(report.trends)} trends to {output_path}")
        return output_path

    @staticmethod
    def _to_document(trend: KeywordTrend, include_points: bool) -> dict[str, Any]:
        doc = trend.to_summary_dict()
        doc["slope"] = trend.slope
        doc["seasonal_indexes"] = [si.model_dump() for si in trend.seasonal_indexes]
        if include_points:
            doc["points"] = [p.model_dump() for p in trend.all_points]
            doc["moving_average"] = [p.model_dump() for p in trend.moving_average]
        return doc
