"""Aggregation and analytics pipeline."""

from trendlens.pipeline.aggregator import SeriesStore, latest_timestamp, merge_series
from trendlens.pipeline.peaks import count_peak_months, filter_by_keyword, filter_by_peak_month
from trendlens.pipeline.trend_pipeline import (
    IngestionError,
    IngestionResult,
    TrendPipeline,
    build_keyword_trend,
    project_trends,
)
from trendlens.pipeline.window import compute_analysis_window, filter_points

__all__ = [
    "SeriesStore",
    "latest_timestamp",
    "merge_series",
    "count_peak_months",
    "filter_by_keyword",
    "filter_by_peak_month",
    "IngestionError",
    "IngestionResult",
    "TrendPipeline",
    "build_keyword_trend",
    "project_trends",
    "compute_analysis_window",
    "filter_points",
]
