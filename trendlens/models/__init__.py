"""Data models for keyword trend analytics."""

from trendlens.models.trend import (
    MONTH_NAMES_SHORT,
    AnalysisSettings,
    AnalysisWindow,
    DataSource,
    KeywordSeries,
    KeywordTrend,
    Momentum,
    ReportMetadata,
    SeasonalIndex,
    SeriesSource,
    TrendDirection,
    TrendPoint,
    TrendReport,
)

__all__ = [
    "MONTH_NAMES_SHORT",
    "AnalysisSettings",
    "AnalysisWindow",
    "DataSource",
    "KeywordSeries",
    "KeywordTrend",
    "Momentum",
    "ReportMetadata",
    "SeasonalIndex",
    "SeriesSource",
    "TrendDirection",
    "TrendPoint",
    "TrendReport",
]
