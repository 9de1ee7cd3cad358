"""Trend projection pipeline: store -> window -> statistics -> sorted records."""

import logging
import math
from collections.abc import Iterable, Mapping
from pathlib import Path

import httpx
from pydantic import BaseModel, Field

from trendlens.calculators.categories import TrendCategorizer
from trendlens.calculators.seasonality import SeasonalityCalculator, primary_peak_months
from trendlens.calculators.statistics import (
    average_value,
    coefficient_of_variation,
    linear_regression_slope,
    moving_average,
    recent_momentum,
    trend_direction,
)
from trendlens.clients.base import APIError
from trendlens.clients.trends_api import TrendsAPIClient
from trendlens.config import Settings, get_settings
from trendlens.models.trend import (
    AnalysisSettings,
    AnalysisWindow,
    KeywordSeries,
    KeywordTrend,
    TrendReport,
)
from trendlens.parsers.csv_report import CSVReportParser
from trendlens.pipeline.aggregator import SeriesStore, merge_series
from trendlens.pipeline.peaks import count_peak_months
from trendlens.pipeline.window import compute_analysis_window, filter_points
from trendlens.utils.dates import from_timestamp

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when a data source cannot be ingested."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class IngestionResult(BaseModel):
    """Outcome of ingesting one batch of sources."""

    sources_loaded: list[str] = Field(default_factory=list)
    sources_failed: dict[str, str] = Field(
        default_factory=dict, description="Source name -> reason"
    )
    keywords_merged: int = 0

    @property
    def partial(self) -> bool:
        return bool(self.sources_loaded) and bool(self.sources_failed)


def build_keyword_trend(
    series: KeywordSeries,
    window: AnalysisWindow | None,
    settings: AnalysisSettings,
    categorizer: TrendCategorizer | None = None,
    seasonality: SeasonalityCalculator | None = None,
) -> KeywordTrend:
    """
    Compute the derived trend record for one keyword.

    Slope, volatility, momentum, category and average use the points inside
    the window; moving average and seasonality use the full series.
    """
    categorizer = categorizer or TrendCategorizer(settings.volatility_cv_threshold_pct)
    seasonality = seasonality or SeasonalityCalculator(settings.seasonal_peak_threshold_pct)

    all_points = series.sorted_points()
    windowed = filter_points(all_points, window)

    slope = linear_regression_slope(windowed)
    cv = coefficient_of_variation(windowed)
    momentum = recent_momentum(windowed)
    seasonal_indexes = seasonality.calculate(all_points)

    return KeywordTrend(
        keyword=series.keyword,
        all_points=all_points,
        points_in_window=windowed,
        latest_metadata=series.latest_metadata,
        data_source=series.data_source,
        moving_average=moving_average(all_points, settings.moving_average_window_points),
        slope=slope,
        trend_direction=trend_direction(slope),
        volatility=cv,
        recent_momentum=momentum,
        trend_category=categorizer.categorize(slope, momentum, cv),
        average_value=average_value(windowed),
        seasonal_indexes=seasonal_indexes,
        primary_peak_months=primary_peak_months(seasonal_indexes),
    )


def trend_sort_key(trend: KeywordTrend) -> tuple[float, str, str]:
    """Rank ascending with unranked keywords last, then case-insensitive keyword order."""
    rank = trend.rank if trend.rank is not None else math.inf
    return (rank, trend.keyword.casefold(), trend.keyword)


def project_trends(
    series_map: Mapping[str, KeywordSeries],
    window: AnalysisWindow | None,
    settings: AnalysisSettings,
) -> list[KeywordTrend]:
    """Build and sort trend records for every keyword with at least one point."""
    categorizer = TrendCategorizer(settings.volatility_cv_threshold_pct)
    seasonality = SeasonalityCalculator(settings.seasonal_peak_threshold_pct)

    trends = [
        build_keyword_trend(series, window, settings, categorizer, seasonality)
        for series in series_map.values()
        if series.points
    ]
    return sorted(trends, key=trend_sort_key)


class TrendPipeline:
    """
    Orchestrates ingestion and analytics over a single series store.

    Flow:
    1. Ingest CSV reports or API data (failures are isolated per source)
    2. Merge into the series store
    3. Compute the analysis window from the latest observation
    4. Project per-keyword trend records and the peak-month tally

    analyze() recomputes everything, and the result is cached until the
    store or the analysis settings change.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        analysis_settings: AnalysisSettings | None = None,
        store: SeriesStore | None = None,
        csv_parser: CSVReportParser | None = None,
    ):
        self.settings = settings or get_settings()
        self.analysis_settings = analysis_settings or self.settings.analysis_settings
        self.store = store if store is not None else SeriesStore()
        self.csv_parser = csv_parser or CSVReportParser()

        self._cache_key: tuple[int, AnalysisSettings] | None = None
        self._cached_report: TrendReport | None = None

    def ingest(self, incoming: Mapping[str, KeywordSeries]) -> int:
        """Merge already-parsed series into the store. Returns keyword count."""
        self.store.merge(incoming)
        return len(incoming)

    def ingest_csv_contents(self, contents: Mapping[str, str]) -> IngestionResult:
        """
        Parse and merge CSV report contents.

        Args:
            contents: Source name -> raw CSV text

        Returns:
            IngestionResult listing loaded and failed sources
        """
        result = IngestionResult()
        combined: dict[str, KeywordSeries] = {}

        for name, content in contents.items():
            if not content.strip():
                logger.warning(f"CSV source '{name}' is empty, skipping")
                result.sources_failed[name] = "empty file"
                continue

            parsed = self.csv_parser.parse(content, source_name=name)
            if not parsed:
                result.sources_failed[name] = "no trend rows found"
                continue

            combined = merge_series(combined, parsed)
            result.sources_loaded.append(name)

        result.keywords_merged = self.ingest(combined)
        return result

    def ingest_csv_files(self, paths: Iterable[str | Path]) -> IngestionResult:
        """Read CSV files and merge them. Unreadable files do not affect the others."""
        contents: dict[str, str] = {}
        failed: dict[str, str] = {}

        for path in map(Path, paths):
            try:
                contents[path.name] = path.read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Error reading file {path}: {e}")
                failed[path.name] = f"unreadable: {e}"

        result = self.ingest_csv_contents(contents)
        result.sources_failed.update(failed)
        return result

    async def ingest_from_api(self, client: TrendsAPIClient | None = None) -> IngestionResult:
        """
        Fetch series from the trends backend and merge them.

        Raises:
            IngestionError: when the fetch fails; the store is left untouched
        """
        owns_client = client is None
        client = client or TrendsAPIClient(settings=self.settings)
        source = TrendsAPIClient.SOURCE_NAME

        try:
            incoming = await client.fetch_trends()
        except (APIError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch or process API data: {e}")
            raise IngestionError(f"Failed to fetch or process API data. {e}", source=source) from e
        finally:
            if owns_client:
                await client.close()

        keywords = self.ingest(incoming)
        return IngestionResult(sources_loaded=[source], keywords_merged=keywords)

    def update_settings(self, **changes: float | int) -> AnalysisSettings:
        """Validate and apply new analysis settings; forces a recompute."""
        self.analysis_settings = AnalysisSettings.model_validate(
            {**self.analysis_settings.model_dump(), **changes}
        )
        return self.analysis_settings

    def clear(self) -> None:
        self.store.clear()

    def current_window(self) -> AnalysisWindow | None:
        return compute_analysis_window(
            self.store.latest_timestamp,
            self.analysis_settings.analysis_window_months,
        )

    def analyze(self) -> TrendReport:
        """
        Run a full analytics pass, or reuse the cached one.

        Every call returns a fresh copy, so callers may modify the report
        without affecting later results.
        """
        cache_key = (self.store.version, self.analysis_settings)
        if self._cached_report is None or self._cache_key != cache_key:
            self._cached_report = self._build_report()
            self._cache_key = cache_key
        return self._cached_report.model_copy(deep=True)

    def _build_report(self) -> TrendReport:
        series_map = self.store.series
        if not series_map:
            return TrendReport(status_message="No trend data loaded. Upload CSV reports or fetch API data.")

        latest = self.store.latest_timestamp
        window = self.current_window()
        trends = project_trends(series_map, window, self.analysis_settings)

        logger.info(f"Analyzed {len(trends)} keywords")

        return TrendReport(
            trends=trends,
            peak_month_counts=count_peak_months(trends),
            window=window,
            latest_data_date=from_timestamp(latest) if latest is not None else None,
            data_source_type=self.store.source_type,
            status_message=self._status_message(trends, window),
        )

    def _status_message(
        self,
        trends: list[KeywordTrend],
        window: AnalysisWindow | None,
    ) -> str | None:
        if not trends:
            return "No data points to display. Check data or analysis window."
        if window is not None and not any(t.points_in_window for t in trends):
            months = self.analysis_settings.analysis_window_months
            return (
                f"No trend data found within the calculated {months}-month analysis window "
                "for any keyword. Loaded data might be outside this range."
            )
        return None
