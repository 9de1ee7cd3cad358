"""Pydantic models for keyword trend series and derived analytics."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trendlens.utils.dates import EPOCH, ensure_utc, from_timestamp

MONTH_NAMES_SHORT = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

NOT_APPLICABLE = "N/A"

# Used when a series has no report metadata at all
PLACEHOLDER_REPORT_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DataSource(str, Enum):
    """Origin of a single ingested report."""

    CSV = "csv"
    API = "api"


class SeriesSource(str, Enum):
    """Origin of a keyword series, or of the whole store."""

    CSV = "csv"
    API = "api"
    MIXED = "mixed"


class TrendDirection(str, Enum):
    """Direction of the windowed linear trend."""

    UPWARD = "upward"
    DOWNWARD = "downward"
    FLAT = "flat"


class Momentum(str, Enum):
    """Short-term momentum (last 3 points vs the 3 before)."""

    GAINING = "gaining"
    FADING = "fading"
    STABLE = "stable"


def format_metric(value: Any) -> str:
    """Render a metric for display, using N/A for unknown values."""
    if value is None:
        return NOT_APPLICABLE
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class TrendPoint(BaseModel):
    """A single observation: epoch-millisecond UTC-midnight timestamp and value."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    value: float

    @property
    def date(self) -> datetime:
        """Observation date as an aware UTC datetime."""
        return from_timestamp(self.timestamp)


class ReportMetadata(BaseModel):
    """Per-report, per-keyword metadata. One entry per ingested report row."""

    rank: int | None = Field(default=None, description="Rank within the report")
    weekly_change: str | None = Field(default=None, description="Weekly change as displayed")
    monthly_change: str | None = Field(default=None, description="Monthly change as displayed")
    yearly_change: str | None = Field(default=None, description="Yearly change as displayed")
    report_date: datetime = Field(description="Date the report was generated")
    data_source: DataSource = Field(default=DataSource.CSV)

    @field_validator("report_date")
    @classmethod
    def normalize_report_date(cls, v: datetime) -> datetime:
        """Store report dates as aware UTC datetimes."""
        return ensure_utc(v)

    def to_transport(self) -> dict[str, Any]:
        """Serialize to the plain-JSON transport shape."""
        data: dict[str, Any] = {}
        if self.rank is not None:
            data["rank"] = self.rank
        if self.weekly_change is not None:
            data["weeklyChange"] = self.weekly_change
        if self.monthly_change is not None:
            data["monthlyChange"] = self.monthly_change
        if self.yearly_change is not None:
            data["yearlyChange"] = self.yearly_change
        data["reportDate"] = self.report_date.isoformat()
        data["dataSource"] = self.data_source.value
        return data

    @classmethod
    def from_transport(cls, data: dict[str, Any]) -> "ReportMetadata":
        """
        Build from the plain-JSON transport shape.

        Raises:
            ValueError: when the entry has no reportDate
        """
        report_date = data.get("reportDate")
        if report_date is None:
            raise ValueError("Report metadata entry has no reportDate")
        if isinstance(report_date, str):
            report_date = datetime.fromisoformat(report_date.replace("Z", "+00:00"))
        return cls(
            rank=data.get("rank"),
            weekly_change=data.get("weeklyChange"),
            monthly_change=data.get("monthlyChange"),
            yearly_change=data.get("yearlyChange"),
            report_date=report_date,
            data_source=data.get("dataSource", DataSource.CSV),
        )


class KeywordSeries(BaseModel):
    """
    Full accumulated history and metadata log for one keyword.

    `points` maps timestamp to value, so a timestamp can only appear once.
    `metadata_entries` is append-only.
    """

    keyword: str
    points: dict[int, float] = Field(default_factory=dict)
    metadata_entries: list[ReportMetadata] = Field(default_factory=list)

    def sorted_points(self) -> list[TrendPoint]:
        """Get all points ordered by timestamp."""
        return [
            TrendPoint(timestamp=ts, value=value)
            for ts, value in sorted(self.points.items())
        ]

    @property
    def latest_timestamp(self) -> int | None:
        """Timestamp of the most recent observation."""
        return max(self.points) if self.points else None

    @property
    def data_source(self) -> SeriesSource:
        """Series source derived from the metadata log."""
        sources = {entry.data_source for entry in self.metadata_entries}
        if DataSource.API in sources and DataSource.CSV in sources:
            return SeriesSource.MIXED
        if DataSource.API in sources:
            return SeriesSource.API
        return SeriesSource.CSV

    @property
    def latest_metadata(self) -> ReportMetadata:
        """
        Metadata entry with the latest report date.

        Ties keep the entry that appears first in the log.
        """
        if not self.metadata_entries:
            source = DataSource.API if self.data_source == SeriesSource.API else DataSource.CSV
            return ReportMetadata(report_date=PLACEHOLDER_REPORT_DATE, data_source=source)

        latest = self.metadata_entries[0]
        for entry in self.metadata_entries[1:]:
            if entry.report_date > latest.report_date:
                latest = entry
        return latest

    def to_transport(self) -> dict[str, Any]:
        """Serialize to plain nested dicts/lists/strings for storage or transport."""
        return {
            "keyword": self.keyword,
            "pointsMap": {str(ts): value for ts, value in self.points.items()},
            "metadataEntries": [entry.to_transport() for entry in self.metadata_entries],
        }

    @classmethod
    def from_transport(cls, data: dict[str, Any], keyword: str | None = None) -> "KeywordSeries":
        """Build from the transport shape produced by to_transport()."""
        return cls(
            keyword=data.get("keyword") or keyword or "",
            points={int(ts): value for ts, value in data.get("pointsMap", {}).items()},
            metadata_entries=[
                ReportMetadata.from_transport(entry)
                for entry in data.get("metadataEntries", [])
            ],
        )


class SeasonalIndex(BaseModel):
    """Average value of a calendar month as a percentage of the series average."""

    month: str
    index: float = 0.0
    is_peak: bool = False

    @property
    def has_signal(self) -> bool:
        """A zero index means the month has no seasonal data."""
        return self.index > 0

    @property
    def display_index(self) -> str:
        return f"{self.index:.1f}" if self.has_signal else NOT_APPLICABLE


class AnalysisWindow(BaseModel):
    """Inclusive date interval that windowed statistics are computed over."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def start_timestamp(self) -> int:
        return (self.start - EPOCH) // timedelta(milliseconds=1)

    @property
    def end_timestamp(self) -> int:
        return (self.end - EPOCH) // timedelta(milliseconds=1)

    def contains(self, timestamp: int) -> bool:
        """Check whether a timestamp falls inside the window (both ends inclusive)."""
        return self.start_timestamp <= timestamp <= self.end_timestamp


class AnalysisSettings(BaseModel):
    """Thresholds and window sizes that drive an analytics pass."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    analysis_window_months: int = Field(default=24, ge=6, le=60)
    moving_average_window_points: int = Field(default=3, ge=2, le=10)
    seasonal_peak_threshold_pct: float = Field(default=25, ge=5, le=100)
    volatility_cv_threshold_pct: float = Field(default=35, ge=10, le=100)


class KeywordTrend(BaseModel):
    """Display-ready analytics for one keyword. Recomputed on every pass."""

    keyword: str
    all_points: list[TrendPoint] = Field(default_factory=list)
    points_in_window: list[TrendPoint] = Field(default_factory=list)
    latest_metadata: ReportMetadata
    data_source: SeriesSource = SeriesSource.CSV
    moving_average: list[TrendPoint] = Field(default_factory=list)

    # Windowed statistics; None means not applicable
    slope: float | None = None
    trend_direction: TrendDirection | None = None
    volatility: float | None = Field(default=None, description="Coefficient of variation (%)")
    recent_momentum: Momentum | None = None
    trend_category: str = "Insufficient Data"
    average_value: float | None = None

    # Full-series seasonality
    seasonal_indexes: list[SeasonalIndex] = Field(default_factory=list)
    primary_peak_months: list[str] = Field(default_factory=list)

    @property
    def rank(self) -> int | None:
        return self.latest_metadata.rank

    def to_summary_dict(self) -> dict[str, Any]:
        """Flat summary used by exporters and the summarization prompt."""
        return {
            "keyword": self.keyword,
            "rank": self.rank,
            "category": self.trend_category,
            "trend_direction": format_metric(self.trend_direction),
            "momentum": format_metric(self.recent_momentum),
            "average_value": format_metric(self.average_value),
            "volatility": format_metric(self.volatility),
            "primary_peak_months": self.primary_peak_months,
            "data_source": self.data_source.value,
            "points_total": len(self.all_points),
            "points_in_window": len(self.points_in_window),
            "report_date": self.latest_metadata.report_date.isoformat(),
        }


class TrendReport(BaseModel):
    """Output of one analytics pass over the whole store."""

    trends: list[KeywordTrend] = Field(default_factory=list)
    peak_month_counts: dict[str, int] = Field(
        default_factory=lambda: {month: 0 for month in MONTH_NAMES_SHORT}
    )
    window: AnalysisWindow | None = None
    latest_data_date: datetime | None = None
    data_source_type: SeriesSource | None = None
    status_message: str | None = Field(
        default=None, description="Informational empty-state message"
    )

    @property
    def is_empty(self) -> bool:
        return not self.trends
