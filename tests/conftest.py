"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone

import pytest

from trendlens.config import Settings
from trendlens.models.trend import DataSource, KeywordSeries, ReportMetadata
from trendlens.utils.dates import to_timestamp


def month_timestamp(year: int, month: int, offset: int = 0) -> int:
    """Timestamp of the first day of the month `offset` months after (year, month)."""
    total = year * 12 + (month - 1) + offset
    return to_timestamp(date(total // 12, total % 12 + 1, 1))


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        trends_api_url="http://trends.test",
        trends_api_key="test_key",
        gemini_api_key="test_gemini_key",
        gemini_model="gemini-test",
    )


@pytest.fixture
def make_series():
    """Factory for keyword series with one observation per month."""

    def _make(
        keyword: str,
        values: list[float],
        start: tuple[int, int] = (2023, 1),
        rank: int | None = None,
        report_date: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
        source: DataSource = DataSource.CSV,
        with_metadata: bool = True,
    ) -> KeywordSeries:
        year, month = start
        points = {
            month_timestamp(year, month, offset): value
            for offset, value in enumerate(values)
        }
        metadata = (
            [ReportMetadata(rank=rank, report_date=report_date, data_source=source)]
            if with_metadata
            else []
        )
        return KeywordSeries(keyword=keyword, points=points, metadata_entries=metadata)

    return _make


@pytest.fixture
def sample_csv_content() -> str:
    """A small trend report export."""
    return (
        "Pinterest Trends Report,startDate=2023-01-01&endDate=2023-06-30,,,,,,,,,\n"
        "Rank,Trend,Weekly change,Monthly change,Yearly change,"
        "2023-01-01,2023-02-01,2023-03-01,2023-04-01,2023-05-01,2023-06-01\n"
        '1,pumpkin decor,+5%,+20%,+150%,"1,200",1300,1400,1500,1600,1700\n'
        "2,fall nails,-2%,+10%,+80%,50,60,n/a,80,,100\n"
    )


@pytest.fixture
def mock_trends_payload() -> dict:
    """Create a mock trends backend response."""
    return {
        "pumpkin decor": {
            "keyword": "pumpkin decor",
            "pointsMap": {
                str(month_timestamp(2023, 1, i)): 100 + i * 10 for i in range(6)
            },
            "metadataEntries": [
                {
                    "rank": 1,
                    "weeklyChange": "+5%",
                    "monthlyChange": "+12%",
                    "yearlyChange": "+90%",
                    "reportDate": "2023-06-30T00:00:00.000Z",
                    "dataSource": "csv",
                }
            ],
        },
        "linen bedding": {
            "keyword": "linen bedding",
            "pointsMap": {str(month_timestamp(2023, 1, i)): 40 for i in range(6)},
            "metadataEntries": [],
        },
    }


@pytest.fixture
def mock_gemini_response() -> dict:
    """Create a mock Gemini generateContent response."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "## Market Overview\n"},
                        {"text": "Autumn decor is accelerating."},
                    ]
                }
            }
        ]
    }
