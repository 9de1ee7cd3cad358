"""Client for the trends data backend."""

import logging
from typing import Any

from trendlens.clients.base import BaseAPIClient
from trendlens.config import Settings, get_settings
from trendlens.models.trend import DataSource, KeywordSeries

logger = logging.getLogger(__name__)


class TrendsAPIClient(BaseAPIClient):
    """
    Fetches aggregated keyword trend series from the trends backend.

    The backend answers with a mapping of keyword to
    {"keyword", "pointsMap": {"<epoch ms>": value}, "metadataEntries": [...]},
    the same shape the series store persists.
    """

    SOURCE_NAME = "Trends API"
    TRENDS_ENDPOINT = "/api/pinterest-trends"

    def __init__(
        self,
        base_url: str | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        super().__init__(
            base_url=base_url or settings.trends_api_url,
            settings=settings,
        )
        self.api_key = settings.trends_api_key.get_secret_value()

    async def fetch_trends(self, endpoint: str | None = None) -> dict[str, KeywordSeries]:
        """
        Fetch all keyword series from the backend.

        Returns:
            Mapping of keyword to KeywordSeries

        Raises:
            APIError: on HTTP errors
            ValueError: when the payload is not a keyword mapping
        """
        params = {"apiKey": self.api_key} if self.api_key else None
        data = await self.get(endpoint or self.TRENDS_ENDPOINT, params=params)
        series = self.parse_payload(data)
        logger.info(f"Fetched {len(series)} keywords from {self.base_url}")
        return series

    @staticmethod
    def parse_payload(data: Any) -> dict[str, KeywordSeries]:
        """Convert the transport payload into KeywordSeries, skipping bad entries."""
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected trends payload type: {type(data).__name__}")

        series: dict[str, KeywordSeries] = {}
        for keyword, entry in data.items():
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed entry for '{keyword}'")
                continue
            try:
                parsed = KeywordSeries.from_transport(entry, keyword=keyword)
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed entry for '{keyword}': {e}")
                continue

            for meta in parsed.metadata_entries:
                meta.data_source = DataSource.API
            series[parsed.keyword] = parsed

        return series
