"""Keyword series store and merge semantics."""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from trendlens.models.trend import KeywordSeries, SeriesSource

logger = logging.getLogger(__name__)

SeriesMap = dict[str, KeywordSeries]


def merge_series(
    existing: Mapping[str, KeywordSeries] | None,
    incoming: Mapping[str, KeywordSeries],
) -> SeriesMap:
    """
    Merge incoming keyword series into an existing store state.

    Points are unioned with incoming values winning on timestamp collisions.
    Metadata entries are appended, never replaced or deduplicated, so
    re-ingesting the same report grows the metadata log.

    Neither argument is modified; the merged state is returned as a new
    mapping of deep copies.
    """
    result: SeriesMap = {
        keyword: series.model_copy(deep=True)
        for keyword, series in (existing or {}).items()
    }

    for keyword, new_series in incoming.items():
        current = result.get(keyword)
        if current is None:
            result[keyword] = new_series.model_copy(deep=True)
            continue

        current.points.update(new_series.points)
        current.metadata_entries.extend(
            entry.model_copy() for entry in new_series.metadata_entries
        )

    return result


def latest_timestamp(series_map: Mapping[str, KeywordSeries]) -> int | None:
    """Most recent observation timestamp across all keywords."""
    latest = None
    for series in series_map.values():
        ts = series.latest_timestamp
        if ts is not None and (latest is None or ts > latest):
            latest = ts
    return latest


def store_source_type(series_map: Mapping[str, KeywordSeries]) -> SeriesSource | None:
    """Overall source of the store: csv, api, mixed, or None when empty."""
    if not series_map:
        return None
    sources = {series.data_source for series in series_map.values()}
    if SeriesSource.MIXED in sources or {SeriesSource.CSV, SeriesSource.API} <= sources:
        return SeriesSource.MIXED
    if SeriesSource.API in sources:
        return SeriesSource.API
    return SeriesSource.CSV


class SeriesStore:
    """
    Holds the current keyword series state.

    The only writer is merge(); every analytics component reads the
    `series` snapshot. `version` increases on every change so callers can
    invalidate cached results.
    """

    def __init__(self, series: Mapping[str, KeywordSeries] | None = None):
        self._series: SeriesMap = merge_series(None, series or {})
        self.version = 0

    def __len__(self) -> int:
        return len(self._series)

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._series

    @property
    def series(self) -> Mapping[str, KeywordSeries]:
        """Read-only snapshot of the current state; changes to it never reach the store."""
        return MappingProxyType(
            {keyword: series.model_copy(deep=True) for keyword, series in self._series.items()}
        )

    @property
    def latest_timestamp(self) -> int | None:
        return latest_timestamp(self._series)

    @property
    def source_type(self) -> SeriesSource | None:
        return store_source_type(self._series)

    def merge(self, incoming: Mapping[str, KeywordSeries]) -> None:
        """Merge new observations and metadata into the store."""
        if not incoming:
            return
        self._series = merge_series(self._series, incoming)
        self.version += 1
        logger.info(
            f"Merged {len(incoming)} keywords; store now holds {len(self._series)} keywords"
        )

    def clear(self) -> None:
        """Discard all series."""
        self._series = {}
        self.version += 1
        logger.info("Series store cleared")

    def to_transport(self) -> dict[str, Any]:
        """Serialize the whole store to plain nested dicts/lists/strings."""
        return {keyword: series.to_transport() for keyword, series in self._series.items()}

    @classmethod
    def from_transport(cls, data: Mapping[str, Any]) -> "SeriesStore":
        """
        Rebuild a store from to_transport() output.

        Raises:
            ValueError: when an entry is not a keyword series mapping
        """
        for keyword, entry in data.items():
            if not isinstance(entry, Mapping):
                raise ValueError(f"Invalid series entry for '{keyword}'")
        return cls(
            {
                keyword: KeywordSeries.from_transport(entry, keyword=keyword)
                for keyword, entry in data.items()
            }
        )
