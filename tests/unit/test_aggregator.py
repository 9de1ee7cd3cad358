"""Tests for series merging and the series store."""

from datetime import date, datetime, timezone

import pytest

from trendlens.models.trend import DataSource, KeywordSeries, ReportMetadata, SeriesSource
from trendlens.pipeline.aggregator import (
    SeriesStore,
    latest_timestamp,
    merge_series,
    store_source_type,
)
from trendlens.utils.dates import to_timestamp


@pytest.fixture
def report_a(make_series):
    """January-June report."""
    return {
        "pumpkin decor": make_series(
            "pumpkin decor",
            [10, 20, 30, 40, 50, 60],
            start=(2023, 1),
            rank=5,
            report_date=datetime(2023, 6, 30, tzinfo=timezone.utc),
        )
    }


@pytest.fixture
def report_b(make_series):
    """April-September report overlapping report A."""
    return {
        "pumpkin decor": make_series(
            "pumpkin decor",
            [45, 55, 65, 75, 85, 95],
            start=(2023, 4),
            rank=2,
            report_date=datetime(2023, 9, 30, tzinfo=timezone.utc),
        )
    }


class TestMergeSeries:
    """Tests for merge_series."""

    def test_overlapping_reports(self, report_a, report_b):
        merged = merge_series(report_a, report_b)
        series = merged["pumpkin decor"]

        assert len(series.points) == 9
        assert series.points[to_timestamp(date(2023, 1, 1))] == 10
        assert series.points[to_timestamp(date(2023, 4, 1))] == 45
        assert series.points[to_timestamp(date(2023, 6, 1))] == 65
        assert series.points[to_timestamp(date(2023, 9, 1))] == 95
        assert len(series.metadata_entries) == 2
        assert series.latest_metadata.rank == 2

    def test_incoming_wins_on_collision(self, report_a, report_b):
        merged = merge_series(report_b, report_a)
        assert merged["pumpkin decor"].points[to_timestamp(date(2023, 4, 1))] == 40

    def test_inputs_not_modified(self, report_a, report_b):
        merge_series(report_a, report_b)

        assert len(report_a["pumpkin decor"].points) == 6
        assert len(report_a["pumpkin decor"].metadata_entries) == 1

    def test_remerge_keeps_points_but_grows_metadata(self, report_a, report_b):
        once = merge_series(report_a, report_b)
        twice = merge_series(once, report_b)

        assert twice["pumpkin decor"].points == once["pumpkin decor"].points
        assert len(twice["pumpkin decor"].metadata_entries) == 3

    def test_new_keyword_added(self, report_a, make_series):
        merged = merge_series(report_a, {"linen bedding": make_series("linen bedding", [1, 2])})
        assert set(merged) == {"pumpkin decor", "linen bedding"}

    def test_empty_existing(self, report_a):
        merged = merge_series(None, report_a)
        assert merged["pumpkin decor"] == report_a["pumpkin decor"]
        assert merged["pumpkin decor"] is not report_a["pumpkin decor"]


class TestStoreHelpers:
    """Tests for store-wide helpers."""

    def test_latest_timestamp(self, report_a, report_b):
        merged = merge_series(report_a, report_b)
        assert latest_timestamp(merged) == to_timestamp(date(2023, 9, 1))
        assert latest_timestamp({}) is None

    def test_source_type(self, make_series):
        csv_series = make_series("a", [1], source=DataSource.CSV)
        api_series = make_series("b", [1], source=DataSource.API)

        assert store_source_type({}) is None
        assert store_source_type({"a": csv_series}) == SeriesSource.CSV
        assert store_source_type({"b": api_series}) == SeriesSource.API
        assert store_source_type({"a": csv_series, "b": api_series}) == SeriesSource.MIXED


class TestSeriesStore:
    """Tests for SeriesStore."""

    def test_merge_bumps_version(self, report_a, report_b):
        store = SeriesStore()
        store.merge(report_a)
        store.merge(report_b)

        assert store.version == 2
        assert len(store) == 1
        assert "pumpkin decor" in store
        assert len(store.series["pumpkin decor"].points) == 9

    def test_empty_merge_is_noop(self):
        store = SeriesStore()
        store.merge({})
        assert store.version == 0

    def test_series_view_is_read_only(self, report_a):
        store = SeriesStore(report_a)
        with pytest.raises(TypeError):
            store.series["other"] = KeywordSeries(keyword="other")

    def test_series_snapshot_changes_do_not_reach_store(self, report_a):
        store = SeriesStore(report_a)
        before = store.series["pumpkin decor"]
        latest = store.latest_timestamp

        snapshot = store.series["pumpkin decor"]
        snapshot.points[to_timestamp(date(2030, 1, 1))] = 999
        snapshot.metadata_entries.clear()

        assert store.series["pumpkin decor"] == before
        assert store.latest_timestamp == latest
        assert store.version == 0

    def test_clear(self, report_a):
        store = SeriesStore(report_a)
        store.clear()

        assert len(store) == 0
        assert store.version == 1
        assert store.latest_timestamp is None
        assert store.source_type is None

    def test_transport_round_trip(self, report_a, make_series):
        store = SeriesStore(report_a)
        store.merge({"linen bedding": make_series("linen bedding", [3, 4], source=DataSource.API)})

        restored = SeriesStore.from_transport(store.to_transport())

        assert restored.to_transport() == store.to_transport()
        assert restored.source_type == SeriesSource.MIXED

    def test_metadata_only_series(self):
        """Test a keyword with metadata but no points."""
        store = SeriesStore(
            {
                "k": KeywordSeries(
                    keyword="k",
                    metadata_entries=[ReportMetadata(report_date=datetime(2024, 1, 1))],
                )
            }
        )
        assert store.latest_timestamp is None
