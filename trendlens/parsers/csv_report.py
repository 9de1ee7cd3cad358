"""Parser for trend report CSV exports."""

import csv
import io
import logging
import re
from datetime import datetime, timezone

from trendlens.models.trend import (
    PLACEHOLDER_REPORT_DATE,
    DataSource,
    KeywordSeries,
    ReportMetadata,
)
from trendlens.utils.dates import to_timestamp

logger = logging.getLogger(__name__)

REPORT_DATE_PATTERN = re.compile(r"endDate=(\d{4}-\d{2}-\d{2})")
DATE_CELL_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Accepted formats for date column headers
DATE_HEADER_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
)


def parse_header_date(value: str) -> int | None:
    """Parse a column header as a date, returning a UTC-midnight timestamp."""
    text = (value or "").strip()
    if not text:
        return None
    for fmt in DATE_HEADER_FORMATS:
        try:
            return to_timestamp(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def parse_int(value: str | None) -> int | None:
    """Parse an integer cell, ignoring thousands separators."""
    if value is None:
        return None
    text = value.replace(",", "").strip()
    match = re.match(r"^[+-]?\d+", text)
    return int(match.group()) if match else None


class CSVReportParser:
    """
    Parses trend report CSV exports into keyword series.

    Expected layout:
    - First line may carry the report period, e.g. "...endDate=2024-03-31..."
    - A header row containing "Rank", "Trend" and one or more date columns
    - Optional "Weekly change", "Monthly change", "Yearly change" columns
    - One row per keyword, one value per date column

    Malformed cells and rows are skipped. Files without a recognizable header
    row produce no series.
    """

    def extract_report_date(self, content: str, source_name: str = "") -> datetime:
        """Read the report date from the first line, falling back to 1970-01-01."""
        first_line = (content or "").splitlines()[0] if content else ""
        match = REPORT_DATE_PATTERN.search(first_line)
        if match:
            try:
                parsed = datetime.strptime(match.group(1), "%Y-%m-%d")
                return parsed.replace(tzinfo=timezone.utc)
            except ValueError:
                pass

        logger.warning(
            f"Could not find or parse report date in {source_name or 'CSV'} "
            f"starting with: {first_line[:100]}. Using fallback date."
        )
        return PLACEHOLDER_REPORT_DATE

    @staticmethod
    def find_header_row(rows: list[list[str]]) -> int | None:
        """Index of the first row with rank, trend and date-like cells."""
        for index, row in enumerate(rows):
            cells = [(cell or "").strip().lower() for cell in row]
            if (
                "rank" in cells
                and "trend" in cells
                and any(DATE_CELL_PATTERN.search(cell) for cell in cells)
            ):
                return index
        return None

    def parse(self, content: str, source_name: str = "") -> dict[str, KeywordSeries]:
        """
        Parse one CSV report.

        Args:
            content: Raw CSV text
            source_name: Name used in log messages

        Returns:
            Mapping of keyword to KeywordSeries (empty if the file is unusable)
        """
        label = source_name or "CSV"
        report_date = self.extract_report_date(content, source_name)

        try:
            rows = [row for row in csv.reader(io.StringIO(content)) if any(c.strip() for c in row)]
        except csv.Error as e:
            logger.warning(f"{label}: CSV parsing failed: {e}. Skipping file.")
            return {}

        if not rows:
            logger.warning(f"{label}: no data rows. Skipping file.")
            return {}

        header_index = self.find_header_row(rows)
        if header_index is None:
            logger.warning(f"{label}: could not find a valid header row. Skipping file.")
            return {}

        raw_headers = rows[header_index]
        headers = [(h or "").strip().lower() for h in raw_headers]

        def find_column(fragment: str) -> int | None:
            return next((i for i, h in enumerate(headers) if fragment in h), None)

        keyword_col = find_column("trend")
        if keyword_col is None:
            logger.warning(f"{label}: 'Trend' column not found in headers: {', '.join(headers)}. Skipping file.")
            return {}

        rank_col = find_column("rank")
        weekly_col = find_column("weekly change")
        monthly_col = find_column("monthly change")
        yearly_col = find_column("yearly change")
        metadata_cols = {keyword_col, rank_col, weekly_col, monthly_col, yearly_col}

        date_columns: list[tuple[int, int]] = []
        for i, raw in enumerate(raw_headers):
            if i in metadata_cols:
                continue
            timestamp = parse_header_date(raw)
            if timestamp is not None:
                date_columns.append((i, timestamp))

        if not date_columns:
            logger.warning(f"{label}: no valid date columns found. Headers: {', '.join(headers)}")

        def cell(row: list[str], col: int | None) -> str | None:
            if col is None or col >= len(row):
                return None
            return row[col]

        series: dict[str, KeywordSeries] = {}
        skipped_values = 0

        for row in rows[header_index + 1:]:
            keyword = (cell(row, keyword_col) or "").strip()
            if not keyword:
                continue

            entry = series.setdefault(keyword, KeywordSeries(keyword=keyword))
            entry.metadata_entries.append(
                ReportMetadata(
                    rank=parse_int(cell(row, rank_col)),
                    weekly_change=cell(row, weekly_col),
                    monthly_change=cell(row, monthly_col),
                    yearly_change=cell(row, yearly_col),
                    report_date=report_date,
                    data_source=DataSource.CSV,
                )
            )

            for col, timestamp in date_columns:
                raw_value = cell(row, col)
                if raw_value is None or not raw_value.strip():
                    continue
                value = parse_int(raw_value)
                if value is None:
                    skipped_values += 1
                    continue
                entry.points[timestamp] = value

        if skipped_values:
            logger.warning(f"{label}: skipped {skipped_values} non-numeric values")

        logger.info(f"{label}: parsed {len(series)} keywords across {len(date_columns)} dates")
        return series

