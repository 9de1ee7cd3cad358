"""Parsers for ingested trend reports."""

from trendlens.parsers.csv_report import CSVReportParser

__all__ = ["CSVReportParser"]
