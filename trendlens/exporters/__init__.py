"""Exporters for trend data in various formats."""

from trendlens.exporters.csv_exporter import CSVExporter
from trendlens.exporters.json_exporter import JSONExporter

__all__ = ["JSONExporter", "CSVExporter"]
