#!/usr/bin/env python3
"""
CLI to ingest trend reports and run the analytics pass.

Usage:
    python scripts/run_analysis.py --csv data/report_jan.csv --csv data/report_feb.csv
    python scripts/run_analysis.py --load data/store.json --fetch-api --save data/store.json
    python scripts/run_analysis.py --load data/store.json --peak-month Oct --export-csv trends.csv
    python scripts/run_analysis.py --load data/store.json --summarize --advanced
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trendlens.config import get_settings
from trendlens.exporters import CSVExporter, JSONExporter
from trendlens.models.trend import MONTH_NAMES_SHORT, KeywordTrend, TrendReport, format_metric
from trendlens.pipeline import (
    IngestionError,
    IngestionResult,
    TrendPipeline,
    filter_by_keyword,
    filter_by_peak_month,
)
from trendlens.services.summary import TrendSummaryService
from trendlens.utils.logging import setup_logging

console = Console()
logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--csv", "csv_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Trend report CSV export (repeatable)",
)
@click.option("--fetch-api", is_flag=True, help="Fetch series from the trends backend")
@click.option("--api-url", type=str, default=None, help="Override the trends backend URL")
@click.option(
    "--load",
    "load_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Load a saved store snapshot before ingesting",
)
@click.option("--save", "save_path", type=click.Path(path_type=Path), help="Save the store snapshot")
@click.option("--window-months", type=int, default=None, help="Analysis window in months (6-60)")
@click.option("--ma-window", type=int, default=None, help="Moving average window in points (2-10)")
@click.option("--peak-threshold", type=float, default=None, help="Seasonal peak threshold %% (5-100)")
@click.option("--volatility-threshold", type=float, default=None, help="Volatility CV threshold %% (10-100)")
@click.option(
    "--peak-month",
    type=click.Choice(MONTH_NAMES_SHORT),
    default=None,
    help="Only show keywords peaking in this month",
)
@click.option("--search", type=str, default=None, help="Filter keywords by substring")
@click.option("--limit", type=int, default=20, help="Rows to display")
@click.option("--export-json", type=click.Path(path_type=Path), help="Export the trend report as JSON")
@click.option("--export-csv", type=click.Path(path_type=Path), help="Export trends as CSV")
@click.option("--summarize", is_flag=True, help="Request an AI-written trend report")
@click.option("--advanced", is_flag=True, help="Use the detailed analysis prompt with --summarize")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="WARNING",
    help="Logging level",
)
def cli(
    csv_files: tuple[Path, ...],
    fetch_api: bool,
    api_url: str | None,
    load_path: Path | None,
    save_path: Path | None,
    window_months: int | None,
    ma_window: int | None,
    peak_threshold: float | None,
    volatility_threshold: float | None,
    peak_month: str | None,
    search: str | None,
    limit: int,
    export_json: Path | None,
    export_csv: Path | None,
    summarize: bool,
    advanced: bool,
    log_level: str,
) -> None:
    """Aggregate keyword trend reports and analyze them."""
    setup_logging(log_level)

    if not csv_files and not fetch_api and not load_path:
        console.print("[red]Error: Must provide --csv, --fetch-api, or --load[/red]")
        raise SystemExit(1)

    settings = get_settings()
    if api_url:
        settings = settings.model_copy(update={"trends_api_url": api_url})

    store, saved_settings = None, None
    if load_path:
        try:
            store, saved_settings = JSONExporter.load_snapshot(load_path)
        except (OSError, ValueError) as e:
            console.print(f"[red]Could not load store snapshot:[/red] {e}")
            raise SystemExit(1)

    pipeline = TrendPipeline(settings=settings, analysis_settings=saved_settings, store=store)

    changes = {
        "analysis_window_months": window_months,
        "moving_average_window_points": ma_window,
        "seasonal_peak_threshold_pct": peak_threshold,
        "volatility_cv_threshold_pct": volatility_threshold,
    }
    try:
        pipeline.update_settings(**{k: v for k, v in changes.items() if v is not None})
    except ValidationError as e:
        console.print(f"[red]Invalid analysis settings:[/red] {e}")
        raise SystemExit(1)

    logger.info(f"Analysis settings: {pipeline.analysis_settings.model_dump()}")

    if csv_files:
        display_ingestion(pipeline.ingest_csv_files(csv_files))

    if fetch_api:
        try:
            display_ingestion(asyncio.run(pipeline.ingest_from_api()))
        except IngestionError as e:
            console.print(f"[red]{e}[/red]")

    report = pipeline.analyze()

    if save_path:
        path = JSONExporter(save_path.parent).save_store(
            pipeline.store, save_path.name, settings=pipeline.analysis_settings
        )
        console.print(f"[green]✓ Saved store to {path}[/green]")

    if report.status_message:
        console.print(f"[yellow]{report.status_message}[/yellow]")

    trends = filter_by_peak_month(filter_by_keyword(report.trends, search), peak_month)

    display_window(report)
    display_trends(trends[:limit], total=len(trends))
    display_peak_counts(report.peak_month_counts, active=peak_month)

    if export_json:
        path = JSONExporter(export_json.parent).export_report(
            report.model_copy(update={"trends": trends}), export_json.name
        )
        console.print(f"[green]✓ Exported report to {path}[/green]")

    if export_csv:
        path = CSVExporter(export_csv.parent).export_trends(trends, export_csv.name)
        console.print(f"[green]✓ Exported trends to {path}[/green]")

    if summarize:
        result = asyncio.run(TrendSummaryService(settings=settings).summarize(trends, advanced=advanced))
        if result.ok:
            console.print(result.text)
        else:
            console.print(f"[red]{result.error}[/red]")


def display_ingestion(result: IngestionResult) -> None:
    """Print loaded and failed sources."""
    for name in result.sources_loaded:
        console.print(f"[green]✓ Loaded {name}[/green]")
    for name, reason in result.sources_failed.items():
        console.print(f"[yellow]Skipped {name}: {reason}[/yellow]")
    console.print(f"Merged {result.keywords_merged} keywords")


def display_window(report: TrendReport) -> None:
    if report.window is None:
        console.print("Analysis window: none (no data)")
        return
    console.print(
        f"Analysis window: {report.window.start:%Y-%m-%d} to {report.window.end:%Y-%m-%d} "
        f"(source: {format_metric(report.data_source_type)})"
    )


def display_trends(trends: list[KeywordTrend], total: int) -> None:
    """Display a summary table of trends."""
    table = Table(title=f"Keyword Trends ({total})")
    table.add_column("Rank", justify="right")
    table.add_column("Keyword", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Direction", style="yellow")
    table.add_column("Momentum", style="yellow")
    table.add_column("Avg", justify="right")
    table.add_column("CV %", justify="right")
    table.add_column("Peak Months", style="magenta")

    for t in trends:
        table.add_row(
            str(t.rank) if t.rank is not None else "-",
            t.keyword[:40],
            t.trend_category,
            format_metric(t.trend_direction),
            format_metric(t.recent_momentum),
            format_metric(t.average_value),
            format_metric(t.volatility),
            ", ".join(t.primary_peak_months) or "-",
        )

    console.print(table)


def display_peak_counts(counts: dict[str, int], active: str | None) -> None:
    table = Table(title="Keywords Peaking per Month")
    for month in MONTH_NAMES_SHORT:
        table.add_column(f"[bold]{month}[/bold]" if month == active else month, justify="right")
    table.add_row(*(str(counts.get(month, 0)) for month in MONTH_NAMES_SHORT))
    console.print(table)


if __name__ == "__main__":
    cli()
