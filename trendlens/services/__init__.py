"""Services built on top of the analytics pipeline."""

from trendlens.services.summary import (
    AdvancedAnalysisInput,
    SummaryResult,
    TrendSummaryService,
    build_advanced_input,
    build_basic_summary,
)

__all__ = [
    "AdvancedAnalysisInput",
    "SummaryResult",
    "TrendSummaryService",
    "build_advanced_input",
    "build_basic_summary",
]
