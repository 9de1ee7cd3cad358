"""Trend summaries and prompts for the external report-generation service."""

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from trendlens.clients.base import APIError
from trendlens.clients.gemini import GeminiClient
from trendlens.config import Settings, get_settings
from trendlens.models.trend import KeywordTrend, format_metric

logger = logging.getLogger(__name__)

BASIC_TREND_LIMIT = 5
ADVANCED_TREND_LIMIT = 20


class TrendDetail(BaseModel):
    """Per-keyword statistics sent for advanced analysis."""

    keyword: str
    category: str
    momentum: str
    average_value: float | None
    volatility: float | None
    seasonal_indexes: list[dict[str, Any]]


class AdvancedAnalysisInput(BaseModel):
    """Structured input for the advanced analysis prompt."""

    trends: list[TrendDetail] = Field(default_factory=list)
    timeframe: str = ""
    total_data_points: int = 0


class SummaryResult(BaseModel):
    """Outcome of a summarization request. Exactly one of text/error is set."""

    text: str | None = None
    error: str | None = None
    advanced: bool = False

    @property
    def ok(self) -> bool:
        return self.text is not None


def build_basic_summary(trends: list[KeywordTrend], limit: int = BASIC_TREND_LIMIT) -> str:
    """One-line summary of the top trends."""
    return "; ".join(
        f"{t.keyword} (Category: {t.trend_category}, "
        f"Momentum: {format_metric(t.recent_momentum)}, "
        f"Avg: {format_metric(t.average_value)})"
        for t in trends[:limit]
    )


def build_advanced_input(
    trends: list[KeywordTrend],
    limit: int = ADVANCED_TREND_LIMIT,
) -> AdvancedAnalysisInput:
    """Collect detailed statistics for the top trends plus dataset-wide context."""
    timestamps = [p.date for t in trends for p in t.all_points]
    timeframe = ""
    if timestamps:
        timeframe = f"{min(timestamps):%Y-%m-%d} - {max(timestamps):%Y-%m-%d}"

    details = [
        TrendDetail(
            keyword=t.keyword,
            category=t.trend_category,
            momentum=format_metric(t.recent_momentum),
            average_value=t.average_value,
            volatility=t.volatility,
            seasonal_indexes=[si.model_dump() for si in t.seasonal_indexes],
        )
        for t in trends[:limit]
    ]

    return AdvancedAnalysisInput(
        trends=details,
        timeframe=timeframe,
        total_data_points=sum(len(t.all_points) for t in trends),
    )


def build_basic_prompt(summary: str) -> str:
    return f"""
You are an expert Pinterest trends analyst with years of experience in social media marketing.
Analyze the following trend data and provide actionable business insights:

Trend Data: {summary}

Please provide a comprehensive analysis including:
1. Market Overview - What are the key patterns and trends?
2. Strategic Recommendations - What specific actions should content creators take?
3. Key Insights - What are the most important findings for business success?
4. Risk Factors - What potential challenges or risks should be considered?

Format your response with clear headings and bullet points for easy reading.
Be specific and actionable in your recommendations."""


def build_advanced_prompt(analysis_input: AdvancedAnalysisInput) -> str:
    trend_details = json.dumps(
        [detail.model_dump() for detail in analysis_input.trends], indent=2
    )
    return f"""
You are a senior Pinterest trends analyst and business intelligence expert.
Perform a comprehensive analysis of the following detailed trend dataset:

Dataset Overview:
- Timeframe: {analysis_input.timeframe}
- Total Data Points: {analysis_input.total_data_points}
- Number of Trends Analyzed: {len(analysis_input.trends)}

Detailed Trend Data:
{trend_details}

Please provide a comprehensive business intelligence report including:

1. **Dataset Overview** - Summary statistics and data quality assessment
2. **Category Distribution** - Analysis of trend categories and their performance
3. **Performance Insights** - High performers vs declining trends with specific percentages
4. **Seasonal Analysis** - Seasonal patterns and optimal timing insights
5. **Recommendations** - Strategic recommendations based on the data
6. **Volatility Assessment** - Risk analysis and volatility patterns
7. **Predictive Insights** - Future outlook and next steps for content creators

Format your response with clear headings, bullet points, and specific data-driven insights.
Include percentages, specific examples, and actionable recommendations."""


class TrendSummaryService:
    """
    Requests a written trend report from Gemini.

    Failures never propagate: missing configuration, empty input and client
    errors all come back as a SummaryResult with a user-facing error.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: GeminiClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or self.settings.gemini_configured

    async def summarize(self, trends: list[KeywordTrend], advanced: bool = False) -> SummaryResult:
        """
        Generate a basic (top 5) or advanced (top 20) analysis report.

        Args:
            trends: Sorted trend records
            advanced: Use the detailed statistical prompt

        Returns:
            SummaryResult with either the report text or an error message
        """
        if not self.configured:
            return SummaryResult(
                error="Please configure a Gemini API key (GEMINI_API_KEY) to use this feature.",
                advanced=advanced,
            )
        if not trends:
            return SummaryResult(
                error="No trend data available to analyze. Please load some data first.",
                advanced=advanced,
            )

        if advanced:
            prompt = build_advanced_prompt(build_advanced_input(trends))
            heading = "**Advanced Trend Intelligence Report**"
        else:
            prompt = build_basic_prompt(build_basic_summary(trends))
            heading = "**Trend Analysis Report**"

        client = self._client or GeminiClient(settings=self.settings)
        try:
            text = await client.generate_content(prompt)
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error getting Gemini analysis: {e}")
            return SummaryResult(
                error=f"Failed to get AI analysis: {e}",
                advanced=advanced,
            )
        finally:
            if self._client is None:
                await client.close()

        return SummaryResult(text=f"{heading}\n\n{text}", advanced=advanced)
