"""API clients for external services."""

from trendlens.clients.base import APIError, BaseAPIClient, RateLimiter
from trendlens.clients.gemini import GeminiClient
from trendlens.clients.trends_api import TrendsAPIClient

__all__ = [
    "APIError",
    "BaseAPIClient",
    "RateLimiter",
    "GeminiClient",
    "TrendsAPIClient",
]
