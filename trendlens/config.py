"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from trendlens.models.trend import AnalysisSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Analysis defaults
    analysis_window_months: int = Field(
        default=24, ge=6, le=60, description="Rolling analysis window in months"
    )
    moving_average_window_points: int = Field(
        default=3, ge=2, le=10, description="Points per moving average window"
    )
    seasonal_peak_threshold_pct: float = Field(
        default=25, ge=5, le=100, description="Seasonal index above 100 that marks a peak month"
    )
    volatility_cv_threshold_pct: float = Field(
        default=35, ge=10, le=100, description="Coefficient of variation above which a trend is volatile"
    )

    # Trends data source (mock backend)
    trends_api_url: str = Field(
        default="http://localhost:3001", description="Base URL of the trends data backend"
    )
    trends_api_key: SecretStr = Field(default="", description="Optional trends backend API key")

    # Gemini (summarization)
    gemini_api_key: SecretStr = Field(default="", description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-1.5-flash", description="Gemini model name")

    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["json", "text"] = Field(default="text", description="Log output format")

    @property
    def analysis_settings(self) -> "AnalysisSettings":
        """Get the analysis thresholds as an AnalysisSettings model."""
        from trendlens.models.trend import AnalysisSettings

        return AnalysisSettings(
            analysis_window_months=self.analysis_window_months,
            moving_average_window_points=self.moving_average_window_points,
            seasonal_peak_threshold_pct=self.seasonal_peak_threshold_pct,
            volatility_cv_threshold_pct=self.volatility_cv_threshold_pct,
        )

    @property
    def gemini_configured(self) -> bool:
        """Check if a Gemini API key is configured."""
        return bool(self.gemini_api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
