"""Google Gemini client for trend report generation."""

import logging
from typing import Any

from trendlens.clients.base import APIError, BaseAPIClient, RateLimiter
from trendlens.config import Settings, get_settings

logger = logging.getLogger(__name__)


class GeminiClient(BaseAPIClient):
    """
    Minimal client for the Gemini generateContent REST endpoint.

    Only text prompts are supported; the first candidate's text parts are
    joined and returned.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    CALLS_PER_MINUTE = 15

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.api_key = api_key or settings.gemini_api_key.get_secret_value()
        self.model = model or settings.gemini_model
        super().__init__(
            base_url=self.BASE_URL,
            settings=settings,
            headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
            rate_limiter=RateLimiter(self.CALLS_PER_MINUTE),
        )

    async def generate_content(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Raises:
            APIError: on HTTP errors or when the response has no text
        """
        masked = f"********{self.api_key[-4:]}" if self.api_key else "not provided"
        logger.info(f"Calling Gemini model {self.model} (key {masked})")

        data = await self.post(
            f"/models/{self.model}:generateContent",
            json_data={"contents": [{"parts": [{"text": prompt}]}]},
        )
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            raise APIError(f"Gemini returned no candidates: {feedback}", response_data=data)

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise APIError("Gemini returned an empty response", response_data=data)
        return text
