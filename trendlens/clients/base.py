"""Shared async HTTP plumbing for the trends backend and Gemini clients."""

import asyncio
import logging
import time
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from trendlens.config import Settings, get_settings

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Non-success response, or a response body the caller cannot use."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


def error_message(data: Any, status_code: int) -> str:
    """
    Pull a readable message out of an error body.

    Understands the trends backend's {"error": "..."} and Google's
    {"error": {"message": "..."}} shapes.
    """
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error:
        return f"{error} (HTTP {status_code})"
    return f"API request failed: HTTP {status_code}"


class RateLimiter:
    """Spaces calls evenly so that at most `calls_per_minute` start per minute."""

    def __init__(self, calls_per_minute: int):
        self.interval = 60.0 / calls_per_minute
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = time.monotonic()
            wait = self._next_slot - now
            if wait > 0:
                logger.debug(f"Rate limiter waiting {wait:.2f}s")
                await asyncio.sleep(wait)
                now = self._next_slot
            self._next_slot = now + self.interval


class BaseAPIClient:
    """
    Lazily-created httpx.AsyncClient with retries on transport failures.

    Subclasses pass their fixed headers and, when the service enforces a
    quota, a RateLimiter. Callers own the client and must await close().
    """

    def __init__(
        self,
        base_url: str,
        settings: Settings | None = None,
        headers: dict[str, str] | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.settings = settings or get_settings()
        self.headers = headers or {"Accept": "application/json"}
        self.rate_limiter = rate_limiter
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.settings.request_timeout, connect=10.0),
                headers=self.headers,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict | None = None,
        json_data: dict | None = None,
    ) -> Any:
        if self.rate_limiter:
            await self.rate_limiter.acquire()

        logger.debug(f"{method} {self.base_url}/{endpoint.lstrip('/')}")
        response = await self.client.request(method, endpoint, params=params, json=json_data)
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode the JSON body, raising APIError for any 4xx/5xx status."""
        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}

        if response.status_code >= 400:
            raise APIError(
                error_message(data, response.status_code),
                status_code=response.status_code,
                response_data=data,
            )
        return data

    async def get(self, endpoint: str, params: dict | None = None) -> Any:
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json_data: dict | None = None) -> Any:
        return await self._request("POST", endpoint, json_data=json_data)
