"""Shared HTTP plumbing for outbound connectors (checkout, calendars)."""

from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from grocerygo.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ConnectorResponse:
    """Standardized response from connector API calls."""

    data: Any
    status_code: int
    headers: dict[str, str]


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpConnector:
    """Async HTTP client wrapper with retries on transient network failures."""

    BACKOFF_BASE = 1
    BACKOFF_MAX = 30
    error_class: type[ConnectorError] = ConnectorError

    def __init__(
        self,
        timeout: float,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = {"Accept": "application/json", "User-Agent": "GroceryGo/1.0", **(headers or {})}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpConnector":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ConnectorResponse:
        """Make an HTTP request with retry logic."""
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            return await client.request(method, url, params=params, json=json, headers=headers)

        try:
            response = await _do_request()
        except (RetryError, httpx.TimeoutException, httpx.NetworkError) as e:
            logger.error(f"Request failed after {self.max_retries} attempts: {method} {url}")
            raise self.error_class(
                f"Request failed after {self.max_retries} attempts",
                response=str(e),
            ) from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"API error {response.status_code} for {url}: {error_detail}")
            raise self.error_class(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json() if response.text else {}
        except ValueError as e:
            logger.warning(f"Failed to parse JSON response: {e}")
            data = {}

        return ConnectorResponse(
            data=data,
            status_code=response.status_code,
            headers=dict(response.headers),
        )
