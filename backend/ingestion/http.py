"""
HTTP fetching for scrapers.

One shared httpx.AsyncClient per scraping run. Transport errors and 5xx
responses are retried with exponential backoff; 4xx responses are not.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; F1RagBot/1.0)"
DEFAULT_TIMEOUT = 30.0


def _is_transient(error: BaseException) -> bool:
    """Transport failures and server errors are worth retrying."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.TransportError)


class HTTPFetcher:
    """Async HTTP client with retries for scraping public F1 sources."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the fetcher.

        Args:
            client: Existing client to use (e.g. with a mock transport)
            timeout: Request timeout in seconds for a client created here
        """
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HTTPFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        response = await self.client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a URL and decode the JSON body."""
        response = await self._get(url, params=params, headers={"Accept": "application/json"})
        return response.json()

    async def get_bytes(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
    ) -> bytes:
        """GET a URL and return the raw body."""
        headers = {"Accept": accept} if accept else None
        response = await self._get(url, params=params, headers=headers)
        return response.content
