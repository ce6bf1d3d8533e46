"""
Upstream HTTP capability.

A thin wrapper over an injected ``httpx.AsyncClient`` that bounds the
total time of each request and turns every non-2xx answer into a typed failure.
No retries happen here; the cache TTL is the only repair window.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from vscache.core.exceptions import MalformedUpstreamDataError, UpstreamUnavailableError
from vscache.core.logging import get_logger

logger = get_logger("upstream.http")

# Error bodies are echoed back to clients, keep them short
MAX_ERROR_BODY = 2048


class UpstreamClient:
    """
    JSON-over-HTTP client for the explorer and market-data APIs.

    Usage:
        async with httpx.AsyncClient() as http:
            client = UpstreamClient(http, timeout=5.0)
            data = await client.fetch_json("https://explorer/api/v2/tokens")
    """

    DEFAULT_TIMEOUT = 5.0  # seconds

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Args:
            http_client: Shared httpx client (for connection pooling)
            timeout: Default per-request timeout in seconds
        """
        self._http_client = http_client
        self._owns_client = False
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    @property
    def http(self) -> httpx.AsyncClient:
        return self._get_client()

    async def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_json(self, url: str, timeout: float | None = None) -> Any:
        """
        GET ``url`` and decode its JSON body.

        Raises:
            UpstreamUnavailableError: Non-2xx status, timeout or transport error
            MalformedUpstreamDataError: 2xx response whose body is not JSON
        """
        return await self.request_json("GET", url, timeout=timeout)

    async def request_json(
        self,
        method: str,
        url: str,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Send one request and decode its JSON body.

        ``timeout`` bounds the whole exchange (connect, send and the complete
        body read), not each phase separately.
        """
        client = self._get_client()
        effective_timeout = timeout if timeout is not None else self._timeout
        logger.info(f"{method} {url}")

        try:
            response = await asyncio.wait_for(
                client.request(
                    method,
                    url,
                    json=json_body,
                    headers={"accept": "application/json"},
                    timeout=effective_timeout,
                ),
                effective_timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning(f"Upstream timeout after {effective_timeout}s: {url}")
            raise UpstreamUnavailableError(
                f"Upstream request timed out after {effective_timeout}s",
                url=url,
                timed_out=True,
            ) from None
        except httpx.HTTPError as e:
            logger.warning(f"Upstream transport error for {url}: {e}")
            raise UpstreamUnavailableError(f"Upstream request failed: {e}", url=url) from e

        if not response.is_success:
            error = UpstreamUnavailableError(
                f"Upstream returned {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                url=url,
                body=response.text[:MAX_ERROR_BODY],
            )
            if error.is_rate_limited():
                logger.warning(f"Upstream rate limited by {url}")
            elif error.is_server_error():
                logger.error(f"Upstream HTTP {response.status_code} from {url}: {error.body}")
            else:
                logger.warning(f"Upstream HTTP {response.status_code} from {url}: {error.body}")
            raise error

        try:
            return response.json()
        except ValueError:
            content_type = response.headers.get("content-type", "")
            raise MalformedUpstreamDataError(
                f"Upstream response is not JSON (content-type: {content_type or 'none'})",
                url=url,
            ) from None


__all__ = ["UpstreamClient"]
