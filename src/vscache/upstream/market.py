"""Market-data fetcher (CoinGecko coin endpoint)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from vscache.upstream.http import UpstreamClient


class MarketDataFetcher:
    """Fetches the raw coin snapshot for one configured coin id."""

    def __init__(self, upstream: UpstreamClient, api_url: str, coin_id: str) -> None:
        self._upstream = upstream
        self._api_url = api_url.rstrip("/")
        self._coin_id = coin_id

    @property
    def coin_id(self) -> str:
        return self._coin_id

    async def fetch_coin(self) -> Any:
        return await self._upstream.fetch_json(f"{self._api_url}/coins/{quote(self._coin_id, safe='')}")


__all__ = ["MarketDataFetcher"]
