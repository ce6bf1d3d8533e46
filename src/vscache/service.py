"""ExplorerCacheService - entry point used by the HTTP layer."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from vscache.aggregation.nft_info import NftInfoAggregator
from vscache.cache.orchestrator import CacheOrchestrator
from vscache.core.config import NetworkContext, Settings
from vscache.core.exceptions import ValidationError
from vscache.core.logging import get_logger
from vscache.core.network import NetworkSelector
from vscache.core.types import CacheKey, CacheSource, ResourceKind
from vscache.normalize.normalizers import (
    normalize_address_info,
    normalize_address_tokens,
    normalize_balance,
    normalize_market_info,
    normalize_token_balances,
    normalize_transactions,
)
from vscache.storage import CacheStore, get_cache_store
from vscache.upstream.explorer import ExplorerFetcher
from vscache.upstream.http import UpstreamClient
from vscache.upstream.market import MarketDataFetcher

DEFAULT_PAGE = "1"
DEFAULT_LIMIT = "50"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_address(address: Any) -> str:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Address parameter is required", field="address")
    return address.strip()


def _positive_int(value: Any, name: str, default: str) -> int:
    if value is None or value == "":
        value = default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a positive integer, got {value!r}", field=name) from None
    if number < 1:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}", field=name)
    return number


def _tagged(payload: dict[str, Any], source: CacheSource) -> dict[str, Any]:
    return {**payload, "source": source.value}


class ExplorerCacheService:
    """
    Read-through cache and aggregation service over the explorer, the
    market-data API and on-chain RPC.

    Every request snapshots the selected network once at entry; fetchers only
    see that NetworkContext.

    Usage:
        >>> service = ExplorerCacheService()
        >>> result = await service.get_balance("0xabc...")
        >>> result["source"]
        'fresh'
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: CacheStore | None = None,
        http_client: httpx.AsyncClient | None = None,
        selector: NetworkSelector | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the service.

        Args:
            settings: Service settings (default: Settings.from_env())
            store: Cache store (default: from ``settings.storage_backend``)
            http_client: Shared httpx client for all upstream calls
            selector: Network selector (default: starts at ``settings.default_network``)
            clock: Time source in epoch seconds, shared by store and freshness checks
        """
        self._settings = settings or Settings.from_env()
        self._logger = get_logger("service")

        if store is None:
            store_kwargs: dict[str, Any] = {"clock": clock}
            if self._settings.storage_backend == "redis":
                store_kwargs["redis_url"] = self._settings.redis_url
            store = get_cache_store(self._settings.storage_backend, **store_kwargs)

        self._store = store
        self._cache = CacheOrchestrator(store, clock=clock)
        self._selector = selector or NetworkSelector(self._settings)

        self._upstream = UpstreamClient(http_client, timeout=self._settings.http_timeout)
        self._explorer = ExplorerFetcher(self._upstream)
        self._market = MarketDataFetcher(
            self._upstream, self._settings.market_api_url, self._settings.market_coin_id
        )
        self._nft_info = NftInfoAggregator(
            self._explorer,
            self._upstream,
            earnings_token_id=self._settings.earnings_token_id,
        )

        self._logger.info(
            f"Service ready (network: {self._selector.get().value}, "
            f"store: {type(store).__name__})"
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def selector(self) -> NetworkSelector:
        return self._selector

    async def close(self) -> None:
        """Release the owned HTTP client and the store connection."""
        await self._upstream.close()
        await self._store.close()

    # ==================== Network ====================

    def get_network(self) -> dict[str, Any]:
        return {"network": self._selector.get().value, "timestamp": _timestamp()}

    def set_network(self, value: Any) -> dict[str, Any]:
        """
        Switch the active network.

        Raises:
            InvalidNetworkError: If value is not exactly 'mainnet' or 'testnet'
        """
        network = self._selector.set(value)
        return {
            "network": network.value,
            "message": f"Network switched to {network.value}",
            "timestamp": _timestamp(),
        }

    async def test_connection(self) -> dict[str, Any]:
        ctx = self._selector.snapshot()
        connected = await self._explorer.ping(ctx)
        return {
            "status": "connected" if connected else "error",
            "network": ctx.network.value,
            "apiUrl": ctx.explorer_url,
            "timestamp": _timestamp(),
        }

    # ==================== Single resources ====================

    def _key(self, kind: ResourceKind, ctx: NetworkContext, *params: Any) -> CacheKey:
        return CacheKey(kind, params, ctx.network)

    async def get_balance(self, address: str) -> dict[str, Any]:
        address = _require_address(address)
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()

        async def fetch() -> dict[str, Any]:
            return normalize_balance(address, await self._explorer.fetch_balance(ctx, address))

        payload, source = await self._cache.read_through(
            self._key(ResourceKind.BALANCE, ctx, address), self._settings.chain_ttl, fetch
        )
        return _tagged(payload, source)

    async def get_address_info(self, address: str) -> dict[str, Any]:
        address = _require_address(address)
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()

        async def fetch() -> dict[str, Any]:
            return normalize_address_info(address, await self._explorer.fetch_address_info(ctx, address))

        payload, source = await self._cache.read_through(
            self._key(ResourceKind.ADDRESS_INFO, ctx, address), self._settings.chain_ttl, fetch
        )
        return _tagged(payload, source)

    async def get_token_balances(self, address: str) -> dict[str, Any]:
        address = _require_address(address)
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()

        async def fetch() -> dict[str, Any]:
            return normalize_token_balances(address, await self._explorer.fetch_token_list(ctx, address))

        payload, source = await self._cache.read_through(
            self._key(ResourceKind.TOKEN_BALANCES, ctx, address), self._settings.chain_ttl, fetch
        )
        return _tagged(payload, source)

    async def get_address_tokens(self, address: str) -> dict[str, Any]:
        address = _require_address(address)
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()

        async def fetch() -> dict[str, Any]:
            return normalize_address_tokens(
                address, await self._explorer.fetch_address_tokens(ctx, address)
            )

        payload, source = await self._cache.read_through(
            self._key(ResourceKind.ADDRESS_TOKENS, ctx, address), self._settings.chain_ttl, fetch
        )
        return _tagged(payload, source)

    async def get_transactions(
        self,
        address: str,
        page: int | str | None = DEFAULT_PAGE,
        limit: int | str | None = DEFAULT_LIMIT,
    ) -> dict[str, Any]:
        """
        One page of the address's transaction list (offset/limit passthrough).

        Raises:
            ValidationError: Missing address, or page/limit not a positive integer
        """
        address = _require_address(address)
        page_number = _positive_int(page, "page", DEFAULT_PAGE)
        page_size = _positive_int(limit, "limit", DEFAULT_LIMIT)
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()

        async def fetch() -> dict[str, Any]:
            raw = await self._explorer.fetch_transactions(ctx, address, page_number, page_size)
            return normalize_transactions(address, page_number, page_size, raw)

        payload, source = await self._cache.read_through(
            self._key(ResourceKind.TRANSACTIONS, ctx, address, page_number, page_size),
            self._settings.chain_ttl,
            fetch,
        )
        return _tagged(payload, source)

    async def get_market_info(self) -> dict[str, Any]:
        """Market snapshot of the native coin. Network-independent."""

        async def fetch() -> dict[str, Any]:
            return normalize_market_info(await self._market.fetch_coin())

        payload, source = await self._cache.read_through(
            CacheKey(ResourceKind.MARKET, (self._market.coin_id,)),
            self._settings.market_ttl,
            fetch,
        )
        return _tagged(payload, source)

    # ==================== Aggregation ====================

    async def get_nft_info(self) -> dict[str, Any]:
        """
        Grouped NFT catalogue, enriched with contract and distributor reads on mainnet.

        Not cached: every call reflects the current on-chain state.

        Raises:
            ConfigurationError: Explorer URL is not configured
            UpstreamUnavailableError: The catalogue fetch failed
        """
        ctx = self._selector.snapshot()
        ctx.require_explorer_url()
        return await self._nft_info.build(ctx)


__all__ = ["ExplorerCacheService"]
