"""
Configuration management for vscache.

Handles loading configuration from environment variables and building the
per-request NetworkContext that every fetcher reads its URLs from.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

from vscache.cache.freshness import CHAIN_DATA_TTL, MARKET_DATA_TTL
from vscache.core.exceptions import ConfigurationError
from vscache.core.types import ContractConfig, DistributorConfig, Network

DEFAULT_MARKET_API_URL = "https://api.coingecko.com/api/v3"
DEFAULT_MARKET_COIN_ID = "vitalik-smart-gas"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:3000")

# (display name, env suffix) for the four NFT tiers
_NFT_TIERS: tuple[tuple[str, str], ...] = (
    ("Diamond", "DIAMOND"),
    ("Carbon", "CARBON"),
    ("Green", "GREEN"),
    ("Gold", "GOLD"),
)


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {name} is not set", setting=name)
    return value or default


def _get_env_number(name: str, default: float, cast: type = float) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return cast(default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be a number, got {raw!r}", setting=name
        ) from None


def _contracts_from_env(prefix: str = "") -> tuple[ContractConfig, ...]:
    return tuple(
        ContractConfig(name=f"{tier} NFT", address=_get_env_var(f"{prefix}{suffix}_NFT"))
        for tier, suffix in _NFT_TIERS
    )


def _distributors_from_env(prefix: str = "") -> tuple[DistributorConfig, ...]:
    return tuple(
        DistributorConfig(
            name=f"{tier} NFT Distributor",
            address=_get_env_var(f"{prefix}GAS_DISTRIBUTOR_{suffix}"),
            collection_name=f"{tier} NFT",
        )
        for tier, suffix in _NFT_TIERS
    )


@dataclass(frozen=True)
class NetworkContext:
    """
    Everything network-dependent a request needs, captured once at entry.

    Fetchers only ever read URLs and addresses from the context they were
    handed, so a concurrent network switch cannot change an in-flight request.
    """

    network: Network
    explorer_url: str | None
    rpc_url: str | None
    nft_contracts: tuple[ContractConfig, ...] = ()
    distributors: tuple[DistributorConfig, ...] = ()

    def require_explorer_url(self) -> str:
        if not self.explorer_url:
            raise ConfigurationError(
                f"API URL not configured for {self.network.value}",
                setting="VSC_MAINNET_API" if self.network.is_mainnet() else "VSC_TESTNET_API",
            )
        return self.explorer_url.rstrip("/")

    def require_rpc_url(self) -> str:
        if not self.rpc_url:
            raise ConfigurationError(
                f"RPC URL not configured for {self.network.value}",
                setting="VSC_RPC_MAINNET_API" if self.network.is_mainnet() else "VSC_RPC_TESTNET_API",
            )
        return self.rpc_url


@dataclass(frozen=True)
class Settings:
    """Service configuration."""

    mainnet_api_url: str | None = None
    testnet_api_url: str | None = None
    mainnet_rpc_url: str | None = None
    testnet_rpc_url: str | None = None
    default_network: Network = Network.TESTNET

    mainnet_contracts: tuple[ContractConfig, ...] = ()
    testnet_contracts: tuple[ContractConfig, ...] = ()
    mainnet_distributors: tuple[DistributorConfig, ...] = ()
    testnet_distributors: tuple[DistributorConfig, ...] = ()

    market_api_url: str = DEFAULT_MARKET_API_URL
    market_coin_id: str = DEFAULT_MARKET_COIN_ID

    # Timeouts (seconds)
    http_timeout: float = 5.0

    # Cache TTLs (seconds)
    chain_ttl: float = CHAIN_DATA_TTL  # balances, address info, tokens, transactions
    market_ttl: float = MARKET_DATA_TTL

    earnings_token_id: int = 1

    storage_backend: str = "memory"
    redis_url: str | None = None
    log_level: str = "INFO"
    log_json: bool = False

    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    host: str = "127.0.0.1"
    port: int = 3002

    def __post_init__(self) -> None:
        if self.http_timeout <= 0:
            raise ConfigurationError("http_timeout must be positive", setting="http_timeout")
        if self.chain_ttl <= 0 or self.market_ttl <= 0:
            raise ConfigurationError("cache TTLs must be positive", setting="ttl")

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Load configuration from environment variables."""
        network_str = overrides.get("default_network") or _get_env_var("NETWORK", default="testnet")
        default_network = (
            Network.from_string(network_str.strip().lower())
            if isinstance(network_str, str)
            else network_str
        )

        cors_raw = _get_env_var("VSCACHE_CORS_ORIGINS")
        cors_origins = (
            tuple(o.strip() for o in cors_raw.split(",") if o.strip())
            if cors_raw
            else DEFAULT_CORS_ORIGINS
        )

        values: dict[str, Any] = {
            "mainnet_api_url": _get_env_var("VSC_MAINNET_API"),
            "testnet_api_url": _get_env_var("VSC_TESTNET_API"),
            "mainnet_rpc_url": _get_env_var("VSC_RPC_MAINNET_API"),
            "testnet_rpc_url": _get_env_var("VSC_RPC_TESTNET_API"),
            "default_network": default_network,
            "mainnet_contracts": _contracts_from_env(),
            "testnet_contracts": _contracts_from_env("TESTNET_"),
            "mainnet_distributors": _distributors_from_env(),
            "testnet_distributors": _distributors_from_env("TESTNET_"),
            "market_api_url": _get_env_var("VSCACHE_MARKET_API_URL", DEFAULT_MARKET_API_URL),
            "market_coin_id": _get_env_var("VSCACHE_MARKET_COIN_ID", DEFAULT_MARKET_COIN_ID),
            "http_timeout": _get_env_number("VSCACHE_HTTP_TIMEOUT", cls.http_timeout),
            "chain_ttl": _get_env_number("VSCACHE_CHAIN_TTL", cls.chain_ttl),
            "market_ttl": _get_env_number("VSCACHE_MARKET_TTL", cls.market_ttl),
            "earnings_token_id": _get_env_number(
                "VSCACHE_EARNINGS_TOKEN_ID", cls.earnings_token_id, cast=int
            ),
            "storage_backend": _get_env_var("VSCACHE_STORAGE_BACKEND", default="memory"),
            "redis_url": _get_env_var("VSCACHE_REDIS_URL"),
            "log_level": _get_env_var("VSCACHE_LOG_LEVEL", default="INFO"),
            "log_json": (_get_env_var("VSCACHE_LOG_JSON") or "").strip().lower() in ("1", "true", "yes"),
            "cors_origins": cors_origins,
            "host": _get_env_var("VSCACHE_HOST", default=cls.host),
            "port": _get_env_number("PORT", cls.port, cast=int),
        }
        values.update({k: v for k, v in overrides.items() if k != "default_network"})
        return cls(**values)

    def with_updates(self, **updates: Any) -> Settings:
        """Create a new Settings with updated values."""
        return replace(self, **updates)

    def context_for(self, network: Network) -> NetworkContext:
        """Build the immutable per-request view for ``network``."""
        if network.is_mainnet():
            return NetworkContext(
                network=network,
                explorer_url=self.mainnet_api_url,
                rpc_url=self.mainnet_rpc_url,
                nft_contracts=self.mainnet_contracts,
                distributors=self.mainnet_distributors,
            )
        return NetworkContext(
            network=network,
            explorer_url=self.testnet_api_url,
            rpc_url=self.testnet_rpc_url,
            nft_contracts=self.testnet_contracts,
            distributors=self.testnet_distributors,
        )
