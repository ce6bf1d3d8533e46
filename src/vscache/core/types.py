"""
Type definitions for vscache.

This module contains the enums, cache key/entry types and the aggregation
item data classes shared by the cache, fetcher and aggregation layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from vscache.core.exceptions import InvalidNetworkError

# CacheKey carries the resource kind plus at most this many string parameters
MAX_KEY_PARAMS = 3


class Network(str, Enum):
    """Networks the explorer and RPC endpoints are configured for."""

    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def from_string(cls, value: Any) -> Network:
        """Parse an exact 'mainnet' / 'testnet' literal."""
        if isinstance(value, Network):
            return value
        for member in cls:
            if member.value == value:
                return member
        raise InvalidNetworkError(value)

    def is_mainnet(self) -> bool:
        return self is Network.MAINNET


class ResourceKind(str, Enum):
    """Cacheable resource kinds. Each kind has its own TTL at the call site."""

    BALANCE = "balance"
    ADDRESS_INFO = "address_info"
    TOKEN_BALANCES = "token_balances"
    ADDRESS_TOKENS = "address_tokens"
    TRANSACTIONS = "transactions"
    MARKET = "market"


class CacheSource(str, Enum):
    """Where a read-through payload came from."""

    CACHE = "cache"
    FRESH = "fresh"


@dataclass(frozen=True)
class CacheKey:
    """
    Identifies one cacheable query.

    ``network`` namespaces chain-derived resources so that switching networks
    never serves data cached for the other one. Market data is network-free.
    """

    kind: ResourceKind
    params: tuple[str, ...] = ()
    network: Network | None = None

    def __post_init__(self) -> None:
        if len(self.params) > MAX_KEY_PARAMS:
            raise ValueError(
                f"CacheKey supports at most {MAX_KEY_PARAMS} parameters, got {len(self.params)}"
            )
        object.__setattr__(self, "params", tuple(str(p) for p in self.params))

    @property
    def storage_key(self) -> str:
        network = self.network.value if self.network else "-"
        return ":".join((network, self.kind.value, *self.params))


@dataclass(frozen=True)
class CacheEntry:
    """One immutable snapshot written by the cache orchestrator."""

    key: CacheKey
    payload: str
    written_at: float


@dataclass(frozen=True)
class ContractConfig:
    """A configured NFT collection contract."""

    name: str
    address: str | None


@dataclass(frozen=True)
class DistributorConfig:
    """
    A configured gas-fee distributor contract.

    ``collection_name`` is the catalogue group whose total supply multiplies the
    distributor's per-token earnings.
    """

    name: str
    address: str | None
    collection_name: str


@dataclass
class NftGroup:
    """Catalogue entries sharing the same (name, symbol)."""

    name: str
    symbol: str
    total_supply: int
    holders: int
    image_url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "totalSupply": self.total_supply,
            "holders": self.holders,
            "imageUrl": self.image_url,
        }


@dataclass
class NftContractDetail:
    """On-chain name/symbol/supply of one configured NFT contract."""

    contract_address: str
    name: str
    symbol: str
    total_supply: str
    error: str | None = None

    @classmethod
    def fallback(cls, config: ContractConfig, error: str) -> NftContractDetail:
        return cls(
            contract_address=config.address or "unknown",
            name=config.name,
            symbol="ERROR",
            total_supply="0",
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "contractAddress": self.contract_address,
            "name": self.name,
            "symbol": self.symbol,
            "totalSupply": self.total_supply,
            "error": self.error,
        }


@dataclass
class DistributorDetail:
    """One distributor joined with its earnings and its catalogue group."""

    distributor_address: str
    name: str
    linked_nft_contract: str | None
    collection: dict[str, Any] | None
    total_pool_earnings: str
    total_distributed: str
    per_token_earnings: str
    total_withdrawn: str
    total_type_earnings: str
    error: str | None = None

    @classmethod
    def fallback(cls, config: DistributorConfig, error: str) -> DistributorDetail:
        return cls(
            distributor_address=config.address or "unknown",
            name=config.name,
            linked_nft_contract=None,
            collection=None,
            total_pool_earnings="0",
            total_distributed="0",
            per_token_earnings="0",
            total_withdrawn="0",
            total_type_earnings="0",
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "distributorAddress": self.distributor_address,
            "name": self.name,
            "linkedNftContract": self.linked_nft_contract,
            "collection": self.collection,
            "totalPoolEarnings": self.total_pool_earnings,
            "totalDistributed": self.total_distributed,
            "perTokenEarnings": self.per_token_earnings,
            "totalWithdrawn": self.total_withdrawn,
            "totalTypeEarnings": self.total_type_earnings,
            "error": self.error,
        }
