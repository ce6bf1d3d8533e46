"""Upstream fetchers: explorer, market data and on-chain reads."""

from vscache.upstream.abi import to_checksum_address
from vscache.upstream.explorer import ExplorerFetcher
from vscache.upstream.http import UpstreamClient
from vscache.upstream.market import MarketDataFetcher
from vscache.upstream.rpc import OnChainReader

__all__ = [
    "ExplorerFetcher",
    "MarketDataFetcher",
    "OnChainReader",
    "UpstreamClient",
    "to_checksum_address",
]
