"""
vscache - read-through cache and aggregation layer for the VSC explorer.

Sits in front of a block-explorer HTTP API, an on-chain RPC endpoint and a
market-data API, normalizing their answers for a frontend client.

Usage:
    >>> from vscache import ExplorerCacheService
    >>>
    >>> service = ExplorerCacheService()
    >>> balance = await service.get_balance("0x...")
    >>> nft_info = await service.get_nft_info()

Serve over HTTP:
    $ vscache
"""

from vscache.core.config import NetworkContext, Settings
from vscache.core.exceptions import (
    ConfigurationError,
    ContractCallError,
    InvalidAddressError,
    InvalidNetworkError,
    MalformedUpstreamDataError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
    ValidationError,
    VSCacheError,
)
from vscache.core.types import CacheKey, CacheSource, Network, ResourceKind
from vscache.service import ExplorerCacheService

__version__ = "0.1.0"

__all__ = [
    # Main service
    "ExplorerCacheService",
    # Configuration
    "NetworkContext",
    "Settings",
    # Types
    "CacheKey",
    "CacheSource",
    "Network",
    "ResourceKind",
    # Exceptions
    "ConfigurationError",
    "ContractCallError",
    "InvalidAddressError",
    "InvalidNetworkError",
    "MalformedUpstreamDataError",
    "UpstreamRejectedError",
    "UpstreamUnavailableError",
    "ValidationError",
    "VSCacheError",
]
