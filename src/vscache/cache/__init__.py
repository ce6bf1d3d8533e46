"""Read-through caching: freshness policy and orchestration."""

from vscache.cache.freshness import CHAIN_DATA_TTL, MARKET_DATA_TTL, is_fresh
from vscache.cache.orchestrator import CacheOrchestrator

__all__ = [
    "CHAIN_DATA_TTL",
    "MARKET_DATA_TTL",
    "CacheOrchestrator",
    "is_fresh",
]
