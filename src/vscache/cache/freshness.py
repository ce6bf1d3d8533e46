"""
Freshness policy for cached snapshots.

TTLs (seconds):
- Chain-derived data (balances, address info, tokens, transactions): 5 min
- Market data: 1 min

Call sites always pass their TTL explicitly; these are only the defaults
``Settings`` starts from.
"""

from __future__ import annotations

CHAIN_DATA_TTL = 300.0  # 5 minutes
MARKET_DATA_TTL = 60.0  # 1 minute


def is_fresh(written_at: float, now: float, ttl: float) -> bool:
    """A snapshot is fresh while strictly younger than its TTL."""
    return (now - written_at) < ttl


__all__ = ["CHAIN_DATA_TTL", "MARKET_DATA_TTL", "is_fresh"]
