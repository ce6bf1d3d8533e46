"""
Abstract cache store for vscache.

The store is append-only per key: every ``put`` adds a new snapshot and
``latest`` returns the most recently written one. Nothing on the read path
updates or deletes rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from vscache.core.types import CacheEntry, CacheKey

_STORE_REGISTRY: dict[str, type[CacheStore]] = {}


class CacheStore(ABC):
    """
    Abstract base class for cache stores.

    Implementations can use any persistence layer (memory, Redis, SQL, ...)
    as long as ``latest`` observes the last committed ``put`` for a key.
    """

    @abstractmethod
    async def put(self, key: CacheKey, payload: str) -> None:
        """
        Insert a new snapshot for ``key``.

        Args:
            key: Cache key
            payload: Serialized payload (JSON text)
        """
        ...

    @abstractmethod
    async def latest(self, key: CacheKey) -> CacheEntry | None:
        """
        Read the most recent snapshot for ``key``.

        Returns:
            The newest CacheEntry, or None if the key was never written
        """
        ...

    @abstractmethod
    async def count(self, key: CacheKey) -> int:
        """Number of snapshots stored for ``key``."""
        ...

    @abstractmethod
    async def compact(self) -> int:
        """
        Drop every snapshot except the latest one per key.

        Returns:
            Number of snapshots removed
        """
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        return None

    async def health_check(self) -> bool:
        return True


def register_cache_store(name: str, store_class: type[CacheStore]) -> None:
    """Register a cache store implementation under ``name``."""
    _STORE_REGISTRY[name] = store_class


def get_cache_store_class(name: str) -> type[CacheStore] | None:
    return _STORE_REGISTRY.get(name)


def list_cache_stores() -> list[str]:
    return sorted(_STORE_REGISTRY)
