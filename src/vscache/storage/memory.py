"""
In-Memory Cache Store.

Default store that keeps all snapshots in process memory.
Suitable for development and testing; data is lost when the process ends.
"""

from __future__ import annotations

import time
from typing import Callable

from vscache.core.types import CacheEntry, CacheKey
from vscache.storage.base import CacheStore, register_cache_store


class InMemoryCacheStore(CacheStore):
    """
    In-memory append-only cache store.

    Snapshots are kept per storage key in insertion order, so the last
    element is always the latest write.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, list[CacheEntry]] = {}

    async def put(self, key: CacheKey, payload: str) -> None:
        entry = CacheEntry(key=key, payload=payload, written_at=self._clock())
        self._entries.setdefault(key.storage_key, []).append(entry)

    async def latest(self, key: CacheKey) -> CacheEntry | None:
        history = self._entries.get(key.storage_key)
        return history[-1] if history else None

    async def count(self, key: CacheKey) -> int:
        return len(self._entries.get(key.storage_key, ()))

    async def compact(self) -> int:
        removed = 0
        for storage_key, history in self._entries.items():
            if len(history) > 1:
                removed += len(history) - 1
                self._entries[storage_key] = history[-1:]
        return removed


# Register as default backend
register_cache_store("memory", InMemoryCacheStore)
