"""
Process-wide network selection.

The selector holds a single value that is swapped atomically. Requests never
read it mid-flight: they call ``snapshot()`` once at entry and pass the
resulting NetworkContext down to every fetcher.
"""

from __future__ import annotations

import threading
from typing import Any

from vscache.core.config import NetworkContext, Settings
from vscache.core.logging import get_logger
from vscache.core.types import Network

logger = get_logger("network")


class NetworkSelector:
    """Last-writer-wins holder for the active network."""

    def __init__(self, settings: Settings, initial: Network | None = None) -> None:
        self._settings = settings
        self._network = initial or settings.default_network
        self._lock = threading.Lock()

    def get(self) -> Network:
        return self._network

    def set(self, value: Any) -> Network:
        """
        Switch the active network.

        Raises:
            InvalidNetworkError: If value is not exactly 'mainnet' or 'testnet'
        """
        network = Network.from_string(value)
        with self._lock:
            previous = self._network
            self._network = network
        if previous is not network:
            logger.info(f"Network switched {previous.value} -> {network.value}")
        return network

    def snapshot(self) -> NetworkContext:
        """Capture the network and its URLs/addresses for one request."""
        return self._settings.context_for(self._network)
