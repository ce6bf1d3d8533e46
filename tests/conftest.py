from __future__ import annotations

from typing import Callable

import httpx
import pytest

from vscache.core.config import Settings
from vscache.core.types import ContractConfig, DistributorConfig
from vscache.storage.memory import InMemoryCacheStore


class FakeClock:
    """Manually advanced epoch-seconds clock shared by store and orchestrator."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def settings() -> Settings:
    """Both networks configured; all four tiers on mainnet (digit-only addresses are already checksummed)."""
    return Settings(
        mainnet_api_url="https://mainnet-explorer.test",
        testnet_api_url="https://testnet-explorer.test",
        mainnet_rpc_url="https://rpc.mainnet.test",
        testnet_rpc_url="https://rpc.testnet.test",
        mainnet_contracts=(
            ContractConfig("Diamond NFT", "0x" + "11" * 20),
            ContractConfig("Carbon NFT", "0x" + "12" * 20),
            ContractConfig("Green NFT", "0x" + "13" * 20),
            ContractConfig("Gold NFT", "0x" + "14" * 20),
        ),
        mainnet_distributors=(
            DistributorConfig("Diamond NFT Distributor", "0x" + "21" * 20, "Diamond NFT"),
            DistributorConfig("Carbon NFT Distributor", "0x" + "22" * 20, "Carbon NFT"),
            DistributorConfig("Green NFT Distributor", "0x" + "23" * 20, "Green NFT"),
            DistributorConfig("Gold NFT Distributor", "0x" + "24" * 20, "Gold NFT"),
        ),
        market_api_url="https://market.test/api/v3",
        market_coin_id="vitalik-smart-gas",
    )


@pytest.fixture
def make_http_client() -> Callable[..., httpx.AsyncClient]:
    """Build an httpx.AsyncClient whose requests are answered by ``handler``."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
