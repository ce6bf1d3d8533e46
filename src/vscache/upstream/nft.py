"""
On-chain fetchers for NFT collection and gas-fee distributor contracts.

Each function reads one contract through an OnChainReader. The reads for a
single contract run concurrently; any failure propagates so the caller can
turn it into a fallback record for that item.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from vscache.core.types import ContractConfig, DistributorConfig, NftContractDetail
from vscache.upstream.abi import to_checksum_address
from vscache.upstream.rpc import OnChainReader

# View methods of the ERC-721 collection contracts
NFT_NAME = "name()"
NFT_SYMBOL = "symbol()"
NFT_TOTAL_SUPPLY = "totalSupply()"

# View methods of the gas-fee distributor contracts
DISTRIBUTOR_NFT_CONTRACT = "nftContract()"
DISTRIBUTOR_TOTAL_EARNINGS = "viewTotalEarnings()"
DISTRIBUTOR_TOTAL_DISTRIBUTED = "totalDistributed()"
DISTRIBUTOR_USER_EARNINGS = "calculateUserEarnings(uint256)"
DISTRIBUTOR_WITHDRAWN = "userWithdrawnPerNFTID(uint256)"


async def _gather_all(*aws):
    """Await every read; raise the first failure only after all have settled."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


@dataclass(frozen=True)
class DistributorReads:
    """Raw base-unit figures read from one distributor."""

    address: str
    nft_contract: str
    total_earnings: int
    total_distributed: int
    token_earnings: int
    token_withdrawn: int


async def fetch_contract_detail(reader: OnChainReader, config: ContractConfig) -> NftContractDetail:
    """Read name, symbol and total supply of one configured NFT contract."""
    address = to_checksum_address(config.address or "")
    name, symbol, total_supply = await _gather_all(
        reader.read_string(address, NFT_NAME),
        reader.read_string(address, NFT_SYMBOL),
        reader.read_uint(address, NFT_TOTAL_SUPPLY),
    )
    return NftContractDetail(
        contract_address=address,
        name=name,
        symbol=symbol,
        total_supply=str(total_supply),
    )


async def fetch_distributor_reads(
    reader: OnChainReader,
    config: DistributorConfig,
    token_id: int,
) -> DistributorReads:
    """Read pool totals and the current earnings of ``token_id`` from one distributor."""
    address = to_checksum_address(config.address or "")
    nft_contract, total_earnings, total_distributed, token_earnings, token_withdrawn = (
        await _gather_all(
            reader.read_address(address, DISTRIBUTOR_NFT_CONTRACT),
            reader.read_uint(address, DISTRIBUTOR_TOTAL_EARNINGS),
            reader.read_uint(address, DISTRIBUTOR_TOTAL_DISTRIBUTED),
            reader.read_uint(address, DISTRIBUTOR_USER_EARNINGS, (token_id,)),
            reader.read_uint(address, DISTRIBUTOR_WITHDRAWN, (token_id,)),
        )
    )
    return DistributorReads(
        address=address,
        nft_contract=nft_contract,
        total_earnings=total_earnings,
        total_distributed=total_distributed,
        token_earnings=token_earnings,
        token_withdrawn=token_withdrawn,
    )


__all__ = [
    "DistributorReads",
    "fetch_contract_detail",
    "fetch_distributor_reads",
]
