"""
NFT information aggregation.

Joins the explorer's NFT catalogue with on-chain reads from every configured
NFT contract and gas-fee distributor. The catalogue is mandatory; on-chain
enrichment is best-effort and only attempted on mainnet.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any, Callable

from vscache.aggregation.catalogue import find_group, group_catalogue
from vscache.core.config import NetworkContext
from vscache.core.exceptions import VSCacheError
from vscache.core.logging import get_logger
from vscache.core.types import (
    ContractConfig,
    DistributorConfig,
    DistributorDetail,
    NftContractDetail,
    NftGroup,
)
from vscache.normalize.units import decimal_to_str, format_units
from vscache.upstream.explorer import ExplorerFetcher
from vscache.upstream.http import UpstreamClient
from vscache.upstream.nft import fetch_contract_detail, fetch_distributor_reads
from vscache.upstream.rpc import OnChainReader

logger = get_logger("aggregation")

SUCCESS_MESSAGE = "NFT and Gas Fee Distributor details fetched successfully"
CATALOGUE_ONLY_MESSAGE = "NFT info fetched successfully"
PARTIAL_MESSAGE = "Partial data available - blockchain data fetch failed"


def _raise_fatal(results: list[Any]) -> None:
    # Cancellation and interpreter exits are not per-item failures
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result


class NftInfoAggregator:
    """
    Builds the ``/api/nft-info`` document.

    Args:
        explorer: Explorer fetcher used for the ERC-721 catalogue
        upstream: Shared upstream client handed to the on-chain reader
        earnings_token_id: Token id whose per-token earnings are reported
        reader_factory: Builds an OnChainReader for an RPC URL (tests inject fakes)
    """

    def __init__(
        self,
        explorer: ExplorerFetcher,
        upstream: UpstreamClient,
        earnings_token_id: int = 1,
        reader_factory: Callable[[str], OnChainReader] | None = None,
    ) -> None:
        self._explorer = explorer
        self._earnings_token_id = earnings_token_id
        self._reader_factory = reader_factory or (lambda url: OnChainReader(url, upstream))

    async def build(self, ctx: NetworkContext) -> dict[str, Any]:
        """
        Aggregate catalogue and on-chain data for the network in ``ctx``.

        Raises:
            VSCacheError: The catalogue itself could not be fetched or parsed
        """
        items = await self._explorer.fetch_nft_catalogue(ctx)
        groups = group_catalogue(items)
        nft_info = [group.to_dict() for group in groups]

        if not ctx.network.is_mainnet():
            return {
                "message": CATALOGUE_ONLY_MESSAGE,
                "totalNftTypes": len(groups),
                "data": nft_info,
            }

        try:
            nft_details, distributor_details = await self._enrich(ctx, groups)
        except VSCacheError as e:
            logger.warning(f"On-chain enrichment failed on {ctx.network.value}: {e}")
            return {
                "message": PARTIAL_MESSAGE,
                "totalNftTypes": len(groups),
                "data": nft_info,
                "error": str(e),
            }

        return {
            "message": SUCCESS_MESSAGE,
            "totalNftTypes": len(groups),
            "data": nft_info,
            "nftDetails": [detail.to_dict() for detail in nft_details],
            "distributorDetails": [detail.to_dict() for detail in distributor_details],
        }

    async def _enrich(
        self, ctx: NetworkContext, groups: list[NftGroup]
    ) -> tuple[list[NftContractDetail], list[DistributorDetail]]:
        reader = self._reader_factory(ctx.require_rpc_url())

        contracts = [config for config in ctx.nft_contracts if config.address]
        distributors = [config for config in ctx.distributors if config.address]
        skipped = len(ctx.nft_contracts) - len(contracts) + len(ctx.distributors) - len(distributors)
        if skipped:
            logger.debug(f"Skipping {skipped} unconfigured contract address(es)")

        results = await asyncio.gather(
            *(self._contract_branch(reader, config) for config in contracts),
            *(self._distributor_branch(reader, config, groups) for config in distributors),
            return_exceptions=True,
        )
        _raise_fatal(results)

        return list(results[: len(contracts)]), list(results[len(contracts) :])

    async def _contract_branch(
        self, reader: OnChainReader, config: ContractConfig
    ) -> NftContractDetail:
        try:
            return await fetch_contract_detail(reader, config)
        except Exception as e:
            logger.warning(f"NFT contract {config.name} ({config.address}) read failed: {e}")
            return NftContractDetail.fallback(config, str(e))

    async def _distributor_branch(
        self, reader: OnChainReader, config: DistributorConfig, groups: list[NftGroup]
    ) -> DistributorDetail:
        try:
            reads = await fetch_distributor_reads(reader, config, self._earnings_token_id)
        except Exception as e:
            logger.warning(f"Distributor {config.name} ({config.address}) read failed: {e}")
            return DistributorDetail.fallback(config, str(e))

        group = find_group(groups, config.collection_name)
        per_token = format_units(reads.token_earnings)
        supply = group.total_supply if group else 0

        return DistributorDetail(
            distributor_address=reads.address,
            name=config.name,
            linked_nft_contract=reads.nft_contract,
            collection=group.to_dict() if group else None,
            total_pool_earnings=format_units(reads.total_earnings),
            total_distributed=format_units(reads.total_distributed),
            per_token_earnings=per_token,
            total_withdrawn=format_units(reads.token_withdrawn),
            total_type_earnings=decimal_to_str(Decimal(per_token) * supply),
        )


__all__ = [
    "CATALOGUE_ONLY_MESSAGE",
    "NftInfoAggregator",
    "PARTIAL_MESSAGE",
    "SUCCESS_MESSAGE",
]
