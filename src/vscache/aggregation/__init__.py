"""Aggregation of the NFT catalogue with on-chain contract reads."""

from vscache.aggregation.catalogue import group_catalogue, image_url_for
from vscache.aggregation.nft_info import NftInfoAggregator

__all__ = [
    "NftInfoAggregator",
    "group_catalogue",
    "image_url_for",
]
