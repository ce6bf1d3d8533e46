"""
Grouped-catalogue aggregation.

The explorer lists every ERC-721 contract separately; collections deployed
more than once show up as several entries with the same name and symbol.
They are merged here into one group per (name, symbol).
"""

from __future__ import annotations

from typing import Any, Iterable

from vscache.core.types import NftGroup
from vscache.normalize.schema import Field, FieldKind, apply_schema

DEFAULT_NFT_IMAGE_URL = (
    "https://i.seadn.io/s/raw/files/5efb70d02a93c52c03a99d0de22b39b0.png?auto=format&dpr=1&w=1000"
)

NFT_IMAGE_URLS: dict[str, str] = {
    "Carbon NFT": (
        "https://purple-abundant-anaconda-910.mypinata.cloud/ipfs/"
        "bafybeid66ramqv5zxhozvigq47lhbexkqigrpvtcd44ddiiikig5rte2ey"
    ),
    "Diamond NFT": (
        "https://i.seadn.io/s/raw/files/6c809b2b51afde81ec63e5377cb863e7.gif?auto=format&dpr=1&w=1000"
    ),
    "Gold NFT": (
        "https://i.seadn.io/s/raw/files/f21efdf06249f173cf359ff5aafcb216.gif?auto=format&dpr=1&w=1000"
    ),
    "Green NFT": (
        "https://i.seadn.io/s/raw/files/51523ca6b0d47ec4d80d1cce7b2fcbac.gif?auto=format&dpr=1&w=1000"
    ),
}

CATALOGUE_ITEM_SCHEMA = {
    "name": Field("name", FieldKind.STRING, default="Unknown NFT"),
    "symbol": Field("symbol", FieldKind.STRING, default="UNKNOWN"),
    "total_supply": Field("total_supply", FieldKind.INTEGER, default=0),
    "holders": Field(("holders", "holders_count"), FieldKind.INTEGER, default=0),
}


def image_url_for(name: str) -> str:
    return NFT_IMAGE_URLS.get(name, DEFAULT_NFT_IMAGE_URL)


def group_catalogue(items: Iterable[Any]) -> list[NftGroup]:
    """
    Merge catalogue entries by (name, symbol) in one pass.

    Supplies and holder counts are summed. Groups keep the order in which
    their first entry appeared.

    Raises:
        MalformedUpstreamDataError: An entry is not an object or has wrong-typed fields
    """
    groups: dict[tuple[str, str], NftGroup] = {}
    for item in items:
        entry = apply_schema(CATALOGUE_ITEM_SCHEMA, item)
        key = (entry["name"], entry["symbol"])
        group = groups.get(key)
        if group is None:
            group = groups[key] = NftGroup(
                name=entry["name"],
                symbol=entry["symbol"],
                total_supply=0,
                holders=0,
                image_url=image_url_for(entry["name"]),
            )
        group.total_supply += entry["total_supply"]
        group.holders += entry["holders"]
    return list(groups.values())


def find_group(groups: Iterable[NftGroup], name: str) -> NftGroup | None:
    """First group whose name equals ``name``."""
    return next((group for group in groups if group.name == name), None)


__all__ = [
    "CATALOGUE_ITEM_SCHEMA",
    "DEFAULT_NFT_IMAGE_URL",
    "NFT_IMAGE_URLS",
    "find_group",
    "group_catalogue",
    "image_url_for",
]
