"""
Block-explorer fetchers.

Two API styles are used: the etherscan-compatible ``/api?module=...``
endpoints, which wrap results in a ``{status, message, result}`` envelope,
and the ``/v2`` REST endpoints, which return the resource directly.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

import httpx

from vscache.core.config import NetworkContext
from vscache.core.exceptions import MalformedUpstreamDataError, UpstreamRejectedError
from vscache.core.logging import get_logger
from vscache.upstream.http import UpstreamClient

logger = get_logger("upstream.explorer")


def unwrap_envelope(data: Any, url: str) -> Any:
    """
    Return ``result`` from a module-style response.

    Raises:
        UpstreamRejectedError: The explorer reported ``status == "0"``
        MalformedUpstreamDataError: The response is not an envelope object
    """
    if not isinstance(data, dict):
        raise MalformedUpstreamDataError(
            f"Expected an explorer envelope, got {type(data).__name__}", url=url
        )
    if str(data.get("status")) == "0":
        message = data.get("message") or "Unknown error"
        logger.warning(f"Explorer rejected {url}: {message}")
        raise UpstreamRejectedError(message, result=data.get("result"), url=url)
    return data.get("result")


class ExplorerFetcher:
    """Fetches raw explorer resources for the network in a NetworkContext."""

    def __init__(self, upstream: UpstreamClient) -> None:
        self._upstream = upstream

    async def _module(self, ctx: NetworkContext, **params: Any) -> Any:
        url = f"{ctx.require_explorer_url()}/api?{urlencode(params)}"
        return unwrap_envelope(await self._upstream.fetch_json(url), url)

    async def _v2(self, ctx: NetworkContext, path: str) -> Any:
        return await self._upstream.fetch_json(f"{ctx.require_explorer_url()}/v2{path}")

    async def fetch_balance(self, ctx: NetworkContext, address: str) -> Any:
        return await self._module(ctx, module="account", action="balance", address=address)

    async def fetch_token_list(self, ctx: NetworkContext, address: str) -> Any:
        return await self._module(ctx, module="account", action="tokenlist", address=address)

    async def fetch_transactions(
        self, ctx: NetworkContext, address: str, page: int, limit: int
    ) -> Any:
        return await self._module(
            ctx, module="account", action="txlist", address=address, page=page, offset=limit
        )

    async def fetch_address_info(self, ctx: NetworkContext, address: str) -> Any:
        return await self._v2(ctx, f"/addresses/{quote(address, safe='')}")

    async def fetch_address_tokens(self, ctx: NetworkContext, address: str) -> Any:
        return await self._v2(ctx, f"/addresses/{quote(address, safe='')}/tokens")

    async def fetch_nft_catalogue(self, ctx: NetworkContext) -> list[Any]:
        """
        ERC-721 token catalogue.

        Raises:
            MalformedUpstreamDataError: ``items`` is present but not a list
        """
        url = f"{ctx.require_explorer_url()}/v2/tokens?{urlencode({'type': 'ERC-721'})}"
        data = await self._upstream.fetch_json(url)
        if not isinstance(data, dict):
            raise MalformedUpstreamDataError(
                f"Expected catalogue object, got {type(data).__name__}", url=url
            )
        items = data.get("items")
        if items is None:
            return []
        if not isinstance(items, list):
            raise MalformedUpstreamDataError("Catalogue 'items' is not a list", field="items", url=url)
        return items

    async def ping(self, ctx: NetworkContext) -> bool:
        """Whether the explorer base URL answers at all."""
        base = ctx.require_explorer_url()
        try:
            await self._upstream.http.get(base, timeout=self._upstream.timeout)
        except httpx.HTTPError as e:
            logger.error(f"Explorer connection test failed for {base}: {e}")
            return False
        return True


__all__ = ["ExplorerFetcher", "unwrap_envelope"]
