"""
On-chain read capability: ``eth_call`` over JSON-RPC.

Reads view methods of the NFT and gas-fee distributor contracts through the
shared UpstreamClient. No web3 dependency: calldata is built with the
helpers in ``vscache.upstream.abi``.
"""

from __future__ import annotations

import itertools

from vscache.core.exceptions import ContractCallError, UpstreamUnavailableError
from vscache.core.logging import get_logger
from vscache.upstream.abi import (
    decode_address,
    decode_string,
    decode_uint256,
    encode_call,
    to_checksum_address,
)
from vscache.upstream.http import UpstreamClient

logger = get_logger("upstream.rpc")

_request_ids = itertools.count(1)


class OnChainReader:
    """
    JSON-RPC reader bound to one RPC endpoint.

    A reader is created per request from the request's NetworkContext, so
    the endpoint it talks to cannot change while the request is in flight.

    Usage:
        reader = OnChainReader("https://rpc.example", upstream)
        supply = await reader.read_uint("0x...", "totalSupply()")
    """

    def __init__(self, rpc_url: str, upstream: UpstreamClient, timeout: float | None = None) -> None:
        self._rpc_url = rpc_url
        self._upstream = upstream
        self._timeout = timeout

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def call(self, address: str, signature: str, args: tuple[int | str, ...] = ()) -> str:
        """
        Execute a read-only call against ``address``.

        Args:
            address: Contract address (checksummed before use)
            signature: Canonical method signature, e.g. ``"totalSupply()"``
            args: Static arguments matching the signature

        Returns:
            Result hex string without the ``0x`` prefix

        Raises:
            InvalidAddressError: Address is not 20 bytes of hex
            ContractCallError: RPC error, revert, empty result or transport failure
        """
        contract = to_checksum_address(address)
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_call",
            "params": [{"to": contract, "data": encode_call(signature, args)}, "latest"],
            "id": next(_request_ids),
        }

        try:
            response = await self._upstream.request_json(
                "POST", self._rpc_url, json_body=payload, timeout=self._timeout
            )
        except UpstreamUnavailableError as e:
            raise ContractCallError(e.message, address=contract, method=signature) from e

        if not isinstance(response, dict):
            raise ContractCallError("RPC response is not an object", address=contract, method=signature)

        if response.get("error"):
            error = response["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.debug(f"eth_call error from {contract}.{signature}: {message}")
            raise ContractCallError(message, address=contract, method=signature)

        raw = response.get("result")
        if not isinstance(raw, str) or raw in ("0x", ""):
            raise ContractCallError("call returned no data", address=contract, method=signature)

        return raw[2:] if raw.startswith("0x") else raw

    async def read_uint(self, address: str, signature: str, args: tuple[int | str, ...] = ()) -> int:
        result = await self.call(address, signature, args)
        return self._decode(decode_uint256, result, address, signature)

    async def read_address(self, address: str, signature: str, args: tuple[int | str, ...] = ()) -> str:
        result = await self.call(address, signature, args)
        return self._decode(decode_address, result, address, signature)

    async def read_string(self, address: str, signature: str, args: tuple[int | str, ...] = ()) -> str:
        result = await self.call(address, signature, args)
        return self._decode(decode_string, result, address, signature)

    @staticmethod
    def _decode(decoder, result: str, address: str, signature: str):
        try:
            return decoder(result)
        except ValueError as e:
            raise ContractCallError(
                f"could not decode result: {e}", address=address, method=signature
            ) from e


__all__ = ["OnChainReader"]
