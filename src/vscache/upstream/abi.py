"""
Minimal ABI helpers for read-only ``eth_call`` requests.

Only the static types used by the NFT and distributor view methods are
supported: ``uint256`` and ``address`` arguments, ``uint256`` / ``address`` /
``string`` return values. Keccak-256 and EIP-55 checksums come from eth-utils.
"""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import keccak
from eth_utils import to_checksum_address as _eth_checksum

from vscache.core.exceptions import InvalidAddressError
from vscache.core.logging import get_logger

logger = get_logger("upstream.abi")

_HEX_ADDRESS = re.compile(r"^(0[xX])?[0-9a-fA-F]{40}$")


@lru_cache(maxsize=128)
def function_selector(signature: str) -> str:
    """First 4 bytes of keccak256(signature), as 8 hex chars."""
    return keccak(text=signature).hex()[:8]


def to_checksum_address(address: str) -> str:
    """
    Return the EIP-55 checksummed form of ``address``.

    A mixed-case input whose checksum does not verify is re-derived from its
    lower-cased form instead of being rejected.

    Raises:
        InvalidAddressError: If the input is not 20 bytes of hex
    """
    if not isinstance(address, str) or not _HEX_ADDRESS.match(address.strip()):
        raise InvalidAddressError(str(address))

    raw = address.strip()
    body = raw[2:] if raw[:2] in ("0x", "0X") else raw
    checksummed = _eth_checksum("0x" + body.lower())

    is_mixed_case = body != body.lower() and body != body.upper()
    if is_mixed_case and checksummed[2:] != body:
        logger.warning(f"Invalid checksum for {raw}, re-deriving from lower case")
    return checksummed


def encode_uint256(value: int) -> str:
    """Encode uint256 as 32-byte hex."""
    if value < 0:
        raise ValueError("uint256 cannot be negative")
    return f"{value:064x}"


def encode_address(address: str) -> str:
    """Encode address as 32-byte hex (left-padded)."""
    clean = address.lower().replace("0x", "")
    return clean.rjust(64, "0")


def encode_call(signature: str, args: tuple[int | str, ...] = ()) -> str:
    """Build ``0x``-prefixed calldata for a call with static arguments."""
    arg_types = signature[signature.index("(") + 1 : -1]
    types = [t for t in arg_types.split(",") if t]
    if len(types) != len(args):
        raise ValueError(f"{signature} expects {len(types)} arguments, got {len(args)}")

    encoded = []
    for arg_type, value in zip(types, args):
        if arg_type == "address":
            encoded.append(encode_address(str(value)))
        elif arg_type.startswith("uint"):
            encoded.append(encode_uint256(int(value)))
        else:
            raise ValueError(f"Unsupported argument type: {arg_type}")
    return "0x" + function_selector(signature) + "".join(encoded)


def decode_uint256(hex_data: str) -> int:
    """Decode uint256 from 32-byte hex."""
    if not hex_data or len(hex_data) < 64:
        raise ValueError("uint256 result is shorter than 32 bytes")
    return int(hex_data[:64], 16)


def decode_address(hex_data: str) -> str:
    """Decode address from 32-byte hex."""
    if not hex_data or len(hex_data) < 64:
        raise ValueError("address result is shorter than 32 bytes")
    return to_checksum_address("0x" + hex_data[24:64])


def decode_string(hex_data: str, offset: int = 0) -> str:
    """Decode a dynamic string from ABI-encoded hex data."""
    if not hex_data or len(hex_data) < offset + 64:
        raise ValueError("string result is missing its offset word")
    str_offset = int(hex_data[offset : offset + 64], 16) * 2
    if len(hex_data) < str_offset + 64:
        raise ValueError("string result is missing its length word")
    str_len = int(hex_data[str_offset : str_offset + 64], 16)
    str_start = str_offset + 64
    str_hex = hex_data[str_start : str_start + str_len * 2]
    if len(str_hex) != str_len * 2:
        raise ValueError("string result is truncated")
    return bytes.fromhex(str_hex).decode("utf-8", errors="replace")


__all__ = [
    "decode_address",
    "decode_string",
    "decode_uint256",
    "encode_address",
    "encode_call",
    "encode_uint256",
    "function_selector",
    "to_checksum_address",
]
