"""Unit tests for ABI encoding, decoding and EIP-55 checksums."""

import eth_utils
import pytest

from vscache.core.exceptions import InvalidAddressError
from vscache.upstream.abi import (
    decode_address,
    decode_string,
    decode_uint256,
    encode_call,
    function_selector,
    to_checksum_address,
)

# Reference vectors from EIP-55
CHECKSUMMED = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]


def _abi_string(text: str) -> str:
    data = text.encode("utf-8").hex()
    padded = data.ljust(((len(data) + 63) // 64) * 64, "0")
    return f"{32:064x}{len(text.encode('utf-8')):064x}{padded}"


class TestChecksum:
    @pytest.mark.parametrize("expected", CHECKSUMMED)
    def test_lowercase_input(self, expected):
        assert to_checksum_address(expected.lower()) == expected

    @pytest.mark.parametrize("expected", CHECKSUMMED)
    def test_already_checksummed(self, expected):
        assert to_checksum_address(expected) == expected

    def test_uppercase_prefix_and_body(self):
        expected = CHECKSUMMED[0]
        assert to_checksum_address("0X" + expected[2:].upper()) == expected

    def test_missing_prefix(self):
        expected = CHECKSUMMED[1]
        assert to_checksum_address(expected[2:].lower()) == expected

    def test_bad_checksum_is_rederived(self):
        expected = CHECKSUMMED[0]
        broken = expected[:2] + expected[2:].swapcase()
        assert to_checksum_address(broken) == expected

    @pytest.mark.parametrize("body", ["11" * 20, "ab" * 20, "dEaDbEeF" * 5])
    def test_matches_eth_utils(self, body):
        assert to_checksum_address("0x" + body) == eth_utils.to_checksum_address("0x" + body.lower())

    @pytest.mark.parametrize(
        "address",
        ["0xABC", "", "0x" + "g" * 40, "0x" + "1" * 41, None],
    )
    def test_invalid_address_raises(self, address):
        with pytest.raises(InvalidAddressError):
            to_checksum_address(address)


class TestSelectors:
    @pytest.mark.parametrize(
        ("signature", "selector"),
        [
            ("name()", "06fdde03"),
            ("symbol()", "95d89b41"),
            ("totalSupply()", "18160ddd"),
            ("balanceOf(address)", "70a08231"),
        ],
    )
    def test_known_selectors(self, signature, selector):
        assert function_selector(signature) == selector


class TestEncodeCall:
    def test_no_arguments(self):
        assert encode_call("totalSupply()") == "0x18160ddd"

    def test_uint_argument(self):
        data = encode_call("calculateUserEarnings(uint256)", (1,))
        assert data.startswith("0x" + function_selector("calculateUserEarnings(uint256)"))
        assert data[10:] == "0" * 63 + "1"

    def test_address_argument(self):
        data = encode_call("balanceOf(address)", (CHECKSUMMED[0],))
        assert data == "0x70a08231" + "0" * 24 + CHECKSUMMED[0][2:].lower()

    def test_argument_count_mismatch(self):
        with pytest.raises(ValueError, match="expects 1 arguments"):
            encode_call("calculateUserEarnings(uint256)")


class TestDecode:
    def test_uint256(self):
        assert decode_uint256(f"{150:064x}") == 150

    def test_uint256_too_short(self):
        with pytest.raises(ValueError):
            decode_uint256("ff")

    def test_address_is_checksummed(self):
        word = "0" * 24 + CHECKSUMMED[2][2:].lower()
        assert decode_address(word) == CHECKSUMMED[2]

    def test_string(self):
        assert decode_string(_abi_string("Diamond NFT")) == "Diamond NFT"

    def test_empty_string(self):
        assert decode_string(_abi_string("")) == ""

    def test_truncated_string(self):
        with pytest.raises(ValueError, match="truncated"):
            decode_string(_abi_string("Diamond NFT")[:-64])
