"""Unit tests for resource normalizers."""

import pytest

from vscache.core.exceptions import MalformedUpstreamDataError
from vscache.normalize import (
    normalize_address_info,
    normalize_address_tokens,
    normalize_balance,
    normalize_market_info,
    normalize_token_balances,
    normalize_transactions,
)


class TestBalance:
    def test_converts_base_units(self):
        assert normalize_balance("0xABC", "1500000000000000000") == {
            "address": "0xABC",
            "balance": "1.5",
        }

    def test_missing_result_is_zero(self):
        assert normalize_balance("0xABC", None)["balance"] == "0"

    def test_garbage_result_raises(self):
        with pytest.raises(MalformedUpstreamDataError):
            normalize_balance("0xABC", {"unexpected": "shape"})


class TestAddressInfo:
    def test_full_record(self):
        raw = {
            "hash": "0xAbC",
            "coin_balance": "1000",
            "block_number_balance_updated_at": 123,
            "is_contract": True,
            "has_tokens": True,
            "has_token_transfers": False,
            "is_verified": True,
            "creation_tx_hash": "0xtx",
            "creator_address_hash": "0xcreator",
        }
        assert normalize_address_info("0xabc", raw) == {
            "address": "0xAbC",
            "balance": "1000",
            "lastUpdatedBlock": 123,
            "isContract": True,
            "hasTokens": True,
            "hasTokenTransfers": False,
            "isVerified": True,
            "creationTxHash": "0xtx",
            "creatorAddress": "0xcreator",
        }

    def test_sparse_record_gets_defaults(self):
        info = normalize_address_info("0xabc", {})
        assert info["address"] == "0xabc"
        assert info["balance"] == "0"
        assert info["lastUpdatedBlock"] == 0
        assert info["isContract"] is False
        assert info["creationTxHash"] is None


class TestTokenBalances:
    def test_token_list(self):
        result = [
            {
                "contractAddress": "0xtoken",
                "name": "Wrapped VSG",
                "symbol": "WVSG",
                "decimals": "18",
                "balance": "5",
                "type": "ERC-20",
            },
            {},
        ]
        normalized = normalize_token_balances("0xabc", result)
        assert normalized["address"] == "0xabc"
        assert normalized["tokens"][0] == {
            "contractAddress": "0xtoken",
            "name": "Wrapped VSG",
            "symbol": "WVSG",
            "decimals": 18,
            "balance": "5",
            "type": "ERC-20",
        }
        assert normalized["tokens"][1]["name"] == "Unknown Token"
        assert normalized["tokens"][1]["balance"] == "0"

    def test_null_result_is_empty(self):
        assert normalize_token_balances("0xabc", None) == {"address": "0xabc", "tokens": []}

    def test_non_list_raises(self):
        with pytest.raises(MalformedUpstreamDataError):
            normalize_token_balances("0xabc", "Max rate limit reached")


class TestAddressTokens:
    def test_paginated_envelope(self):
        raw = {
            "items": [
                {
                    "token": {
                        "address": "0xtoken",
                        "name": "Diamond NFT",
                        "symbol": "DNFT",
                        "decimals": None,
                        "type": "ERC-721",
                    },
                    "value": "2",
                }
            ],
            "next_page_params": None,
        }
        assert normalize_address_tokens("0xabc", raw) == {
            "address": "0xabc",
            "tokens": [
                {
                    "address": "0xtoken",
                    "name": "Diamond NFT",
                    "symbol": "DNFT",
                    "decimals": 0,
                    "balance": "2",
                    "type": "ERC-721",
                }
            ],
        }

    def test_bare_flat_list(self):
        raw = [{"address": "0xt", "name": "T", "symbol": "T", "decimals": "6", "balance": "7"}]
        tokens = normalize_address_tokens("0xabc", raw)["tokens"]
        assert tokens[0]["decimals"] == 6
        assert tokens[0]["balance"] == "7"
        assert tokens[0]["type"] == "unknown"


class TestTransactions:
    def test_page_of_transactions(self):
        result = [
            {
                "hash": "0x1",
                "blockNumber": "10",
                "timeStamp": "1700000000",
                "from": "0xa",
                "to": "0xb",
                "value": "1000",
                "gas": "21000",
                "gasPrice": "1",
                "gasUsed": "21000",
                "isError": "0",
                "contractAddress": "",
                "confirmations": "5",
            }
        ]
        normalized = normalize_transactions("0xa", 2, 25, result)
        assert normalized["page"] == 2
        assert normalized["limit"] == 25
        tx = normalized["transactions"][0]
        assert tx["blockNumber"] == 10
        assert tx["timeStamp"] == 1700000000
        assert tx["value"] == "1000"
        assert tx["confirmations"] == 5

    def test_missing_hash_raises(self):
        with pytest.raises(MalformedUpstreamDataError, match="hash"):
            normalize_transactions("0xa", 1, 50, [{"value": "1"}])


class TestMarketInfo:
    def test_derived_figures(self):
        raw = {
            "market_data": {
                "current_price": {"usd": 0.5, "btc": 0.00001},
                "total_supply": 1000,
                "circulating_supply": 400,
                "market_cap": {"usd": 200},
                "total_volume": {"usd": 50},
                "market_cap_rank": 900,
            },
            "tickers": [
                {"market": {"name": "DEX"}, "converted_volume": {"usd": 12.5}, "trust_score": "green"}
            ],
            "last_updated": "2024-01-01T00:00:00Z",
        }
        info = normalize_market_info(raw)

        assert info["price"]["current"] == 0.5
        assert info["price"]["priceInBtc"] == 0.00001
        assert info["supply"]["locked"] == 600
        assert info["market"]["volumeToMarketCap"] == 0.25
        assert info["market"]["marketCapRank"] == 900
        assert info["exchanges"] == [
            {"name": "DEX", "volume24h": 12.5, "trustScore": "green", "lastTraded": None}
        ]
        assert info["lastUpdated"] == "2024-01-01T00:00:00Z"

    def test_empty_snapshot_defaults(self):
        info = normalize_market_info({})
        assert info["price"]["current"] == 0
        assert info["supply"]["locked"] == 0
        assert info["market"]["volumeToMarketCap"] == 0
        assert info["community"]["twitterFollowers"] == 0
        assert info["exchanges"] == []
