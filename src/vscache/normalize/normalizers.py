"""
Normalizers: upstream payloads to the service's stable output shapes.

Every function here is pure and routes field access through
``apply_schema`` so missing optional values get the documented defaults.
"""

from __future__ import annotations

from typing import Any

from vscache.core.exceptions import MalformedUpstreamDataError
from vscache.normalize.schema import Field, FieldKind, apply_schema
from vscache.normalize.units import format_units

UNKNOWN = "unknown"

ADDRESS_INFO_SCHEMA = {
    "address": Field("hash", FieldKind.STRING),
    "balance": Field("coin_balance", FieldKind.AMOUNT, default="0"),
    "lastUpdatedBlock": Field("block_number_balance_updated_at", FieldKind.INTEGER, default=0),
    "isContract": Field("is_contract", FieldKind.BOOLEAN, default=False),
    "hasTokens": Field("has_tokens", FieldKind.BOOLEAN, default=False),
    "hasTokenTransfers": Field("has_token_transfers", FieldKind.BOOLEAN, default=False),
    "isVerified": Field("is_verified", FieldKind.BOOLEAN, default=False),
    "creationTxHash": Field("creation_tx_hash", FieldKind.STRING),
    "creatorAddress": Field("creator_address_hash", FieldKind.STRING),
}

# module=account&action=tokenlist
TOKEN_BALANCE_SCHEMA = {
    "contractAddress": Field("contractAddress", FieldKind.STRING, default=UNKNOWN),
    "name": Field("name", FieldKind.STRING, default="Unknown Token"),
    "symbol": Field("symbol", FieldKind.STRING, default="UNKNOWN"),
    "decimals": Field("decimals", FieldKind.INTEGER, default=0),
    "balance": Field("balance", FieldKind.AMOUNT, default="0"),
    "type": Field("type", FieldKind.STRING, default=UNKNOWN),
}

# /v2/addresses/{address}/tokens; items are either flat or {"token": {...}, "value": ...}
ADDRESS_TOKEN_SCHEMA = {
    "address": Field(("token.address", "token.address_hash", "address"), FieldKind.STRING, default=UNKNOWN),
    "name": Field(("token.name", "name"), FieldKind.STRING, default="Unknown Token"),
    "symbol": Field(("token.symbol", "symbol"), FieldKind.STRING, default="UNKNOWN"),
    "decimals": Field(("token.decimals", "decimals"), FieldKind.INTEGER, default=0),
    "balance": Field(("value", "balance"), FieldKind.AMOUNT, default="0"),
    "type": Field(("token.type", "type"), FieldKind.STRING, default=UNKNOWN),
}

# module=account&action=txlist
TRANSACTION_SCHEMA = {
    "hash": Field("hash", FieldKind.STRING, required=True),
    "blockNumber": Field("blockNumber", FieldKind.INTEGER, default=0),
    "timeStamp": Field("timeStamp", FieldKind.INTEGER, default=0),
    "from": Field("from", FieldKind.STRING, default=UNKNOWN),
    "to": Field("to", FieldKind.STRING, default=""),
    "value": Field("value", FieldKind.AMOUNT, default="0"),
    "gas": Field("gas", FieldKind.AMOUNT, default="0"),
    "gasPrice": Field("gasPrice", FieldKind.AMOUNT, default="0"),
    "gasUsed": Field("gasUsed", FieldKind.AMOUNT, default="0"),
    "isError": Field("isError", FieldKind.STRING, default="0"),
    "contractAddress": Field("contractAddress", FieldKind.STRING, default=""),
    "confirmations": Field("confirmations", FieldKind.INTEGER, default=0),
}

TICKER_SCHEMA = {
    "name": Field("market.name", FieldKind.STRING, default=UNKNOWN),
    "volume24h": Field("converted_volume.usd", FieldKind.NUMBER, default=0),
    "trustScore": Field("trust_score", FieldKind.STRING),
    "lastTraded": Field("last_traded_at", FieldKind.STRING),
}

MARKET_SCHEMA = {
    "price": {
        "current": Field("market_data.current_price.usd", FieldKind.NUMBER, default=0),
        "change24h": Field("market_data.price_change_percentage_24h", FieldKind.NUMBER, default=0),
        "change7d": Field("market_data.price_change_percentage_7d", FieldKind.NUMBER, default=0),
        "change30d": Field("market_data.price_change_percentage_30d", FieldKind.NUMBER, default=0),
        "change60d": Field("market_data.price_change_percentage_60d", FieldKind.NUMBER, default=0),
        "change200d": Field("market_data.price_change_percentage_200d", FieldKind.NUMBER, default=0),
        "ath": Field("market_data.ath.usd", FieldKind.NUMBER, default=0),
        "athDate": Field("market_data.ath_date.usd", FieldKind.STRING),
        "atl": Field("market_data.atl.usd", FieldKind.NUMBER, default=0),
        "atlDate": Field("market_data.atl_date.usd", FieldKind.STRING),
        "high24h": Field("market_data.high_24h.usd", FieldKind.NUMBER, default=0),
        "low24h": Field("market_data.low_24h.usd", FieldKind.NUMBER, default=0),
        "priceInBtc": Field("market_data.current_price.btc", FieldKind.NUMBER, default=0),
        "priceInEth": Field("market_data.current_price.eth", FieldKind.NUMBER, default=0),
    },
    "supply": {
        "total": Field("market_data.total_supply", FieldKind.NUMBER, default=0),
        "circulating": Field("market_data.circulating_supply", FieldKind.NUMBER, default=0),
        "max": Field("market_data.max_supply", FieldKind.NUMBER, default=0),
        "circulationChange24h": Field("market_data.circulating_supply_change_24h", FieldKind.NUMBER),
    },
    "market": {
        "marketCap": Field("market_data.market_cap.usd", FieldKind.NUMBER, default=0),
        "marketCapRank": Field("market_data.market_cap_rank", FieldKind.INTEGER, default=0),
        "volume24h": Field("market_data.total_volume.usd", FieldKind.NUMBER, default=0),
        "marketCapChange24h": Field(
            "market_data.market_cap_change_percentage_24h", FieldKind.NUMBER, default=0
        ),
        "fullyDilutedValuation": Field("market_data.fully_diluted_valuation.usd", FieldKind.NUMBER, default=0),
        "totalValueLocked": Field("market_data.total_value_locked", FieldKind.ANY),
        "mcapToTvlRatio": Field("market_data.mcap_to_tvl_ratio", FieldKind.NUMBER),
    },
    "community": {
        "twitterFollowers": Field("community_data.twitter_followers", FieldKind.INTEGER, default=0),
        "telegramUsers": Field("community_data.telegram_channel_user_count", FieldKind.INTEGER, default=0),
        "redditSubscribers": Field("community_data.reddit_subscribers", FieldKind.INTEGER, default=0),
        "sentimentVotesUpPercentage": Field("sentiment_votes_up_percentage", FieldKind.NUMBER, default=0),
        "sentimentVotesDownPercentage": Field("sentiment_votes_down_percentage", FieldKind.NUMBER, default=0),
    },
    "developer": {
        "forks": Field("developer_data.forks", FieldKind.INTEGER, default=0),
        "stars": Field("developer_data.stars", FieldKind.INTEGER, default=0),
        "subscribers": Field("developer_data.subscribers", FieldKind.INTEGER, default=0),
        "totalIssues": Field("developer_data.total_issues", FieldKind.INTEGER, default=0),
        "closedIssues": Field("developer_data.closed_issues", FieldKind.INTEGER, default=0),
        "pullRequestsMerged": Field("developer_data.pull_requests_merged", FieldKind.INTEGER, default=0),
        "commitCount4Weeks": Field("developer_data.commit_count_4_weeks", FieldKind.INTEGER, default=0),
    },
    "exchanges": Field("tickers", FieldKind.LIST, default=[], item_schema=TICKER_SCHEMA),
    "lastUpdated": Field("last_updated", FieldKind.STRING),
}


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedUpstreamDataError(
            f"Expected a list of {what}, got {type(value).__name__}", field=what
        )
    return value


def _apply_each(schema, items: list[Any]) -> list[dict[str, Any]]:
    return [apply_schema(schema, item) for item in items]


def normalize_balance(address: str, result: Any) -> dict[str, Any]:
    """Native balance in base units → decimal text at 18 decimals."""
    return {"address": address, "balance": format_units("0" if result in (None, "") else result)}


def normalize_address_info(address: str, raw: Any) -> dict[str, Any]:
    info = apply_schema(ADDRESS_INFO_SCHEMA, raw)
    if info["address"] is None:
        info["address"] = address
    return info


def normalize_token_balances(address: str, result: Any) -> dict[str, Any]:
    tokens = _as_list(result, "tokens")
    return {"address": address, "tokens": _apply_each(TOKEN_BALANCE_SCHEMA, tokens)}


def normalize_address_tokens(address: str, raw: Any) -> dict[str, Any]:
    # v2 answers either a bare list or a paginated {"items": [...]} envelope
    if isinstance(raw, dict):
        raw = raw.get("items")
    tokens = _as_list(raw, "tokens")
    return {"address": address, "tokens": _apply_each(ADDRESS_TOKEN_SCHEMA, tokens)}


def normalize_transactions(address: str, page: int, limit: int, result: Any) -> dict[str, Any]:
    transactions = _as_list(result, "transactions")
    return {
        "address": address,
        "page": page,
        "limit": limit,
        "transactions": _apply_each(TRANSACTION_SCHEMA, transactions),
    }


def normalize_market_info(raw: Any) -> dict[str, Any]:
    """
    Market snapshot with derived figures.

    ``supply.locked`` is total minus circulating supply and
    ``market.volumeToMarketCap`` is 24h volume over market cap (0 when the
    market cap is unknown).
    """
    info = apply_schema(MARKET_SCHEMA, raw)

    supply = info["supply"]
    supply["locked"] = supply["total"] - supply["circulating"]

    market = info["market"]
    market["volumeToMarketCap"] = (
        market["volume24h"] / market["marketCap"] if market["marketCap"] else 0
    )
    return info


__all__ = [
    "ADDRESS_INFO_SCHEMA",
    "ADDRESS_TOKEN_SCHEMA",
    "MARKET_SCHEMA",
    "TICKER_SCHEMA",
    "TOKEN_BALANCE_SCHEMA",
    "TRANSACTION_SCHEMA",
    "normalize_address_info",
    "normalize_address_tokens",
    "normalize_balance",
    "normalize_market_info",
    "normalize_token_balances",
    "normalize_transactions",
]
