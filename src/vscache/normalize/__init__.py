"""Normalizers and the shared schema-with-defaults they are built on."""

from vscache.normalize.normalizers import (
    normalize_address_info,
    normalize_address_tokens,
    normalize_balance,
    normalize_market_info,
    normalize_token_balances,
    normalize_transactions,
)
from vscache.normalize.schema import Field, FieldKind, apply_schema
from vscache.normalize.units import decimal_to_str, format_units

__all__ = [
    "Field",
    "FieldKind",
    "apply_schema",
    "decimal_to_str",
    "format_units",
    "normalize_address_info",
    "normalize_address_tokens",
    "normalize_balance",
    "normalize_market_info",
    "normalize_token_balances",
    "normalize_transactions",
]
