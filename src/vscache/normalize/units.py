"""Exact conversion of on-chain base-unit integers to decimal text."""

from __future__ import annotations

import re
from decimal import Decimal

from vscache.core.exceptions import MalformedUpstreamDataError

NATIVE_DECIMALS = 18

_INTEGER_TEXT = re.compile(r"^-?\d+$")


def format_units(value: int | str, decimals: int = NATIVE_DECIMALS) -> str:
    """
    Convert a base-unit integer to decimal text using integer arithmetic only.

    >>> format_units("1500000000000000000")
    '1.5'
    >>> format_units(0)
    '0'

    Raises:
        MalformedUpstreamDataError: ``value`` is not an integer or integer string
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise MalformedUpstreamDataError(f"Expected a base-unit integer, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not _INTEGER_TEXT.match(text):
            raise MalformedUpstreamDataError(f"Expected a base-unit integer, got {value!r}")
        value = int(text)

    whole, fraction = divmod(abs(value), 10**decimals)
    result = str(whole)
    if decimals:
        fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
        if fraction_text:
            result = f"{result}.{fraction_text}"
    if value < 0:
        result = f"-{result}"
    return result


def decimal_to_str(value: Decimal) -> str:
    """Plain (non-exponent) text for a Decimal without trailing zeros."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


__all__ = ["NATIVE_DECIMALS", "decimal_to_str", "format_units"]
