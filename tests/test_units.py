"""Unit tests for base-unit formatting."""

from decimal import Decimal

import pytest

from vscache.core.exceptions import MalformedUpstreamDataError
from vscache.normalize.units import decimal_to_str, format_units


class TestFormatUnits:
    def test_one_and_a_half(self):
        assert format_units("1500000000000000000") == "1.5"

    def test_zero(self):
        assert format_units(0) == "0"
        assert format_units("0") == "0"

    def test_whole_number_has_no_fraction(self):
        assert format_units(10**18) == "1"
        assert format_units(str(25 * 10**18)) == "25"

    def test_smallest_unit(self):
        assert format_units(1) == "0.000000000000000001"

    def test_exact_beyond_float_precision(self):
        assert format_units("123456789012345678901234567890") == "123456789012.34567890123456789"

    def test_custom_decimals(self):
        assert format_units("1500000", decimals=6) == "1.5"
        assert format_units(42, decimals=0) == "42"

    def test_negative(self):
        assert format_units("-1500000", decimals=6) == "-1.5"

    def test_surrounding_whitespace(self):
        assert format_units(" 2000000000000000000 ") == "2"

    @pytest.mark.parametrize("value", ["abc", "1.5", "", 1.5, None, True])
    def test_rejects_non_integers(self, value):
        with pytest.raises(MalformedUpstreamDataError):
            format_units(value)


class TestDecimalToStr:
    def test_strips_trailing_zeros(self):
        assert decimal_to_str(Decimal("225.000")) == "225"
        assert decimal_to_str(Decimal("1.50")) == "1.5"

    def test_no_exponent_notation(self):
        assert decimal_to_str(Decimal("1E+3")) == "1000"
        assert decimal_to_str(Decimal("1E-7")) == "0.0000001"

    def test_zero(self):
        assert decimal_to_str(Decimal("0.00")) == "0"
        assert decimal_to_str(Decimal("-0")) == "0"

    def test_product_of_per_token_and_supply(self):
        assert decimal_to_str(Decimal("1.5") * 150) == "225"
