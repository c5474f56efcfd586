"""Tests for smallest-unit conversion."""

from __future__ import annotations

import math

import pytest

from tinypay_checkout.errors.checkout_errors import AmountParseError
from tinypay_checkout.networks.units import (
    decimals,
    format_amount,
    from_smallest_unit,
    parse_amount,
    to_smallest_unit,
)


class TestDecimals:
    @pytest.mark.parametrize(("currency", "expected"), [("SOL", 9), ("USDT", 6), ("USDC", 6)])
    def test_known(self, currency, expected):
        assert decimals(currency) == expected

    def test_unknown_defaults_to_six(self):
        assert decimals("XYZ") == 6


class TestParseAmount:
    def test_decimal_string(self):
        assert parse_amount("1.5") == 1.5

    def test_whitespace_trimmed(self):
        assert parse_amount(" 2 ") == 2.0

    def test_numbers_accepted(self):
        assert parse_amount(3) == 3.0
        assert parse_amount(0.25) == 0.25

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "nan", "inf", "-inf"])
    def test_rejected(self, text):
        with pytest.raises(AmountParseError):
            parse_amount(text)

    def test_rejects_bool_and_none(self):
        with pytest.raises(AmountParseError):
            parse_amount(True)
        with pytest.raises(AmountParseError):
            parse_amount(None)

    def test_rejects_nan_float(self):
        with pytest.raises(AmountParseError):
            parse_amount(math.nan)

    @pytest.mark.parametrize(("text", "currency"), [("1e300", "SOL"), ("1.7e308", "USDC")])
    def test_rejects_overflow_in_smallest_units(self, text, currency):
        assert parse_amount(text) > 0
        with pytest.raises(AmountParseError):
            parse_amount(text, currency)

    def test_currency_scale_within_range(self):
        assert parse_amount("1e290", "SOL") == 1e290


class TestToSmallestUnit:
    def test_sol(self):
        assert to_smallest_unit("1.5", "SOL") == 1_500_000_000

    def test_usdc(self):
        assert to_smallest_unit("2.5", "USDC") == 2_500_000

    def test_zero(self):
        assert to_smallest_unit("0", "SOL") == 0

    def test_unknown_currency_uses_six_decimals(self):
        assert to_smallest_unit("1", "XYZ") == 1_000_000

    def test_truncates_extra_precision(self):
        assert to_smallest_unit("0.0000015", "USDT") == 1

    @pytest.mark.parametrize("text", ["", "abc", None])
    def test_unparseable_is_zero(self, text):
        assert to_smallest_unit(text, "SOL") == 0

    @pytest.mark.parametrize(
        ("text", "currency"), [("1e300", "SOL"), ("1.7e308", "USDC"), ("-1e300", "SOL")]
    )
    def test_overflow_is_zero(self, text, currency):
        assert to_smallest_unit(text, currency) == 0


class TestFromSmallestUnit:
    def test_sol(self):
        assert from_smallest_unit("1500000000", "SOL") == 1.5

    def test_usdc(self):
        assert from_smallest_unit("2500000", "USDC") == 2.5

    def test_int_input(self):
        assert from_smallest_unit(1_000_000_000, "SOL") == 1.0

    @pytest.mark.parametrize("text", ["", "abc", None])
    def test_unparseable_is_zero(self, text):
        assert from_smallest_unit(text, "SOL") == 0.0


class TestFormatAmount:
    def test_two_places(self):
        assert format_amount(1.5, "SOL") == "1.50 SOL"

    def test_zero(self):
        assert format_amount(0.0, "USDC") == "0.00 USDC"


class TestRoundTrip:
    @pytest.mark.parametrize("currency", ["SOL", "USDT", "USDC", "XYZ"])
    @pytest.mark.parametrize("units", [0, 1, 999, 1_500_000, 123_456_789, 10**15])
    def test_within_float_precision(self, currency, units):
        display = from_smallest_unit(str(units), currency)
        assert abs(to_smallest_unit(display, currency) - units) <= 1

    def test_usdc_display(self):
        assert from_smallest_unit("1500000", "USDC") == 1.5
