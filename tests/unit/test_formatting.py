"""Tests for currency and count formatting."""

import re

import pytest

from src.shared.formatting import format_currency, format_integer, format_plain_number

CURRENCY_PATTERN = re.compile(r"\$\d{1,3}(,\d{3})*\.\d{2}")


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, "$0.00"),
            (5, "$5.00"),
            (1234.5, "$1,234.50"),
            (1_000_000, "$1,000,000.00"),
            (0.2469, "$0.25"),
            (0.001, "$0.00"),
        ],
    )
    def test_known_values(self, value, expected):
        assert format_currency(value) == expected

    def test_half_cent_rounds_away_from_zero(self):
        """Rounding follows the decimal value, not the binary float."""
        assert format_currency(0.125) == "$0.13"
        assert format_currency(2.675) == "$2.68"

    @pytest.mark.parametrize("value", [0, 0.004, 0.005, 1, 9.999, 12.3, 999.995, 123456.789, 1e7, 1e25, 1e26, 1e27, 1e30])
    def test_always_two_fraction_digits_and_dollar_sign(self, value):
        formatted = format_currency(value)
        assert formatted.startswith("$")
        assert CURRENCY_PATTERN.fullmatch(formatted), formatted

    def test_values_beyond_default_decimal_precision(self):
        assert format_currency(1e26) == "$100,000,000,000,000,000,000,000,000.00"
        assert format_currency(-1e27) == "-$1,000,000,000,000,000,000,000,000,000.00"

    def test_negative_value_keeps_sign_before_symbol(self):
        assert format_currency(-12.5) == "-$12.50"


class TestFormatInteger:
    """Tests for format_integer."""

    def test_never_rounds_up(self):
        assert format_integer(4.9) == format_integer(4.0) == "4"

    def test_groups_thousands(self):
        assert format_integer(60000) == "60,000"
        assert format_integer(1234567.89) == "1,234,567"

    def test_floors_just_below_boundary(self):
        assert format_integer(999.999) == "999"


class TestFormatPlainNumber:
    """Tests for format_plain_number."""

    def test_whole_float_drops_decimal(self):
        assert format_plain_number(7.0) == "7"

    def test_fraction_kept(self):
        assert format_plain_number(6.5) == "6.5"

    def test_int_unchanged(self):
        assert format_plain_number(12) == "12"
