# backend/tests/utils/test_number_format.py
"""
Tests for unformat_number.
"""

from decimal import Decimal

import pytest

from app.utils.number_format import unformat_number


class TestUnformatNumber:
    """Parsing of human-formatted numbers."""

    @pytest.mark.parametrize("text,expected", [
        ("1,234.56 CZK", Decimal("1234.56")),
        ("1234.56", Decimal("1234.56")),
        ("95.50 %", Decimal("95.50")),
        ("  42 ", Decimal("42")),
        ("1 000 000.5", Decimal("1000000.5")),
        ("-3.25", Decimal("-3.25")),
        ("(12.00)", Decimal("-12.00")),
    ])
    def test_parses_formatted_values(self, text, expected):
        """Grouping separators and units are ignored."""
        assert unformat_number(text) == expected

    def test_grouping_and_currency_do_not_change_the_value(self):
        assert unformat_number("1,234.56 CZK") == unformat_number("1234.56") == Decimal("1234.56")

    def test_zero_is_a_number_not_missing(self):
        """'0' parses to zero, which callers treat as an invalid price."""
        result = unformat_number("0")
        assert result is not None
        assert result == 0

    @pytest.mark.parametrize("text", [None, "", "   ", "n/a", "CZK", "-"])
    def test_no_digits_returns_none(self, text):
        """Text without digits has no value."""
        assert unformat_number(text) is None

    def test_stray_separators_keep_leading_number(self):
        """Malformed text falls back to the leading well-formed number."""
        assert unformat_number("1.234.56") == Decimal("1.234")

    def test_custom_decimal_separator(self):
        """European formatting with a comma decimal separator."""
        assert unformat_number("1.234,56 EUR", decimal_separator=",") == Decimal("1234.56")
