# backend/app/utils/number_format.py
"""
Parsing of human-formatted numbers.

Product pages show values like "1,234.56 CZK", "95.50 %" or "(12.00)".
`unformat_number` turns them into Decimals:

    >>> unformat_number("1,234.56 CZK")
    Decimal('1234.56')
    >>> unformat_number("(12.00)")
    Decimal('-12.00')
    >>> unformat_number("n/a") is None
    True
"""

import re
from decimal import Decimal, InvalidOperation

_PARENTHESISED = re.compile(r"^\((.*\d.*)\)$")
_NOT_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?\d*\.?\d+")


def unformat_number(text: str | None, decimal_separator: str = ".") -> Decimal | None:
    """
    Parse a formatted number, ignoring grouping separators and unit tokens.

    Everything except digits, the decimal separator and '-' is dropped.
    A value wrapped in parentheses is negative (accounting notation).

    Args:
        text: Raw text, e.g. "1,234.56 CZK"
        decimal_separator: Character used for decimals in `text`

    Returns:
        The parsed Decimal, or None when the text holds no digits
    """
    if text is None:
        return None

    value = text.strip()
    if decimal_separator != ".":
        value = value.replace(".", "").replace(decimal_separator, ".")

    match = _PARENTHESISED.match(value)
    if match:
        value = "-" + match.group(1)

    cleaned = _NOT_NUMERIC.sub("", value)
    if not any(ch.isdigit() for ch in cleaned):
        return None

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        pass

    # Stray separators ("1.234.56", "12-3"): keep the leading well-formed part
    leading = _LEADING_NUMBER.match(cleaned)
    if leading is None:
        return None
    return Decimal(leading.group(0))
