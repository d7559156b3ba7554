"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# Decimal with exactly two fraction digits, e.g. "1,23,456.78" or "250.00".
STATEMENT_AMOUNT_RE = re.compile(r"[\d,]+\.\d{2}")

# Difference below which two amounts are considered equal.
AMOUNT_TOLERANCE = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "Rs.123.45", "INR 123", "₹123"
    - "1,234.56" and Indian grouping such as "1,23,456.78"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency markers
    amount_str = re.sub(r"(?i)^(rs\.?|inr)", "", amount_str.strip())
    amount_str = re.sub(r"[₹$€£]", "", amount_str)

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def try_parse_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an amount, returning None instead of raising."""
    if amount_str is None:
        return None
    try:
        return parse_amount(amount_str)
    except ValueError:
        return None


def find_statement_amounts(text: str) -> list[Decimal]:
    """Return every two-decimal amount in text, left to right."""
    amounts = []
    for match in STATEMENT_AMOUNT_RE.finditer(text):
        amount = try_parse_amount(match.group(0))
        if amount is not None:
            amounts.append(amount)
    return amounts


def first_statement_amount(text: str) -> Optional[Decimal]:
    """Return the first two-decimal amount in text, if any."""
    amounts = find_statement_amounts(text)
    return amounts[0] if amounts else None


def amounts_equal(a: Decimal, b: Decimal) -> bool:
    """Check two amounts are within AMOUNT_TOLERANCE of each other."""
    return abs(a - b) < AMOUNT_TOLERANCE
