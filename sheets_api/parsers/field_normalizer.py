"""
Field Normalizer
================

Cleaning rules for tokenized cell values.

Example inputs:
- "  Blue\\n  Shirt  " → clean_field → "Blue Shirt"
- "100\\n+Shipping 20" → parse_price → amount="100", shipping="+Shipping 20",
  display="100 (+Shipping 20)"

Empty or missing input always yields empty output, never an error.
"""

import re
from dataclasses import asdict
from typing import Any, Final

from pydantic.dataclasses import dataclass

LINE_BREAK_PATTERN: Final[re.Pattern[str]] = re.compile(r"\r?\n")
WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s+")


@dataclass(frozen=True)
class PriceValue:
    """
    Compound price cell split on its line break.

    Price cells in the source sheet hold the amount on the first line
    and an optional shipping note on the second.

    Attributes:
        amount: First line of the cell
        shipping: Second line of the cell, empty if absent
        display: "amount (shipping)", or amount alone without shipping
    """

    amount: str = ""
    shipping: str = ""
    display: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping."""
        return asdict(self)


def clean_field(value: str | None) -> str:
    """
    Collapse line breaks and whitespace runs to single spaces and trim.

    Idempotent: clean_field(clean_field(x)) == clean_field(x).
    """
    if not value:
        return ""

    value = LINE_BREAK_PATTERN.sub(" ", value)
    value = WHITESPACE_PATTERN.sub(" ", value)
    return value.strip()


def keep_line_breaks(value: str | None) -> str:
    """Normalise CRLF to LF and trim, keeping internal line breaks."""
    if not value:
        return ""
    return LINE_BREAK_PATTERN.sub("\n", value).strip()


def format_price_display(amount: str, shipping: str) -> str:
    if not shipping:
        return amount
    return f"{amount} ({shipping})"


def parse_price(value: str | None) -> PriceValue:
    """
    Split a price cell into amount and shipping parts.

    Parts beyond the second line are discarded.

    Args:
        value: Raw cell text

    Returns:
        PriceValue with display text filled in
    """
    if not value:
        return PriceValue()

    parts = [part.strip() for part in value.split("\n")]
    amount = parts[0]
    shipping = parts[1] if len(parts) >= 2 else ""

    return PriceValue(
        amount=amount,
        shipping=shipping,
        display=format_price_display(amount, shipping),
    )
