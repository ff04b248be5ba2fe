"""
Header Mapper
=============

Maps the first tokenized row to canonical field names.

Mapping is data: an ordered list of HeaderRule entries, each binding a
column position and a predicate over the cleaned header text to a
canonical name. The first matching rule for a position wins. Columns with
no matching rule keep their cleaned header text, or get a synthetic
``column_<index>`` name when the header is blank.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final

from sheets_api.parsers.field_normalizer import clean_field
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE_MARKER: Final[str] = "อัพเดจราคา"

HeaderPredicate = Callable[[str], bool]


def always(_header: str) -> bool:
    return True


def contains(marker: str) -> HeaderPredicate:
    """Predicate matching headers that contain ``marker``."""

    def _predicate(header: str) -> bool:
        return marker in header

    return _predicate


@dataclass(frozen=True)
class HeaderRule:
    """
    Positional header rule.

    Attributes:
        position: 0-based column index the rule applies to
        predicate: Test against the cleaned header text
        canonical_name: Name assigned when the predicate holds
    """

    position: int
    predicate: HeaderPredicate
    canonical_name: str

    def matches(self, position: int, header: str) -> bool:
        return self.position == position and self.predicate(header)


def default_header_rules(title_marker: str = DEFAULT_TITLE_MARKER) -> list[HeaderRule]:
    """
    Rules for the price-list sheet layout.

    Column 0 becomes ``title`` only for the price-update sheet, detected by
    ``title_marker`` in its header. Columns 1-7 are fixed by position.
    """
    return [
        HeaderRule(0, contains(title_marker), "title"),
        HeaderRule(1, always, "image"),
        HeaderRule(2, always, "productCode"),
        HeaderRule(3, always, "description"),
        HeaderRule(4, always, "priceRange"),
        HeaderRule(5, always, "price100_300"),
        HeaderRule(6, always, "price301_500"),
        HeaderRule(7, always, "price501_1000"),
    ]


def fallback_name(index: int, header: str) -> str:
    return header or f"column_{index}"


class HeaderMapper:
    """
    Resolve canonical names for a header row.

    Usage:
        mapper = HeaderMapper(default_header_rules())
        headers = mapper.map_headers(rows[0])
    """

    def __init__(self, rules: Sequence[HeaderRule] | None = None) -> None:
        self._rules: tuple[HeaderRule, ...] = tuple(
            default_header_rules() if rules is None else rules
        )

    @property
    def rules(self) -> tuple[HeaderRule, ...]:
        return self._rules

    def resolve(self, index: int, raw_header: str) -> str:
        """Canonical name for one header cell."""
        header = clean_field(raw_header)
        for rule in self._rules:
            if rule.matches(index, header):
                return rule.canonical_name
        return fallback_name(index, header)

    def map_headers(self, first_row: Sequence[str]) -> list[str]:
        """
        Map a header row to canonical names, one per column.

        Args:
            first_row: Raw header cells (row 0 of the tokenized document)

        Returns:
            Canonical names in column order
        """
        headers = [self.resolve(index, raw) for index, raw in enumerate(first_row)]
        logger.debug("headers_mapped", headers=headers)
        return headers


def map_headers(first_row: Sequence[str], rules: Sequence[HeaderRule] | None = None) -> list[str]:
    """Map a header row using ``rules`` or the default price-list layout."""
    return HeaderMapper(rules).map_headers(first_row)
