"""
Record Assembler
================

Zips tokenized data rows against canonical headers.

Per-column dispatch by canonical name:
- ``price*`` columns with content → PriceValue mapping
- ``description`` → line breaks kept, plus a ``description_clean`` variant
- everything else → clean_field

Rows shorter than the header set read missing cells as empty strings;
cells beyond the header set are ignored. Nothing here raises for
missing or malformed fields.
"""

from collections.abc import Sequence
from typing import Any, Final

from sheets_api.parsers.field_normalizer import clean_field, keep_line_breaks, parse_price

PRICE_PREFIX: Final[str] = "price"
DESCRIPTION_FIELD: Final[str] = "description"
CLEAN_SUFFIX: Final[str] = "_clean"
ROW_NUMBER_FIELD: Final[str] = "rowNumber"

Record = dict[str, Any]


def normalize_cell(record: Record, header: str, raw_value: str) -> None:
    """Write the normalised value(s) for one cell into ``record``."""
    if header.startswith(PRICE_PREFIX) and raw_value:
        record[header] = parse_price(raw_value).to_dict()
    elif header == DESCRIPTION_FIELD:
        record[header] = keep_line_breaks(raw_value)
        record[header + CLEAN_SUFFIX] = clean_field(raw_value)
    else:
        record[header] = clean_field(raw_value)


def assemble(rows: Sequence[Sequence[str]], headers: Sequence[str]) -> list[Record]:
    """
    Build records from tokenized rows.

    Args:
        rows: Tokenized document; row 0 is the header row and is skipped
        headers: Canonical names from the header mapper

    Returns:
        One record per data row, ``rowNumber`` counting from 1
    """
    records: list[Record] = []

    for row in rows[1:]:
        record: Record = {}
        for col_index, header in enumerate(headers):
            raw_value = row[col_index] if col_index < len(row) else ""
            normalize_cell(record, header, raw_value)

        record[ROW_NUMBER_FIELD] = len(records) + 1
        records.append(record)

    return records
