"""
CSV Tokenizer
=============

Character-level tokenizer for spreadsheet CSV exports.

Spreadsheet exports carry multi-line cell content that is only
representable through quoting, so quote state alone decides whether a
line feed ends a row or belongs to the cell. Line-based splitting is
never used.

Behaviour:
- Doubled quotes inside a quoted field yield one literal quote
- Commas, CR and LF inside quotes are kept verbatim
- A quote in the middle of an unquoted field opens quoting for the rest
- CR outside quotes is dropped (the paired LF breaks the row)
- Rows whose fields are all empty after trimming are dropped
- An unterminated quote at end of input closes implicitly

Malformed input never raises; upstream data quality varies by source.
"""

from enum import Enum
from typing import Final

QUOTE: Final[str] = '"'
DELIMITER: Final[str] = ","
LINE_FEED: Final[str] = "\n"
CARRIAGE_RETURN: Final[str] = "\r"

RawRow = list[str]


class TokenizerState(str, Enum):
    """Quote state of the scanner."""

    UNQUOTED = "unquoted"
    QUOTED = "quoted"


def _has_content(row: RawRow) -> bool:
    return any(field != "" for field in row)


def tokenize(text: str) -> list[RawRow]:
    """
    Split raw CSV text into rows of trimmed field strings.

    Args:
        text: Complete CSV document

    Returns:
        Rows in source order, fully empty rows omitted

    Example:
        >>> tokenize('a,"b\\nc"\\n,,\\nd')
        [['a', 'b\\nc'], ['d']]
    """
    rows: list[RawRow] = []
    row: RawRow = []
    field: list[str] = []
    state = TokenizerState.UNQUOTED

    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if state is TokenizerState.QUOTED:
            if char == QUOTE:
                if i + 1 < length and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 2
                    continue
                state = TokenizerState.UNQUOTED
            else:
                field.append(char)
        elif char == QUOTE:
            state = TokenizerState.QUOTED
        elif char == DELIMITER:
            row.append("".join(field).strip())
            field = []
        elif char == LINE_FEED:
            row.append("".join(field).strip())
            if _has_content(row):
                rows.append(row)
            row = []
            field = []
        elif char == CARRIAGE_RETURN:
            pass
        else:
            field.append(char)

        i += 1

    if field or row:
        row.append("".join(field).strip())
        if _has_content(row):
            rows.append(row)

    return rows
