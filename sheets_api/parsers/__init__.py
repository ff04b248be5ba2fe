"""Parser modules for CSV export parsing."""
from sheets_api.parsers.csv_parser import parse_csv
from sheets_api.parsers.field_normalizer import (
    PriceValue,
    clean_field,
    keep_line_breaks,
    parse_price,
)
from sheets_api.parsers.header_mapper import (
    HeaderMapper,
    HeaderRule,
    default_header_rules,
    map_headers,
)
from sheets_api.parsers.record_assembler import Record, assemble
from sheets_api.parsers.tokenizer import tokenize

__all__ = [
    "parse_csv",
    "PriceValue",
    "clean_field",
    "keep_line_breaks",
    "parse_price",
    "HeaderMapper",
    "HeaderRule",
    "default_header_rules",
    "map_headers",
    "Record",
    "assemble",
    "tokenize",
]
