"""CSV export parser: raw text to JSON-ready records."""

from sheets_api.parsers.header_mapper import HeaderMapper
from sheets_api.parsers.record_assembler import Record, assemble
from sheets_api.parsers.tokenizer import tokenize
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

PREVIEW_ROWS = 3


def _record_label(record: Record) -> str:
    product_code = record.get("productCode") or ""
    if isinstance(product_code, str) and "(" in product_code:
        return product_code.split("(")[0].strip()
    return record.get("title") or "Unknown"


def parse_csv(text: str, header_mapper: HeaderMapper | None = None) -> list[Record]:
    """
    Parse a CSV export into records.

    Row 0 supplies the headers. The header row is padded with blanks up to
    the widest row seen, so extra data columns get synthetic names.

    Args:
        text: Complete CSV document
        header_mapper: Header rules; defaults to the price-list layout

    Returns:
        Records in source order, empty rows omitted
    """
    log = logger.bind(characters=len(text))
    log.debug("csv_parse_started")

    rows = tokenize(text)
    if not rows:
        log.info("csv_parse_completed", total_rows=0, records=0)
        return []

    width = max(len(row) for row in rows)
    header_row = rows[0] + [""] * (width - len(rows[0]))

    mapper = header_mapper or HeaderMapper()
    headers = mapper.map_headers(header_row)

    records = assemble(rows, headers)

    for record in records[:PREVIEW_ROWS]:
        log.debug("csv_row_preview", row_number=record["rowNumber"], label=_record_label(record))

    log.info(
        "csv_parse_completed",
        total_rows=len(rows),
        columns=len(headers),
        records=len(records),
    )
    return records
