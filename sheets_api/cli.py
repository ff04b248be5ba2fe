"""Download one sheet export to the data directory.

Usage:
    sheets-api-download --spreadsheet-id 174dcy... --sheet-gid 1618426698
"""
import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from sheets_api.config.settings import Settings, get_settings
from sheets_api.services.result_cache import CacheKey
from sheets_api.services.sheet_source import GoogleSheetsCsvSource
from sheets_api.utils.errors import SourceError
from sheets_api.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download a Google Sheets tab as CSV into the data directory"
    )
    parser.add_argument(
        "--spreadsheet-id",
        default=settings.default_spreadsheet_id,
        help="Spreadsheet document id (default: %(default)s)",
    )
    parser.add_argument(
        "--sheet-gid",
        default=settings.default_sheet_gid,
        help="Sheet tab id (default: %(default)s)",
    )
    return parser


async def download(source: GoogleSheetsCsvSource, key: CacheKey) -> dict:
    result = await source.download(key)
    return result.summary()


def main(
    argv: Optional[Sequence[str]] = None,
    source: Optional[GoogleSheetsCsvSource] = None,
) -> int:
    """Entry point; returns the process exit code."""
    settings = get_settings()
    configure_logging(settings)
    args = build_parser(settings).parse_args(argv)

    key = CacheKey(args.spreadsheet_id, args.sheet_gid)
    source = source or GoogleSheetsCsvSource(settings)

    try:
        summary = asyncio.run(download(source, key))
    except SourceError as e:
        logger.error("download_failed", key=str(key), error=e.message, details=e.details)
        return 1

    print(json.dumps({"success": True, **summary}, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
