"""
Services
========

Result cache, sheet source and the pull-through data service.
"""

from sheets_api.services.result_cache import CacheEntry, CacheKey, ResultCache
from sheets_api.services.sheet_data_service import SheetDataService, SheetLoadResult
from sheets_api.services.sheet_source import (
    DownloadResult,
    GoogleSheetsCsvSource,
    SheetSource,
    SourceFileInfo,
)

__all__ = [
    "CacheEntry",
    "CacheKey",
    "ResultCache",
    "SheetDataService",
    "SheetLoadResult",
    "DownloadResult",
    "GoogleSheetsCsvSource",
    "SheetSource",
    "SourceFileInfo",
]
