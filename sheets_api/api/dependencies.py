"""
API Dependencies
================

Request-scoped access to the components built by the application factory.
"""

from typing import Any

from fastapi import Request

from sheets_api.config.settings import Settings
from sheets_api.services.result_cache import CacheKey
from sheets_api.services.sheet_data_service import SheetDataService

SPREADSHEET_ID_PARAMS = ("spreadsheet_id", "spreadsheetId")
SHEET_GID_PARAMS = ("sheet_gid", "sheetGid")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sheet_data_service(request: Request) -> SheetDataService:
    """
    Get the process-wide SheetDataService.

    Factory function for dependency injection.
    """
    return request.app.state.sheet_data_service


def _first(sources: list[dict[str, Any]], names: tuple[str, ...]) -> str | None:
    for source in sources:
        for name in names:
            value = source.get(name)
            if value not in (None, ""):
                return str(value)
    return None


def resolve_key(
    request: Request,
    settings: Settings,
    body: dict[str, Any] | None = None,
) -> CacheKey:
    """
    Source key from query parameters, then body, then defaults.

    Both snake_case and camelCase parameter names are accepted.
    """
    sources: list[dict[str, Any]] = [dict(request.query_params)]
    if body:
        sources.append(body)

    return CacheKey(
        spreadsheet_id=_first(sources, SPREADSHEET_ID_PARAMS) or settings.default_spreadsheet_id,
        sheet_gid=_first(sources, SHEET_GID_PARAMS) or settings.default_sheet_gid,
    )
