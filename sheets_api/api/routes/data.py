"""
Data Routes
===========

Endpoints serving parsed sheet records.

Endpoints:
- GET /data - Records for a sheet (cached for the TTL)
- POST /refresh - Download the sheet again and replace its cache entry
- GET /info - Local file and cache status for a sheet
"""

import json
import time
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from sheets_api.api.dependencies import get_app_settings, get_sheet_data_service, resolve_key
from sheets_api.config.settings import Settings
from sheets_api.schemas.responses import InfoResponse, RefreshResponse, SheetDataResponse
from sheets_api.services.sheet_data_service import SheetDataService
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _json_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("refresh_body_not_json", length=len(raw))
        return {}
    return body if isinstance(body, dict) else {}


@router.get(
    "/data",
    response_model=SheetDataResponse,
    summary="Get sheet records",
    description=(
        "Return parsed records for spreadsheet_id/sheet_gid. Served from the "
        "cache while fresh; otherwise the sheet is downloaded and parsed first."
    ),
)
async def get_data(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    service: Annotated[SheetDataService, Depends(get_sheet_data_service)],
) -> SheetDataResponse:
    key = resolve_key(request, settings)
    logger.info("sheet_data_requested", spreadsheet_id=key.spreadsheet_id, sheet_gid=key.sheet_gid)

    start = time.perf_counter()
    result = await service.get_records(key)
    processing_ms = round((time.perf_counter() - start) * 1000)

    file_info = service.source.file_info(key)

    logger.info(
        "sheet_data_served",
        key=str(key),
        total_rows=result.total_rows,
        from_cache=result.from_cache,
        duration_ms=processing_ms,
    )

    return SheetDataResponse(
        data=result.entry.as_dicts(),
        total_rows=result.total_rows,
        last_updated=datetime.now(timezone.utc),
        cached_at=datetime.fromtimestamp(result.entry.fetched_at, tz=timezone.utc),
        from_cache=result.from_cache,
        source_file=file_info.path.name if file_info.exists else None,
        file_size=file_info.size,
        file_modified=file_info.modified,
        processing_time=f"{processing_ms}ms",
        spreadsheet_id=key.spreadsheet_id,
        sheet_gid=key.sheet_gid,
    )


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh sheet",
    description="Download the sheet again, reparse it and replace its cache entry.",
)
async def refresh_data(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    service: Annotated[SheetDataService, Depends(get_sheet_data_service)],
) -> RefreshResponse:
    key = resolve_key(request, settings, await _json_body(request))
    logger.info("sheet_refresh_requested", spreadsheet_id=key.spreadsheet_id, sheet_gid=key.sheet_gid)

    result = await service.refresh(key)
    file_info = service.source.file_info(key)

    return RefreshResponse(
        download={
            "filePath": str(file_info.path),
            "csvUrl": service.source.export_url(key),
            "dataLength": result.characters or 0,
            "fileSize": file_info.size,
        },
        total_rows=result.total_rows,
        refresh_time=datetime.now(timezone.utc),
        spreadsheet_id=key.spreadsheet_id,
        sheet_gid=key.sheet_gid,
    )


@router.get(
    "/info",
    response_model=InfoResponse,
    summary="Sheet file and cache status",
)
async def get_info(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    service: Annotated[SheetDataService, Depends(get_sheet_data_service)],
) -> InfoResponse:
    key = resolve_key(request, settings)

    return InfoResponse(
        parameters={"spreadsheetId": key.spreadsheet_id, "sheetGid": key.sheet_gid},
        csv_file=service.source.file_info(key).to_dict(),
        cache=service.describe(key),
        google_sheets={
            "spreadsheetId": key.spreadsheet_id,
            "sheetGid": key.sheet_gid,
            "csvUrl": service.source.export_url(key),
        },
    )
