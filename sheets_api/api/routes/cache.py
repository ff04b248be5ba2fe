"""
Cache Routes
============

Endpoints:
- DELETE /cache - Clear every cached sheet
- DELETE /cache/{spreadsheet_id}/{sheet_gid} - Drop one cached sheet
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from sheets_api.api.dependencies import get_sheet_data_service
from sheets_api.schemas.responses import CacheClearResponse
from sheets_api.services.result_cache import CacheKey
from sheets_api.services.sheet_data_service import SheetDataService
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.delete("", response_model=CacheClearResponse, summary="Clear cache")
async def clear_cache(
    service: Annotated[SheetDataService, Depends(get_sheet_data_service)],
) -> CacheClearResponse:
    cleared = service.clear()
    return CacheClearResponse(
        message=f"Cleared cache for {cleared} sheet(s)",
        cleared=cleared,
        cleared_at=datetime.now(timezone.utc),
    )


@router.delete(
    "/{spreadsheet_id}/{sheet_gid}",
    response_model=CacheClearResponse,
    summary="Invalidate one sheet",
)
async def invalidate_sheet(
    spreadsheet_id: str,
    sheet_gid: str,
    service: Annotated[SheetDataService, Depends(get_sheet_data_service)],
) -> CacheClearResponse:
    key = CacheKey(spreadsheet_id, sheet_gid)
    removed = service.invalidate(key)
    logger.info("cache_invalidated", key=str(key), removed=removed)
    return CacheClearResponse(
        message=f"Cleared cache for {key}" if removed else f"No cache entry for {key}",
        cleared=int(removed),
        cleared_at=datetime.now(timezone.utc),
    )
