"""
Sheets Catalogue Routes
=======================

Endpoints:
- POST /download-config - Install the shipped tab.json into the data folder
- GET /sheets - List sheet tabs from the installed tab.json
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends

from sheets_api.api.dependencies import get_app_settings
from sheets_api.config.settings import Settings
from sheets_api.schemas.responses import DownloadConfigResponse, SheetsResponse
from sheets_api.services.tab_config import install_tab_config, load_tab_config

router = APIRouter()

CONFIG_PREVIEW_SHEETS = 5


@router.post(
    "/download-config",
    response_model=DownloadConfigResponse,
    summary="Install tab.json",
)
async def download_config(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DownloadConfigResponse:
    installed = install_tab_config(
        Path(settings.tab_config_source), Path(settings.tab_config_path)
    )
    config = installed["config"]
    remaining = len(config.sheets) - CONFIG_PREVIEW_SHEETS

    return DownloadConfigResponse(
        file=installed["file"],
        config={
            "spreadsheetId": config.spreadsheet_id,
            "totalSheets": len(config.sheets),
            "sheets": [
                {"name": sheet.name, "gid": sheet.gid}
                for sheet in config.sheets[:CONFIG_PREVIEW_SHEETS]
            ],
            "note": f"... and {remaining} more sheets" if remaining > 0 else None,
        },
        download_time=datetime.now(timezone.utc),
    )


@router.get("/sheets", response_model=SheetsResponse, summary="List sheet tabs")
async def list_sheets(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SheetsResponse:
    path = Path(settings.tab_config_path)
    config = load_tab_config(path)

    return SheetsResponse(
        spreadsheet_id=config.spreadsheet_id,
        total_sheets=len(config.sheets),
        sheets=[sheet.model_dump() for sheet in config.sheets],
        last_modified=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
    )
