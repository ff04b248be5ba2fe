"""
Pydantic Response Models
========================

API response schemas for the sheets API endpoints.
Field names are serialised in camelCase.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiResponse(BaseModel):
    """Base for camelCase responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: Annotated[bool, Field(default=True, description="Request outcome")]


class SheetDataResponse(ApiResponse):
    """
    Response for GET /api/data.

    Attributes:
        data: Parsed records
        total_rows: Number of records
        from_cache: Whether the cache answered without a fetch
        processing_time: Request handling time, e.g. "12ms"
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "data": [
                    {
                        "title": "Shirt",
                        "price100_300": {
                            "amount": "100",
                            "shipping": "+Shipping 20",
                            "display": "100 (+Shipping 20)",
                        },
                        "rowNumber": 1,
                    }
                ],
                "totalRows": 1,
                "fromCache": False,
                "processingTime": "42ms",
                "spreadsheetId": "174dcynBTIagtj0JckoVh248dXXncdi0I",
                "sheetGid": "1618426698",
            }
        },
    )

    data: Annotated[list[dict[str, Any]], Field(description="Parsed records")]
    total_rows: Annotated[int, Field(ge=0, description="Number of records")]
    last_updated: Annotated[datetime, Field(description="Response time")]
    cached_at: Annotated[datetime, Field(description="When the records were parsed")]
    from_cache: Annotated[bool, Field(description="Served without a fetch")]
    source: str = "Google Sheets CSV export"
    source_file: str | None = None
    file_size: int = 0
    file_modified: datetime | None = None
    processing_time: Annotated[str, Field(description="Handling time")]
    spreadsheet_id: str
    sheet_gid: str


class RefreshResponse(ApiResponse):
    """Response for POST /api/refresh."""

    message: str = "CSV data refreshed successfully"
    download: dict[str, Any]
    total_rows: Annotated[int, Field(ge=0)]
    refresh_time: datetime
    spreadsheet_id: str
    sheet_gid: str


class InfoResponse(ApiResponse):
    """Response for GET /api/info."""

    parameters: dict[str, str]
    csv_file: dict[str, Any]
    cache: dict[str, Any]
    google_sheets: dict[str, str]


class CacheClearResponse(ApiResponse):
    """Response for DELETE /api/cache."""

    message: str
    cleared: Annotated[int, Field(ge=0)]
    cleared_at: datetime


class SheetsResponse(ApiResponse):
    """Response for GET /api/sheets."""

    spreadsheet_id: str
    total_sheets: Annotated[int, Field(ge=0)]
    sheets: list[dict[str, Any]]
    last_modified: datetime


class DownloadConfigResponse(ApiResponse):
    """Response for POST /api/download-config."""

    message: str = "tab.json downloaded to data folder successfully"
    file: dict[str, Any]
    config: dict[str, Any]
    download_time: datetime


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""

    success: bool = False
    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
