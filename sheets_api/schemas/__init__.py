"""
Schemas Module
==============

Pydantic response models for the HTTP API.
"""

from sheets_api.schemas.responses import (
    CacheClearResponse,
    DownloadConfigResponse,
    ErrorResponse,
    InfoResponse,
    RefreshResponse,
    SheetDataResponse,
    SheetsResponse,
)

__all__ = [
    "CacheClearResponse",
    "DownloadConfigResponse",
    "ErrorResponse",
    "InfoResponse",
    "RefreshResponse",
    "SheetDataResponse",
    "SheetsResponse",
]
