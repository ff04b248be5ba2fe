"""
Sheet Source
============

Fetches CSV exports from Google Sheets and keeps a local copy on disk.

Uses httpx for async HTTP with tenacity retries on connection errors.
Every successful download is written to
``<data_dir>/sheets-<spreadsheet_id>-<sheet_gid>.csv``.

Failure kinds surfaced to callers:
- SourceConnectionError: transport failure, timeout or non-2xx status
- SourceFormatError: an HTML page came back instead of CSV
- EmptyPayloadError: the body is empty or implausibly short
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Final, Protocol

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sheets_api.config.settings import Settings, get_settings
from sheets_api.services.result_cache import CacheKey
from sheets_api.utils.errors import (
    EmptyPayloadError,
    SourceConnectionError,
    SourceFormatError,
)
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

HTML_MARKERS: Final[tuple[str, ...]] = ("<HTML>", "<html>", "<!DOCTYPE")

REQUEST_HEADERS: Final[dict[str, str]] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "text/csv,application/csv,text/plain,*/*",
    "Accept-Language": "en-US,en;q=0.9,th;q=0.8",
}


@dataclass(frozen=True)
class SourceFileInfo:
    """Local copy of a sheet export."""

    path: Path
    exists: bool
    size: int = 0
    modified: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "exists": self.exists,
            "path": str(self.path),
            "fileName": self.path.name,
            "size": self.size,
            "modified": self.modified.isoformat() if self.modified else None,
        }


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of one export download."""

    key: CacheKey
    csv_url: str
    file_path: Path
    text: str
    downloaded_at: datetime

    @property
    def data_length(self) -> int:
        return len(self.text)

    @property
    def data_lines(self) -> int:
        return len(self.text.split("\n"))

    def summary(self) -> dict[str, Any]:
        return {
            "spreadsheetId": self.key.spreadsheet_id,
            "sheetGid": self.key.sheet_gid,
            "filePath": str(self.file_path),
            "csvUrl": self.csv_url,
            "dataLength": self.data_length,
            "dataLines": self.data_lines,
            "downloadTime": self.downloaded_at.isoformat(),
        }


class SheetSource(Protocol):
    """Capability the sheet data service depends on to obtain raw CSV."""

    async def fetch(self, key: CacheKey) -> str:
        """Return fresh CSV text for ``key``."""
        ...

    def export_url(self, key: CacheKey) -> str:
        ...

    def file_info(self, key: CacheKey) -> SourceFileInfo:
        ...


def check_payload(text: str, min_length: int) -> None:
    """
    Reject bodies that are not a CSV export.

    Raises:
        SourceFormatError: HTML page instead of CSV
        EmptyPayloadError: Body shorter than ``min_length``
    """
    if any(marker in text for marker in HTML_MARKERS):
        raise SourceFormatError(
            "Received HTML redirect instead of CSV data. "
            "Check if the sheet is publicly accessible.",
            details={"preview": text[:200]},
        )
    if len(text) < min_length:
        raise EmptyPayloadError(
            "Received empty or invalid CSV data",
            details={"length": len(text)},
        )


class GoogleSheetsCsvSource:
    """
    Google Sheets CSV export downloader.

    Usage:
        source = GoogleSheetsCsvSource(settings)
        result = await source.download(CacheKey("174dcy...", "1618426698"))
        text = await source.fetch(CacheKey("174dcy...", "1618426698"))
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            settings: Application settings
            transport: Optional httpx transport (tests inject a mock)
        """
        self._settings = settings or get_settings()
        self._transport = transport
        self._data_dir = Path(self._settings.data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def export_url(self, key: CacheKey) -> str:
        return self._settings.export_url_template.format(
            spreadsheet_id=key.spreadsheet_id,
            sheet_gid=key.sheet_gid,
        )

    def file_path(self, key: CacheKey) -> Path:
        return self._data_dir / f"sheets-{key.spreadsheet_id}-{key.sheet_gid}.csv"

    def file_info(self, key: CacheKey) -> SourceFileInfo:
        path = self.file_path(key)
        try:
            stat = path.stat()
        except FileNotFoundError:
            return SourceFileInfo(path=path, exists=False)
        return SourceFileInfo(
            path=path,
            exists=True,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.fetch_timeout,
            follow_redirects=True,
            max_redirects=self._settings.fetch_max_redirects,
            headers=REQUEST_HEADERS,
            transport=self._transport,
        )

    async def _get_text(self, url: str) -> str:
        async with self._client() as client:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._settings.fetch_max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type((httpx.ConnectError, httpx.ConnectTimeout)),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.text
        raise SourceConnectionError("Download produced no response", details={"url": url})

    async def download(self, key: CacheKey) -> DownloadResult:
        """
        Download the export for ``key`` and write it to disk.

        Raises:
            SourceConnectionError: Network failure, timeout or bad status
            SourceFormatError: HTML page instead of CSV
            EmptyPayloadError: Empty or too-short body
        """
        url = self.export_url(key)
        log = logger.bind(
            spreadsheet_id=key.spreadsheet_id,
            sheet_gid=key.sheet_gid,
            url=url,
        )
        log.info("csv_download_started")

        try:
            text = await self._get_text(url)
        except httpx.HTTPStatusError as e:
            log.error("csv_download_failed", status_code=e.response.status_code)
            raise SourceConnectionError(
                f"Sheet export returned HTTP {e.response.status_code}",
                details={"url": url, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            log.error("csv_download_failed", error=str(e), error_type=type(e).__name__)
            raise SourceConnectionError(
                f"Failed to download sheet export: {e}",
                details={"url": url},
            ) from e

        try:
            check_payload(text, self._settings.min_payload_length)
        except (SourceFormatError, EmptyPayloadError) as e:
            log.error("csv_payload_rejected", reason=e.message)
            raise

        path = self.file_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

        result = DownloadResult(
            key=key,
            csv_url=url,
            file_path=path,
            text=text,
            downloaded_at=datetime.now(timezone.utc),
        )
        log.info(
            "csv_download_completed",
            file_path=str(path),
            data_length=result.data_length,
            data_lines=result.data_lines,
        )
        return result

    async def fetch(self, key: CacheKey) -> str:
        result = await self.download(key)
        return result.text
