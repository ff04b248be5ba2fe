"""
Unit tests for GoogleSheetsCsvSource.

HTTP is served by httpx.MockTransport; nothing leaves the process.
"""

import httpx
import pytest

from sheets_api.config.settings import Settings
from sheets_api.services.result_cache import CacheKey
from sheets_api.services.sheet_source import GoogleSheetsCsvSource, check_payload
from sheets_api.utils.errors import (
    EmptyPayloadError,
    SourceConnectionError,
    SourceFormatError,
)

CSV_BODY = "Title,Image\nShirt,img.png\nHat,hat.png\n"


def make_source(settings: Settings, handler) -> GoogleSheetsCsvSource:
    return GoogleSheetsCsvSource(settings, transport=httpx.MockTransport(handler))


class TestCheckPayload:
    """Tests for check_payload function."""

    @pytest.mark.parametrize("body", ["<html><body>Sign in</body></html>", "<!DOCTYPE html>", "x<HTML>"])
    def test_html_rejected(self, body: str) -> None:
        with pytest.raises(SourceFormatError):
            check_payload(body, 10)

    @pytest.mark.parametrize("body", ["", "a,b"])
    def test_short_rejected(self, body: str) -> None:
        with pytest.raises(EmptyPayloadError):
            check_payload(body, 10)

    def test_csv_accepted(self) -> None:
        check_payload(CSV_BODY, 10)


class TestGoogleSheetsCsvSource:
    """Tests for downloads through the mock transport."""

    def test_export_url(self, test_settings: Settings) -> None:
        source = GoogleSheetsCsvSource(test_settings)
        assert source.export_url(CacheKey("abc", "12")) == (
            "https://docs.google.com/spreadsheets/d/abc/export"
            "?format=csv&gid=12&single=true&output=csv"
        )

    def test_file_info_missing(self, test_settings: Settings) -> None:
        info = GoogleSheetsCsvSource(test_settings).file_info(CacheKey("abc", "12"))
        assert info.exists is False
        assert info.size == 0
        assert info.to_dict()["fileName"] == "sheets-abc-12.csv"

    @pytest.mark.asyncio
    async def test_download_writes_file(self, test_settings: Settings) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=CSV_BODY)

        source = make_source(test_settings, handler)
        key = CacheKey("abc", "12")
        result = await source.download(key)

        assert result.text == CSV_BODY
        assert result.file_path.read_text(encoding="utf-8") == CSV_BODY
        assert result.data_length == len(CSV_BODY)
        assert result.data_lines == 4
        assert result.summary()["spreadsheetId"] == "abc"
        assert seen[0].url.params["gid"] == "12"
        assert "Mozilla" in seen[0].headers["User-Agent"]

        info = source.file_info(key)
        assert info.exists is True
        assert info.size == len(CSV_BODY.encode("utf-8"))
        assert info.modified is not None

    @pytest.mark.asyncio
    async def test_fetch_returns_text(self, test_settings: Settings) -> None:
        source = make_source(test_settings, lambda request: httpx.Response(200, text=CSV_BODY))
        assert await source.fetch(CacheKey("abc", "12")) == CSV_BODY

    @pytest.mark.asyncio
    async def test_follows_redirect(self, test_settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "docs.google.com":
                return httpx.Response(
                    307, headers={"Location": "https://export.example.test/sheet.csv"}
                )
            return httpx.Response(200, text=CSV_BODY)

        source = make_source(test_settings, handler)
        assert await source.fetch(CacheKey("abc", "12")) == CSV_BODY

    @pytest.mark.asyncio
    async def test_html_page_is_format_error(self, test_settings: Settings) -> None:
        source = make_source(
            test_settings,
            lambda request: httpx.Response(200, text="<!DOCTYPE html><html>Sign in</html>"),
        )
        key = CacheKey("abc", "12")

        with pytest.raises(SourceFormatError):
            await source.fetch(key)
        assert source.file_info(key).exists is False

    @pytest.mark.asyncio
    async def test_short_body_is_empty_payload(self, test_settings: Settings) -> None:
        source = make_source(test_settings, lambda request: httpx.Response(200, text=""))
        with pytest.raises(EmptyPayloadError):
            await source.fetch(CacheKey("abc", "12"))

    @pytest.mark.asyncio
    async def test_http_status_is_connection_error(self, test_settings: Settings) -> None:
        source = make_source(test_settings, lambda request: httpx.Response(404, text="missing"))

        with pytest.raises(SourceConnectionError) as exc_info:
            await source.fetch(CacheKey("abc", "12"))
        assert exc_info.value.details["status_code"] == 404

    @pytest.mark.asyncio
    async def test_connect_error_is_connection_error(self, test_settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        source = make_source(test_settings, handler)
        with pytest.raises(SourceConnectionError):
            await source.fetch(CacheKey("abc", "12"))

    @pytest.mark.asyncio
    async def test_connect_error_retried(self, test_settings: Settings) -> None:
        settings = test_settings.model_copy(update={"fetch_max_retries": 2})
        attempts = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise httpx.ConnectError("unreachable", request=request)
            return httpx.Response(200, text=CSV_BODY)

        source = make_source(settings, handler)
        assert await source.fetch(CacheKey("abc", "12")) == CSV_BODY
        assert attempts["count"] == 2
