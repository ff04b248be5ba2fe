"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for sheets API tests.
"""

import asyncio
from pathlib import Path

import pytest

from sheets_api.config.settings import Settings
from sheets_api.services.result_cache import CacheKey, ResultCache
from sheets_api.services.sheet_data_service import SheetDataService
from sheets_api.services.sheet_source import SourceFileInfo

SAMPLE_CSV = (
    "อัพเดจราคา 01/2024,Image,Code,Description,Range,100-300,301-500,501-1000\n"
    '"Shirt ""Blue""",img.png,SKU1 (XL),"Cotton\nWashable",100-1000,'
    '"100\n+Shipping 20",95,90\n'
    "\n"
    ",,,,,,,\n"
    "Hat,hat.png,SKU2,Wool,50-500,80,,\n"
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSheetSource:
    """In-memory SheetSource returning canned CSV text."""

    def __init__(
        self,
        text: str = SAMPLE_CSV,
        error: Exception | None = None,
        delay: float = 0.0,
        data_dir: Path = Path("data"),
    ) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.data_dir = data_dir
        self.calls: list[CacheKey] = []

    async def fetch(self, key: CacheKey) -> str:
        self.calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text

    def export_url(self, key: CacheKey) -> str:
        return f"https://sheets.example.test/{key.spreadsheet_id}/{key.sheet_gid}.csv"

    def file_info(self, key: CacheKey) -> SourceFileInfo:
        return SourceFileInfo(
            path=self.data_dir / f"sheets-{key.spreadsheet_id}-{key.sheet_gid}.csv",
            exists=False,
        )


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResultCache:
    return ResultCache(clock=clock)


@pytest.fixture
def fake_source(tmp_path: Path) -> FakeSheetSource:
    return FakeSheetSource(data_dir=tmp_path)


@pytest.fixture
def sheet_service(cache: ResultCache, fake_source: FakeSheetSource) -> SheetDataService:
    return SheetDataService(cache=cache, source=fake_source, ttl_seconds=300)


@pytest.fixture
def key() -> CacheKey:
    return CacheKey("doc-1", "42")


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated to a temporary data directory."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        tab_config_source=str(tmp_path / "tab.json"),
        preload_default_sheet=False,
        fetch_max_retries=1,
        default_spreadsheet_id="default-doc",
        default_sheet_gid="0",
    )
