"""
Unit tests for tab_config module.
"""

import json
from pathlib import Path

import pytest

from sheets_api.config.settings import DEFAULT_TAB_CONFIG_SOURCE, Settings
from sheets_api.services.tab_config import install_tab_config, load_tab_config
from sheets_api.utils.errors import ConfigurationError, TabConfigNotFoundError

TAB_JSON = {
    "SPREADSHEET_ID": "174dcynBTIagtj0JckoVh248dXXncdi0I",
    "SHEETS": [
        {"name": "Price update", "gid": 1618426698},
        {"name": "Accessories", "gid": "42"},
    ],
}


@pytest.fixture
def tab_file(tmp_path: Path) -> Path:
    path = tmp_path / "tab.json"
    path.write_text(json.dumps(TAB_JSON), encoding="utf-8")
    return path


class TestLoadTabConfig:
    """Tests for load_tab_config function."""

    def test_loads_sheets(self, tab_file: Path) -> None:
        config = load_tab_config(tab_file)

        assert config.spreadsheet_id == TAB_JSON["SPREADSHEET_ID"]
        assert [sheet.gid for sheet in config.sheets] == ["1618426698", "42"]
        assert config.sheets[0].name == "Price update"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TabConfigNotFoundError):
            load_tab_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "tab.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_tab_config(path)

    def test_missing_spreadsheet_id(self, tmp_path: Path) -> None:
        path = tmp_path / "tab.json"
        path.write_text(json.dumps({"SHEETS": []}), encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_tab_config(path)


class TestInstallTabConfig:
    """Tests for install_tab_config function."""

    def test_copies_into_target(self, tab_file: Path, tmp_path: Path) -> None:
        target = tmp_path / "data" / "tab.json"
        installed = install_tab_config(tab_file, target)

        assert target.read_text(encoding="utf-8") == tab_file.read_text(encoding="utf-8")
        assert installed["file"]["fileName"] == "tab.json"
        assert installed["file"]["size"] == target.stat().st_size
        assert len(installed["config"].sheets) == 2

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(TabConfigNotFoundError):
            install_tab_config(tmp_path / "absent.json", tmp_path / "data" / "tab.json")


class TestShippedTabConfig:
    """The package ships a tab.json that the default settings point at."""

    def test_default_source_is_packaged_file(self) -> None:
        assert Path(Settings().tab_config_source) == DEFAULT_TAB_CONFIG_SOURCE
        assert DEFAULT_TAB_CONFIG_SOURCE.parent.name == "sheets_api"

    def test_default_source_loads(self) -> None:
        config = load_tab_config(DEFAULT_TAB_CONFIG_SOURCE)

        assert config.spreadsheet_id == Settings().default_spreadsheet_id
        assert Settings().default_sheet_gid in [sheet.gid for sheet in config.sheets]

    def test_install_independent_of_working_directory(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        settings = Settings(data_dir=str(tmp_path / "data"))

        installed = install_tab_config(
            Path(settings.tab_config_source), Path(settings.tab_config_path)
        )

        assert (tmp_path / "data" / "tab.json").exists()
        assert installed["config"].spreadsheet_id == settings.default_spreadsheet_id
