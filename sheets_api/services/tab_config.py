"""
Tab Configuration
=================

Catalogue of sheet tabs (``tab.json``) for a spreadsheet.

File format:
    {"SPREADSHEET_ID": "...", "SHEETS": [{"name": "...", "gid": "..."}]}

The shipped file is installed into the data directory, from where the
sheets endpoint lists it.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sheets_api.utils.errors import ConfigurationError, TabConfigNotFoundError
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)


class SheetTab(BaseModel):
    """One tab of the spreadsheet."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    name: str
    gid: str


class TabConfig(BaseModel):
    """Parsed ``tab.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    spreadsheet_id: str = Field(alias="SPREADSHEET_ID")
    sheets: list[SheetTab] = Field(default_factory=list, alias="SHEETS")


def parse_tab_config(raw: str, path: Path) -> TabConfig:
    try:
        return TabConfig.model_validate(json.loads(raw))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise ConfigurationError(
            f"Invalid tab configuration: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e


def load_tab_config(path: Path) -> TabConfig:
    """
    Read and validate ``tab.json``.

    Raises:
        TabConfigNotFoundError: File does not exist
        ConfigurationError: File is not a valid tab catalogue
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TabConfigNotFoundError(
            "tab.json not found in data folder",
            details={"path": str(path)},
        ) from e
    return parse_tab_config(raw, path)


def install_tab_config(source: Path, target: Path) -> dict[str, Any]:
    """
    Validate ``source`` and copy it to ``target``.

    Returns:
        Summary of the installed file and its catalogue

    Raises:
        TabConfigNotFoundError: Source file does not exist
        ConfigurationError: Source file is not a valid tab catalogue
    """
    try:
        raw = source.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TabConfigNotFoundError(
            "tab.json file not found",
            details={"sourcePath": str(source)},
        ) from e

    config = parse_tab_config(raw, source)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(raw, encoding="utf-8")
    stat = target.stat()

    logger.info(
        "tab_config_installed",
        source=str(source),
        target=str(target),
        sheets=len(config.sheets),
    )

    return {
        "file": {
            "sourcePath": str(source),
            "targetPath": str(target),
            "fileName": target.name,
            "size": stat.st_size,
            "created": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        },
        "config": config,
    }
