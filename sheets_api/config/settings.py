"""
Settings Configuration
======================

Environment variable management using pydantic-settings.
Follows the 12-factor app methodology.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TAB_CONFIG_SOURCE = Path(__file__).resolve().parent.parent / "tab.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    fastapi_host: str = Field(default="0.0.0.0", description="Server host")
    fastapi_port: int = Field(default=4500, ge=1, le=65535, description="Server port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    base_path: str = Field(
        default="",
        description="URL prefix when served from a sub-directory (e.g. /gdrive)",
    )

    # -------------------------------------------------------------------------
    # Cache Configuration
    # -------------------------------------------------------------------------
    cache_ttl_seconds: float = Field(
        default=300.0, gt=0, description="Seconds a parsed sheet stays fresh"
    )
    preload_default_sheet: bool = Field(
        default=True, description="Load the default sheet into the cache on startup"
    )

    # -------------------------------------------------------------------------
    # Google Sheets Source
    # -------------------------------------------------------------------------
    default_spreadsheet_id: str = Field(
        default="174dcynBTIagtj0JckoVh248dXXncdi0I",
        description="Spreadsheet used when a request names none",
    )
    default_sheet_gid: str = Field(
        default="1618426698", description="Sheet tab used when a request names none"
    )
    export_url_template: str = Field(
        default=(
            "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export"
            "?format=csv&gid={sheet_gid}&single=true&output=csv"
        ),
        description="CSV export URL pattern",
    )
    fetch_timeout: float = Field(
        default=15.0, ge=1.0, le=300.0, description="Download timeout in seconds"
    )
    fetch_max_redirects: int = Field(
        default=5, ge=0, le=20, description="Maximum redirects followed on download"
    )
    fetch_max_retries: int = Field(
        default=3, ge=1, le=10, description="Attempts on connection errors"
    )
    min_payload_length: int = Field(
        default=10, ge=0, description="Shorter downloads are rejected as empty"
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    data_dir: str = Field(default="data", description="Directory for downloaded CSV files")
    tab_config_source: str = Field(
        default=str(DEFAULT_TAB_CONFIG_SOURCE),
        description="tab.json to install; defaults to the copy shipped in the package",
    )

    # -------------------------------------------------------------------------
    # Header Mapping
    # -------------------------------------------------------------------------
    title_marker: str = Field(
        default="อัพเดจราคา",
        description="Substring identifying the price-update title column",
    )

    @property
    def tab_config_path(self) -> str:
        """Installed tab.json location inside the data directory."""
        return f"{self.data_dir.rstrip('/')}/tab.json"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.
    """
    return Settings()
