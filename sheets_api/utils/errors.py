"""
Custom Exception Classes
========================

Application-specific exceptions for proper error handling.

The parsing layer never raises; these cover the fetch boundary,
configuration and the tab.json catalogue.
"""

from typing import Any


class SheetsApiError(Exception):
    """Base exception for the sheets API service."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceError(SheetsApiError):
    """Raised when a sheet cannot be fetched from its source."""

    pass


class SourceConnectionError(SourceError):
    """Raised on network, timeout or HTTP status failures."""

    pass


class SourceFormatError(SourceError):
    """
    Raised when the downloaded body is not CSV.

    Typically an HTML login or redirect page served for a sheet
    that is not publicly accessible.
    """

    pass


class EmptyPayloadError(SourceError):
    """Raised when the downloaded body is empty or implausibly short."""

    pass


class TabConfigNotFoundError(SheetsApiError):
    """Raised when tab.json is missing."""

    pass


class ConfigurationError(SheetsApiError):
    """Raised when configuration is invalid."""

    pass
