"""Exceptions raised by the potter_browser client, loaders and config."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from potter_browser.core.types import ResourceFamily


class PotterBrowserError(Exception):
    """Base exception for all potter_browser errors."""

    @property
    def user_message(self) -> str:
        """Human-readable message suitable for display in a failure state."""
        return str(self)


class InvalidRequestError(PotterBrowserError):
    """Raised when a request URL cannot be constructed from the configuration."""

    @property
    def user_message(self) -> str:  # noqa: D102
        return "Invalid URL"


class HttpError(PotterBrowserError):
    """Raised when the server answers with a status outside 200-299."""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        """Initialize with the response status code and the requested URL."""
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}" if url else f"HTTP {status_code}")

    @property
    def user_message(self) -> str:  # noqa: D102
        return f"Request failed with code: {self.status_code}"


class DecodeError(PotterBrowserError):
    """Raised when a response body does not match the envelope shape."""

    @property
    def user_message(self) -> str:  # noqa: D102
        return "Invalid response"


class TransportError(PotterBrowserError):
    """Raised on connectivity problems and timeouts."""

    @property
    def user_message(self) -> str:  # noqa: D102
        return f"Network error: {self}"


class EmptyResourceError(PotterBrowserError):
    """Raised by the recommendation aggregator when a family has no items."""

    def __init__(self, family: ResourceFamily) -> None:
        """Initialize with the family whose page came back empty."""
        self.family = family
        super().__init__(f"No {family.value} available")


class ConfigurationError(PotterBrowserError):
    """Raised when configuration values fail validation."""


class ConfigFileError(ConfigurationError):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")
