"""Configuration schema and validation using Pydantic.

Validates and coerces values coming from environment, files and code into
typed settings with defaults.
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.potterdb.com/v1"

try:
    _VERSION = version("potter-browser")
except PackageNotFoundError:
    _VERSION = "development"


class BrowserSettings(BaseSettings):
    """Settings schema; reads ``POTTER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POTTER_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Root of the API; resource names are appended as path segments",
        min_length=1,
    )

    page_size: int = Field(
        default=20,
        description="Items requested per page by paginated loaders",
        ge=1,
    )

    recommendation_page_size: int = Field(
        default=10,
        description="Items requested when picking a random recommendation",
        ge=1,
    )

    timeout: float = Field(
        default=30.0,
        description="Network timeout in seconds",
        gt=0,
    )

    user_agent: str = Field(
        default=f"potter-browser/{_VERSION}",
        description="User-Agent header sent with every request",
        min_length=1,
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Schema defaults, without reading the environment."""
        return {
            name: field.get_default(call_default_factory=True)
            for name, field in cls.model_fields.items()
        }

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
