"""Configuration resolution with precedence handling.

Precedence: Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
import tomllib
from typing import Any

from pydantic import ValidationError

from potter_browser.exceptions import ConfigFileError, ConfigurationError

from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import BrowserSettings
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration from every source into a ``ResolvedConfig``."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            profile: Profile name to load from files
            use_env_file: Optional .env file to load
            project_root: Directory to search for pyproject.toml

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ConfigurationError: If validation fails.
            ConfigFileError: If the project file is malformed.
        """
        origins: dict[str, ConfigOrigin] = {}
        merged: dict[str, Any] = {}

        if profile is None:
            profile = os.getenv("POTTER_PROFILE")

        def apply(values: dict[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:  # Only override known fields
                    merged[field] = value
                    origins[field] = origin

        for field, value in BrowserSettings.defaults().items():
            merged[field] = value
            origins[field] = "default"

        # A broken home file should not block project or env configuration
        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            log.warning("Ignoring home configuration: %s", e)

        try:
            apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError as e:
            # Only a missing profile is tolerated; unreadable files still fail
            if profile is None or isinstance(e.cause, tomllib.TOMLDecodeError | OSError):
                raise
            log.debug("Profile %r not found in project configuration", profile)

        apply(self.env_loader.load_env_config(env_file=use_env_file), "env")

        if programmatic:
            apply(programmatic, "programmatic")

        return ResolvedConfig(**self._validate(merged), origin=origins)

    def validate(self, resolved: ResolvedConfig) -> ResolvedConfig:
        """Re-validate an already resolved configuration, e.g. after overrides.

        Raises:
            ConfigurationError: If any value fails validation.
        """
        values = resolved._asdict()
        origin = values.pop("origin")
        return ResolvedConfig(**self._validate(values), origin=origin)

    def _validate(self, values: dict[str, Any]) -> dict[str, Any]:
        try:
            return BrowserSettings(**values).to_dict()
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        return self.file_loader.list_available_profiles(project_root)
