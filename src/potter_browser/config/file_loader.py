"""File-based configuration loading with profile support.

Reads ``[tool.potter_browser]`` from the nearest ``pyproject.toml`` and the
root table of ``~/.config/potter_browser.toml``. Either may define named
profiles under a ``profiles`` table.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from potter_browser.exceptions import ConfigFileError

TOOL_SECTION = "potter_browser"


class FileConfigLoader:
    """Loads configuration from project and home TOML files."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load configuration from pyproject.toml in the project root.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                         searches current directory and parents.
            profile: Optional profile name under
                    ``[tool.potter_browser.profiles.<name>]``.

        Returns:
            Configuration values, or an empty dict when there is no file or
            no ``[tool.potter_browser]`` section.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is missing.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        data = self._read_toml(pyproject_path)
        section = data.get("tool", {}).get(TOOL_SECTION, {})
        if not section:
            return {}
        return self._select_profile(section, profile, pyproject_path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home file, if it exists.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is missing.
        """
        home_config_path = self.home_config_path()
        if not home_config_path.exists():
            return {}
        data = self._read_toml(home_config_path)
        return self._select_profile(data, profile, home_config_path)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """List profile names from project and home files.

        Unreadable files contribute no profiles.
        """
        profiles: dict[str, list[str]] = {"project": [], "home": []}

        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path:
            try:
                data = self._read_toml(pyproject_path)
            except ConfigFileError:
                data = {}
            section = data.get("tool", {}).get(TOOL_SECTION, {})
            profiles["project"] = list(section.get("profiles", {}).keys())

        home_config_path = self.home_config_path()
        if home_config_path.exists():
            try:
                data = self._read_toml(home_config_path)
            except ConfigFileError:
                data = {}
            profiles["home"] = list(data.get("profiles", {}).keys())

        return profiles

    def home_config_path(self) -> Path:
        """Return the home config path, honoring ``POTTER_CONFIG_HOME``."""
        override = os.getenv("POTTER_CONFIG_HOME")
        if override:
            return Path(override)
        return Path.home() / ".config" / "potter_browser.toml"

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _select_profile(
        self, table: dict[str, Any], profile: str | None, path: Path
    ) -> dict[str, Any]:
        if profile:
            profiles = table.get("profiles", {})
            if profile not in profiles:
                raise ConfigFileError(
                    path,
                    f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
                )
            return dict(profiles[profile])
        config = dict(table)
        config.pop("profiles", None)
        return config

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree."""
        current = Path(start_dir or Path.cwd()).resolve()
        while True:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent
