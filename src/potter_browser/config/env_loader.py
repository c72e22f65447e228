"""Environment variable configuration loading.

Reads ``POTTER_*`` variables, optionally seeded from a ``.env`` file, through
pydantic-settings so coercion matches the schema.
"""

import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from potter_browser.exceptions import ConfigurationError

from .schema import BrowserSettings

ENV_PREFIX = "POTTER_"


class EnvironmentConfigLoader:
    """Loads configuration values that are explicitly set in the environment."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Return only the fields set by ``POTTER_*`` variables or ``env_file``.

        Raises:
            FileNotFoundError: If ``env_file`` is given but does not exist.
            ConfigurationError: If a variable holds an invalid value.
        """
        if env_file is not None and not Path(env_file).exists():
            raise FileNotFoundError(f"Environment file not found: {env_file}")

        try:
            settings = BrowserSettings(_env_file=env_file)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid environment variable values: {self.get_env_summary()}. "
                f"Error: {e}"
            ) from e

        return {name: getattr(settings, name) for name in settings.model_fields_set}

    def get_env_summary(self) -> dict[str, str]:
        """Return the ``POTTER_*`` variables that map to settings fields."""
        names = {f"{ENV_PREFIX}{field.upper()}" for field in BrowserSettings.model_fields}
        return {k: v for k, v in os.environ.items() if k.upper() in names}
