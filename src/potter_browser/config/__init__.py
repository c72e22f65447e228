"""Configuration for potter_browser.

Resolve once from all sources, then freeze:

- ``resolve_config()`` merges programmatic, environment, file and default values
- ``ResolvedConfig`` keeps the origin of every value for auditing
- ``FrozenConfig`` is the immutable form consumed at runtime
"""

from potter_browser.exceptions import ConfigFileError, ConfigurationError

from .api import list_available_profiles, resolve_config
from .file_loader import FileConfigLoader
from .resolver import ConfigResolver
from .schema import DEFAULT_BASE_URL, BrowserSettings
from .scope import config_scope, get_ambient_resolved_config
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    "resolve_config",
    "list_available_profiles",
    "config_scope",
    "get_ambient_resolved_config",
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    "BrowserSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
    "ConfigurationError",
    "DEFAULT_BASE_URL",
]
