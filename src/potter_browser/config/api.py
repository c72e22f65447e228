"""Public entry points for configuration resolution."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .scope import get_ambient_resolved_config
from .types import ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Programmatic > Environment > Project file > Home file > Defaults. Inside a
    ``config_scope()`` the scoped configuration is used as the base and only
    ``programmatic`` overrides are applied on top.

    Args:
        programmatic: Overrides with the highest precedence. Unknown keys are ignored.
        profile: Profile name to load from configuration files. If None,
                uses the ``POTTER_PROFILE`` environment variable if set.
        use_env_file: Optional .env file read together with the environment.
        project_root: Directory to search for pyproject.toml.

    Raises:
        ConfigurationError: If validation fails.
        ConfigFileError: If configuration files exist but are malformed.

    Example:
        config = resolve_config({"page_size": 50})
    """
    ambient = get_ambient_resolved_config()
    if ambient is not None:
        if not programmatic:
            return ambient
        return _resolver.validate(ambient.with_overrides(**programmatic))

    return _resolver.resolve(
        programmatic=programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """List profile names defined in project and home configuration files."""
    return _resolver.list_available_profiles(project_root)
