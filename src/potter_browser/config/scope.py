"""Ambient configuration scoping.

``config_scope()`` makes ``resolve_config()`` return a given configuration
for the duration of a block. It is async-safe through ``contextvars``.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars

from .types import ResolvedConfig

_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = (
    contextvars.ContextVar("potter_browser_resolved_config")
)


def get_ambient_resolved_config() -> ResolvedConfig | None:
    """Return the configuration installed by an enclosing scope, if any."""
    try:
        return _ambient_resolved_config.get()
    except LookupError:
        return None


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Temporarily use ``config`` for every ``resolve_config()`` call.

    Example:
        base = resolve_config()
        with config_scope(base.with_overrides(page_size=5)):
            client = ResourceClient()  # Uses page_size=5
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)
