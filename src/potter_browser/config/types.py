"""Configuration data types.

Configuration is resolved once from all sources into a ``ResolvedConfig``
(which remembers where each value came from) and then frozen into a
``FrozenConfig`` that the client and loaders consume.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "base_url",
    "page_size",
    "recommendation_page_size",
    "timeout",
    "user_agent",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    base_url: str
    page_size: int
    recommendation_page_size: int
    timeout: float
    user_agent: str

    # Where each field value came from
    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used at runtime."""
        return FrozenConfig(
            base_url=self.base_url,
            page_size=self.page_size,
            recommendation_page_size=self.recommendation_page_size,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with programmatic overrides applied.

        Unknown fields are ignored.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)
        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"
        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Human-readable report of each field and its origin."""
        lines = []
        for field in FIELD_ORDER:
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if origin == "env":
                lines.append(f"{field}: env:POTTER_{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to the client and aggregator."""

    base_url: str
    page_size: int
    recommendation_page_size: int
    timeout: float
    user_agent: str
