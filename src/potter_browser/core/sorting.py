"""Sort options per resource family.

Each family exposes a closed set of options over its label field. An option
maps to exactly one wire token following the JSON:API convention: the bare
field name sorts ascending, a ``-`` prefix sorts descending.
"""

from __future__ import annotations

import dataclasses
from enum import Enum

from potter_browser.core.types import ResourceFamily

DESCENDING_PREFIX = "-"


class SortDirection(str, Enum):
    """Sort direction as shown to users."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclasses.dataclass(frozen=True, slots=True)
class SortOption:
    """A user-facing sort choice for one family."""

    family: ResourceFamily
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def field(self) -> str:
        return self.family.label_field

    @property
    def token(self) -> str:
        """Wire sort token for this option."""
        return sort_token(self)

    @property
    def label(self) -> str:
        arrow = "↑" if self.direction is SortDirection.ASCENDING else "↓"
        return f"{self.field.capitalize()} {arrow}"

    @property
    def key(self) -> str:
        """Stable identifier, e.g. ``titleAscending``."""
        return f"{self.field}{self.direction.value.capitalize()}"


def sort_token(option: SortOption) -> str:
    """Translate a sort option into the wire-level ``sort`` parameter."""
    if option.direction is SortDirection.DESCENDING:
        return f"{DESCENDING_PREFIX}{option.field}"
    return option.field


def sort_options(family: ResourceFamily) -> tuple[SortOption, ...]:
    """Return the options offered for ``family``, default first."""
    return tuple(SortOption(family, direction) for direction in SortDirection)


def default_sort(family: ResourceFamily) -> SortOption:
    return SortOption(family, SortDirection.ASCENDING)
