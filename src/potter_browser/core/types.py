"""Core data types shared by the client, loaders and aggregator.

Wire shapes are validated with Pydantic models; loader state is modelled with
small immutable dataclasses so snapshots can be handed to observers safely.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
import typing
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from potter_browser.core.keys import camelize_keys

# --- Result Monad for Explicit Error Handling ---

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful outcome."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed outcome, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Resource Families ---


class ResourceFamily(str, Enum):
    """The five catalog types served by the API.

    The value doubles as the URL path segment.
    """

    BOOKS = "books"
    CHARACTERS = "characters"
    MOVIES = "movies"
    POTIONS = "potions"
    SPELLS = "spells"

    @property
    def label_field(self) -> str:
        """Attribute used to title an item and to sort the family."""
        if self in (ResourceFamily.BOOKS, ResourceFamily.MOVIES):
            return "title"
        return "name"


# --- Wire Models ---

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Pagination(BaseModel):
    """Pagination block from ``meta.pagination``.

    ``next_page`` is the only termination signal: absent means no more pages.
    """

    model_config = _WIRE_CONFIG

    current_page: int | None = Field(default=None, alias="current")
    next_page: int | None = Field(default=None, alias="next")
    last_page: int | None = Field(default=None, alias="last")
    total_records: int | None = Field(default=None, alias="records")

    @property
    def has_next(self) -> bool:
        return self.next_page is not None


class Links(BaseModel):
    """Top-level ``links`` block of an envelope."""

    model_config = _WIRE_CONFIG

    self_: str | None = Field(default=None, alias="self")
    current: str | None = None
    next: str | None = None
    last: str | None = None


class Item(BaseModel):
    """A single catalog entry of any family.

    ``attributes`` is a flat bag with camelCase keys; any field may be absent.
    """

    model_config = _WIRE_CONFIG

    id: str
    type_tag: str = Field(alias="type")
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, Any] | None = None
    links: dict[str, Any] | None = None

    @field_validator("attributes", "relationships", "links", mode="before")
    @classmethod
    def _camelize(cls, v: Any) -> Any:
        if v is None:
            return v
        return camelize_keys(v)

    def get(self, name: str, default: Any = None) -> Any:
        """Return an attribute by camelCase name, or ``default`` when absent."""
        value = self.attributes.get(name)
        return default if value is None else value

    @property
    def label(self) -> str:
        """Best display title: title or name, then slug, then id."""
        for key in ("title", "name", "slug"):
            value = self.attributes.get(key)
            if isinstance(value, str) and value:
                return value
        return self.id


class ResourceEnvelope(BaseModel):
    """Decoded response for one page of a resource family.

    The wire nests ``pagination``, ``copyright`` and ``generated_at`` under
    ``meta``; they are lifted to the top level here.
    """

    model_config = _WIRE_CONFIG

    data: list[Item]
    pagination: Pagination
    generated_at: str
    copyright: str
    links: Links | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_meta(cls, raw: Any) -> Any:
        if not isinstance(raw, dict) or "meta" not in raw:
            return raw
        meta = raw["meta"]
        if not isinstance(meta, dict):
            raise ValueError("meta must be an object")  # noqa: TRY004
        lifted = {k: v for k, v in raw.items() if k != "meta"}
        for key in ("pagination", "copyright", "generated_at"):
            if key in meta:
                lifted[key] = meta[key]
        return lifted


# --- Loader State ---


class LoadPhase(str, Enum):
    """Observable fetch phase of a loader."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclasses.dataclass(frozen=True, slots=True)
class LoaderState:
    """Idle, Loading, Success or Failure(message)."""

    phase: LoadPhase
    message: str | None = None

    @classmethod
    def idle(cls) -> LoaderState:
        return cls(LoadPhase.IDLE)

    @classmethod
    def loading(cls) -> LoaderState:
        return cls(LoadPhase.LOADING)

    @classmethod
    def success(cls) -> LoaderState:
        return cls(LoadPhase.SUCCESS)

    @classmethod
    def failure(cls, message: str) -> LoaderState:
        return cls(LoadPhase.FAILURE, message)

    @property
    def is_loading(self) -> bool:
        return self.phase is LoadPhase.LOADING

    @property
    def is_failure(self) -> bool:
        return self.phase is LoadPhase.FAILURE


@dataclasses.dataclass(frozen=True, slots=True)
class Recommendation:
    """A randomly chosen item tagged with the family it came from."""

    family: ResourceFamily
    item: Item
