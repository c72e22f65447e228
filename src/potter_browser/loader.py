"""Paginated loading engine shared by every resource family.

A ``PaginatedLoader`` owns one session: the accumulated items, the cursor page,
the "more pages" flag, the sort option and an observable ``LoaderState``.

Lifecycle of ``load()``:

- Dropped while a load is in flight (the ``Loading`` guard).
- ``reset=True`` discards items, rewinds to page 1 and bumps the generation.
- No-op once pagination is exhausted.
- A page from an older generation is discarded on arrival.
- Failures keep every item already loaded and surface ``Failure(message)``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import dataclasses
import logging
from typing import TYPE_CHECKING, TypeAlias

from potter_browser.config import FrozenConfig, resolve_config
from potter_browser.core.sorting import SortOption, default_sort
from potter_browser.core.types import (
    Failure,
    Item,
    LoaderState,
    ResourceEnvelope,
    ResourceFamily,
    Result,
    Success,
)
from potter_browser.exceptions import PotterBrowserError
from potter_browser.telemetry import TelemetryContext

if TYPE_CHECKING:
    from potter_browser.client import ResourceFetcher
    from potter_browser.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class LoaderSession:
    """Read-only snapshot of a loader, handed to listeners."""

    family: ResourceFamily
    items: tuple[Item, ...]
    state: LoaderState
    cursor_page: int
    can_load_more: bool
    sort: SortOption


SessionListener: TypeAlias = Callable[[LoaderSession], None]


class PaginatedLoader:
    """Incrementally loads one resource family, page by page.

    Not shared across families; each screen owns its own loader. All methods
    must be awaited from the same event loop.
    """

    def __init__(
        self,
        family: ResourceFamily,
        fetcher: ResourceFetcher,
        *,
        page_size: int | None = None,
        sort: SortOption | None = None,
        config: FrozenConfig | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._family = ResourceFamily(family)
        self._fetcher = fetcher
        if page_size is None:
            page_size = (config or resolve_config().to_frozen()).page_size
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._page_size = page_size
        self._sort = sort or default_sort(self._family)
        self._check_family(self._sort)
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

        self._items: list[Item] = []
        self._state = LoaderState.idle()
        self._cursor_page = 1
        self._can_load_more = True
        self._generation = 0
        # List length at which the scroll trigger last fired
        self._trigger_mark: int | None = None
        self._listeners: list[SessionListener] = []

    # --- Observable surface ---

    @property
    def family(self) -> ResourceFamily:
        return self._family

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def cursor_page(self) -> int:
        return self._cursor_page

    @property
    def can_load_more(self) -> bool:
        return self._can_load_more

    @property
    def sort(self) -> SortOption:
        return self._sort

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> LoaderSession:
        return LoaderSession(
            family=self._family,
            items=tuple(self._items),
            state=self._state,
            cursor_page=self._cursor_page,
            can_load_more=self._can_load_more,
            sort=self._sort,
        )

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- Operations ---

    async def load(self, reset: bool = False) -> None:
        """Load the first page (``reset=True``) or the next page.

        Calls made while a load is in flight are dropped, not queued.
        """
        if self._state.is_loading:
            logger.debug(
                "Dropping load(reset=%s) for %s: already loading",
                reset,
                self._family.value,
            )
            self._telemetry.count("loader.dropped", resource=self._family.value)
            return
        await self._load(reset=reset)

    async def set_sort(self, option: SortOption) -> None:
        """Change the sort order and restart pagination from page 1.

        Selecting the current option does nothing. A change made while a page
        is in flight still restarts immediately; the in-flight page is
        discarded when it arrives.
        """
        if option == self._sort:
            return
        self._check_family(option)
        logger.debug("Sort for %s changed to %s", self._family.value, option.token)
        self._sort = option
        await self._load(reset=True)

    async def notify_item_shown(self, item: Item) -> bool:
        """Scroll trigger: load the next page when the last item becomes visible.

        Fires at most once per list end until a page arrives; a failed load
        leaves the trigger spent and needs an explicit ``load()``. Returns True
        if a load was requested.
        """
        if not self._items or item.id != self._items[-1].id:
            return False
        if self._trigger_mark == len(self._items) or not self._can_load_more:
            return False
        if self._state.is_loading:
            return False
        self._trigger_mark = len(self._items)
        await self.load(reset=False)
        return True

    # --- Internals ---

    async def _load(self, *, reset: bool) -> None:
        if reset:
            self._generation += 1
            self._items = []
            self._cursor_page = 1
            self._can_load_more = True
            self._trigger_mark = None

        if not self._can_load_more:
            return

        generation = self._generation
        page = self._cursor_page
        previous_state = LoaderState.idle() if self._state.is_loading else self._state
        self._set_state(LoaderState.loading())

        with self._telemetry("loader.load", resource=self._family.value, page=page):
            try:
                result = await self._fetch_page(page)
            except asyncio.CancelledError:
                if generation == self._generation:
                    self._set_state(previous_state)
                raise
            except Exception as e:
                if generation == self._generation:
                    self._set_state(LoaderState.failure(str(e) or type(e).__name__))
                raise

        if generation != self._generation:
            logger.debug("Discarding stale page %s of %s", page, self._family.value)
            self._telemetry.count("loader.stale", resource=self._family.value)
            return

        if isinstance(result, Failure):
            self._set_state(LoaderState.failure(result.error.user_message))
            return

        envelope = result.value
        if reset or page == 1:
            self._items = list(envelope.data)
        else:
            self._items.extend(envelope.data)

        pagination = envelope.pagination
        self._can_load_more = pagination.has_next
        # A settled page re-arms the trigger, even if it added no items
        self._trigger_mark = None
        if pagination.next_page is not None:
            self._cursor_page = pagination.next_page
        logger.debug(
            "Applied page %s of %s (%d items, more=%s)",
            page,
            self._family.value,
            len(envelope.data),
            self._can_load_more,
        )
        self._set_state(LoaderState.success())

    async def _fetch_page(self, page: int) -> Result[ResourceEnvelope, PotterBrowserError]:
        try:
            envelope = await self._fetcher.fetch(
                self._family, page, self._page_size, self._sort.token
            )
        except PotterBrowserError as e:
            logger.debug("Page %s of %s failed: %s", page, self._family.value, e)
            return Failure(e)
        return Success(envelope)

    def _set_state(self, state: LoaderState) -> None:
        self._state = state
        if not self._listeners:
            return
        session = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception as e:
                logger.error("Session listener failed: %s", e, exc_info=True)

    def _check_family(self, option: SortOption) -> None:
        if option.family is not self._family:
            raise ValueError(
                f"Sort option for {option.family.value} used with {self._family.value}"
            )


def create_loaders(
    fetcher: ResourceFetcher,
    *,
    page_size: int | None = None,
    config: FrozenConfig | None = None,
) -> dict[ResourceFamily, PaginatedLoader]:
    """Return one independent loader per resource family."""
    if page_size is None:
        page_size = (config or resolve_config().to_frozen()).page_size
    return {
        family: PaginatedLoader(family, fetcher, page_size=page_size)
        for family in ResourceFamily
    }
