"""Random recommendations across the five resource families.

``RecommendationAggregator.pick_random()`` chooses a family uniformly, fetches
a small first page and returns one item from it uniformly. Randomness comes
from an injectable source so tests can make the choices deterministic.
``RecommendationFeed`` wraps the aggregator with an observable state for a
"For You" screen.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
import logging
import random
from typing import TYPE_CHECKING, Protocol, TypeVar

from potter_browser.config import FrozenConfig, resolve_config
from potter_browser.core.types import LoaderState, Recommendation, ResourceFamily
from potter_browser.exceptions import EmptyResourceError, PotterBrowserError
from potter_browser.telemetry import TelemetryContext

if TYPE_CHECKING:
    from potter_browser.client import ResourceFetcher
    from potter_browser.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")

FAMILIES: tuple[ResourceFamily, ...] = tuple(ResourceFamily)


class RandomSource(Protocol):
    """The slice of ``random.Random`` the aggregator relies on."""

    def choice(self, seq: Sequence[T]) -> T: ...  # noqa: D102


class RecommendationAggregator:
    """Stateless picker of one random item from a random family."""

    def __init__(
        self,
        fetcher: ResourceFetcher,
        *,
        rng: RandomSource | None = None,
        page_size: int | None = None,
        config: FrozenConfig | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._rng: RandomSource = rng or random.Random()
        if page_size is None:
            page_size = (config or resolve_config().to_frozen()).recommendation_page_size
        self._page_size = page_size
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def pick_random(self) -> Recommendation:
        """Return a random item tagged with its family.

        Raises:
            EmptyResourceError: If the chosen family's first page is empty.
            PotterBrowserError: Any client failure, unmodified.
        """
        family = self._rng.choice(FAMILIES)
        with self._telemetry("recommendations.pick", resource=family.value):
            envelope = await self._fetcher.fetch(family, 1, self._page_size, None)
        if not envelope.data:
            raise EmptyResourceError(family)
        item = self._rng.choice(envelope.data)
        logger.debug("Recommending %s %s", family.value, item.id)
        return Recommendation(family=family, item=item)


class RecommendationFeed:
    """Holds the current recommendation and a ``LoaderState`` for display.

    Refreshes are dropped while one is in flight. A failed refresh keeps the
    previous recommendation.
    """

    def __init__(self, aggregator: RecommendationAggregator) -> None:
        self._aggregator = aggregator
        self._recommendation: Recommendation | None = None
        self._state = LoaderState.idle()
        self._listeners: list[Callable[[RecommendationFeed], None]] = []

    @property
    def recommendation(self) -> Recommendation | None:
        return self._recommendation

    @property
    def state(self) -> LoaderState:
        return self._state

    def add_listener(
        self, listener: Callable[[RecommendationFeed], None]
    ) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def refresh(self) -> None:
        if self._state.is_loading:
            return
        self._set_state(LoaderState.loading())
        try:
            recommendation = await self._aggregator.pick_random()
        except PotterBrowserError as e:
            logger.debug("Recommendation failed: %s", e)
            self._set_state(LoaderState.failure(e.user_message))
            return
        except asyncio.CancelledError:
            self._set_state(LoaderState.idle())
            raise
        except Exception as e:
            self._set_state(LoaderState.failure(str(e) or type(e).__name__))
            raise
        self._recommendation = recommendation
        self._set_state(LoaderState.success())

    def _set_state(self, state: LoaderState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("Recommendation listener failed: %s", e, exc_info=True)
