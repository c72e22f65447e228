"""
Global test configuration: markers, environment isolation and shared fakes.
"""

import asyncio
from collections import deque
from collections.abc import Callable
import logging
import os
from typing import Any, NamedTuple

import pytest

from potter_browser.config import FrozenConfig
from potter_browser.core.types import ResourceEnvelope, ResourceFamily


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_potter_env(request, monkeypatch):
    """Ensure a clean POTTER_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env, and
    tests marked ``api`` bypass isolation so the real environment is used.
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("POTTER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home config path at an isolated, initially missing file."""
    if request.node.get_closest_marker("allow_real_home_config"):
        return
    home_dir = tmp_path / "home_config_isolated"
    home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("POTTER_CONFIG_HOME", str(home_dir / "potter_browser.toml"))


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with a mocked HTTP transport",
        "api: Real API tests against the public catalog (network required)",
        "allow_env_pollution: Keep POTTER_* environment variables for this test",
        "allow_real_home_config: Read the developer's real home config file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Automatically skip API tests unless explicitly enabled."""
    if not os.getenv("ENABLE_API_TESTS"):
        skip_api = pytest.mark.skip(reason="API tests require ENABLE_API_TESTS=1")
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


# --- Wire Payload Builders ---


def _wire_item(family: ResourceFamily, item_id: str, **attributes: Any) -> dict:
    attrs = {"slug": item_id, family.label_field: f"{family.value} {item_id}"}
    attrs.update(attributes)
    return {
        "id": item_id,
        "type": family.value[:-1],
        "attributes": attrs,
        "links": {"self": f"/v1/{family.value}/{item_id}"},
    }


def _wire_page(
    ids: list[str],
    *,
    family: ResourceFamily = ResourceFamily.BOOKS,
    current: int = 1,
    next_page: int | None = None,
    last: int | None = None,
    records: int | None = None,
) -> dict:
    return {
        "data": [_wire_item(family, i) for i in ids],
        "links": {
            "self": f"/v1/{family.value}?page[number]={current}",
            "current": f"/v1/{family.value}?page[number]={current}",
        },
        "meta": {
            "pagination": {
                "current": current,
                "next": next_page,
                "last": last,
                "records": records,
            },
            "copyright": "Copyright © Potter DB 2024",
            "generated_at": "2024-01-01T00:00:00.000+00:00",
        },
    }


@pytest.fixture
def wire_item():
    """Factory for one wire-format item dict."""
    return _wire_item


@pytest.fixture
def wire_page():
    """Factory for a wire-format envelope dict."""
    return _wire_page


@pytest.fixture
def envelope():
    """Factory for a decoded ``ResourceEnvelope``."""

    def _make(ids: list[str], **kwargs: Any) -> ResourceEnvelope:
        return ResourceEnvelope.model_validate(_wire_page(ids, **kwargs))

    return _make


@pytest.fixture
def frozen_config():
    return FrozenConfig(
        base_url="https://api.example.test/v1",
        page_size=2,
        recommendation_page_size=10,
        timeout=5.0,
        user_agent="potter-browser-tests",
    )


# --- Scripted Fetcher ---


class FetchCall(NamedTuple):
    resource: ResourceFamily
    page: int
    page_size: int
    sort: str | None


class ScriptedFetcher:
    """In-memory ``ResourceFetcher`` returning queued outcomes.

    Outcomes are envelopes or exceptions, consumed in call order. When the
    queue is empty the optional ``responder`` is used. With ``hold=True``
    each call parks until ``release()`` is called.
    """

    def __init__(
        self,
        *outcomes: ResourceEnvelope | BaseException,
        responder: Callable[[FetchCall], ResourceEnvelope] | None = None,
    ) -> None:
        self.outcomes: deque[ResourceEnvelope | BaseException] = deque(outcomes)
        self.responder = responder
        self.calls: list[FetchCall] = []
        self.hold = False
        self.pending: list[asyncio.Event] = []

    def push(self, *outcomes: ResourceEnvelope | BaseException) -> None:
        self.outcomes.extend(outcomes)

    def release(self, index: int | None = None) -> None:
        """Release one parked call by index, or all of them."""
        targets = self.pending if index is None else [self.pending[index]]
        for event in targets:
            event.set()

    async def fetch(
        self,
        resource: ResourceFamily,
        page: int,
        page_size: int,
        sort: str | None = None,
    ) -> ResourceEnvelope:
        call = FetchCall(resource, page, page_size, sort)
        self.calls.append(call)
        if self.outcomes:
            outcome = self.outcomes.popleft()
        elif self.responder is not None:
            outcome = self.responder(call)
        else:
            raise AssertionError(f"Unexpected fetch: {call}")
        if self.hold:
            event = asyncio.Event()
            self.pending.append(event)
            await event.wait()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def scripted_fetcher():
    """Factory for ``ScriptedFetcher`` instances."""
    return ScriptedFetcher


@pytest.fixture
def settle():
    """Let pending tasks run until they park on an await."""

    async def _settle(rounds: int = 5) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _settle
