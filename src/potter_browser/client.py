"""Resource client for the read-only catalog API.

Builds ``GET {base}/{resource}?page[number]=..&page[size]=..[&sort=..]``
requests, classifies failures into the package's error taxonomy and decodes
the JSON envelope. The client is stateless across calls and never retries.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Protocol

import httpx
from pydantic import ValidationError

from potter_browser.config import FrozenConfig, resolve_config
from potter_browser.core.types import ResourceEnvelope, ResourceFamily
from potter_browser.exceptions import (
    DecodeError,
    HttpError,
    InvalidRequestError,
    TransportError,
)
from potter_browser.telemetry import TelemetryContext

if TYPE_CHECKING:
    from types import TracebackType

    from potter_browser.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

PAGE_NUMBER_PARAM = "page[number]"
PAGE_SIZE_PARAM = "page[size]"
SORT_PARAM = "sort"


class ResourceFetcher(Protocol):
    """Anything that can fetch one page of a resource family.

    Loaders and the recommendation aggregator depend on this protocol rather
    than on ``ResourceClient`` so tests can script responses.
    """

    async def fetch(
        self,
        resource: ResourceFamily,
        page: int,
        page_size: int,
        sort: str | None = None,
    ) -> ResourceEnvelope:
        """Fetch and decode one page."""
        ...


class ResourceClient:
    """HTTP implementation of ``ResourceFetcher`` on ``httpx.AsyncClient``.

    The underlying ``httpx.AsyncClient`` may be injected (for custom transports
    or connection sharing); otherwise one is created from the configuration
    and closed by ``aclose()`` or the async context manager.
    """

    def __init__(
        self,
        config: FrozenConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self.config = config if config is not None else resolve_config().to_frozen()
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={
                "Accept": "application/json",
                "User-Agent": self.config.user_agent,
            },
        )
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def __aenter__(self) -> ResourceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    def build_request(
        self,
        resource: ResourceFamily,
        page: int,
        page_size: int,
        sort: str | None = None,
    ) -> httpx.Request:
        """Build the GET request for one page of ``resource``.

        ``sort`` is passed through verbatim; invalid tokens are the server's
        concern.

        Raises:
            InvalidRequestError: If the configured base URL cannot form an
                absolute http(s) URL.
        """
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")

        params: list[tuple[str, str | int]] = [
            (PAGE_NUMBER_PARAM, page),
            (PAGE_SIZE_PARAM, page_size),
        ]
        if sort is not None:
            params.append((SORT_PARAM, sort))

        try:
            url = httpx.URL(f"{self.config.base_url}/{ResourceFamily(resource).value}")
        except httpx.InvalidURL as e:
            raise InvalidRequestError(f"Cannot build URL from {self.config.base_url!r}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidRequestError(f"Cannot build URL from {self.config.base_url!r}")

        return self._http.build_request("GET", url.copy_merge_params(params))

    async def fetch(
        self,
        resource: ResourceFamily,
        page: int,
        page_size: int,
        sort: str | None = None,
    ) -> ResourceEnvelope:
        """Fetch and decode one page.

        Raises:
            InvalidRequestError: If the request URL cannot be constructed.
            HttpError: If the response status is outside 200-299.
            DecodeError: If the body cannot be decoded or is not a valid envelope.
            TransportError: On connectivity failures, timeouts and any other
                request error raised by httpx.
        """
        request = self.build_request(resource, page, page_size, sort)
        logger.debug("GET %s", request.url)

        with self._telemetry("client.fetch", resource=request.url.path):
            try:
                response = await self._http.send(request)
            except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
                raise InvalidRequestError(str(e)) from e
            except httpx.DecodingError as e:
                logger.warning("Undecodable response body from %s: %s", request.url, e)
                raise DecodeError(str(e) or type(e).__name__) from e
            # Any other RequestError (transport, redirect loops)
            except httpx.RequestError as e:
                raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning("GET %s returned HTTP %s", request.url, response.status_code)
            self._telemetry.count("client.http_error", status=response.status_code)
            raise HttpError(response.status_code, str(request.url))

        return decode_envelope(response.content)


def decode_envelope(body: bytes | str) -> ResourceEnvelope:
    """Decode a response body into a ``ResourceEnvelope``.

    Raises:
        DecodeError: If the body is not JSON or does not match the envelope shape.
    """
    try:
        payload = json.loads(body)
        return ResourceEnvelope.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.warning("Undecodable envelope: %s", e)
        raise DecodeError(str(e)) from e
