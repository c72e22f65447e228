"""Unit tests for the resource client: request building, decoding, failures."""

import httpx
import pytest

from potter_browser.client import ResourceClient, decode_envelope
from potter_browser.config import FrozenConfig
from potter_browser.core.types import LoaderState, ResourceFamily
from potter_browser.exceptions import (
    DecodeError,
    HttpError,
    InvalidRequestError,
    TransportError,
)
from potter_browser.loader import PaginatedLoader


def _client(config, handler) -> tuple[ResourceClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ResourceClient(config, http_client=http), http


class TestRequestBuilding:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_query_parameters_and_path(self, frozen_config, wire_page):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=wire_page(["a"]))

        client, http = _client(frozen_config, handler)
        async with http:
            await client.fetch(ResourceFamily.SPELLS, 3, 25, "-name")

        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "api.example.test"
        assert request.url.path == "/v1/spells"
        assert request.url.params["page[number]"] == "3"
        assert request.url.params["page[size]"] == "25"
        assert request.url.params["sort"] == "-name"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sort_omitted_when_none(self, frozen_config, wire_page):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=wire_page(["a"]))

        client, http = _client(frozen_config, handler)
        async with http:
            await client.fetch(ResourceFamily.BOOKS, 1, 10)

        assert "sort" not in seen[0].url.params

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_owned_client_sends_user_agent(self, frozen_config):
        client = ResourceClient(frozen_config)
        try:
            request = client.build_request(ResourceFamily.BOOKS, 1, 5, "title")
        finally:
            await client.aclose()

        assert request.headers["User-Agent"] == "potter-browser-tests"
        assert request.url.params["sort"] == "title"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("base_url", ["not a url", "ftp://files.example.test/v1"])
    async def test_unusable_base_url_is_invalid_request(self, base_url):
        config = FrozenConfig(
            base_url=base_url,
            page_size=5,
            recommendation_page_size=5,
            timeout=1.0,
            user_agent="t",
        )

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request should be sent")

        client, http = _client(config, handler)
        async with http:
            with pytest.raises(InvalidRequestError) as exc_info:
                await client.fetch(ResourceFamily.BOOKS, 1, 5)

        assert exc_info.value.user_message == "Invalid URL"

    @pytest.mark.unit
    def test_rejects_non_positive_page(self, frozen_config):
        client = ResourceClient(frozen_config, http_client=httpx.AsyncClient())
        with pytest.raises(ValueError, match="page"):
            client.build_request(ResourceFamily.BOOKS, 0, 5)


class TestDecoding:
    @pytest.mark.unit
    def test_envelope_lifts_meta_and_camelizes_attributes(self, wire_page):
        payload = wire_page(["hbp"], next_page=2, last=7, records=7)
        payload["data"][0]["attributes"].update(
            {"release_date": "2005-07-16", "box_office": None, "alias_names": ["x"]}
        )

        env = decode_envelope(httpx.Response(200, json=payload).content)

        assert env.pagination.current_page == 1
        assert env.pagination.next_page == 2
        assert env.pagination.last_page == 7
        assert env.pagination.total_records == 7
        assert env.copyright.startswith("Copyright")
        assert env.generated_at.startswith("2024")
        assert env.links is not None and env.links.self_.endswith("page[number]=1")

        item = env.data[0]
        assert item.id == "hbp"
        assert item.type_tag == "book"
        assert item.attributes["releaseDate"] == "2005-07-16"
        assert item.attributes["aliasNames"] == ["x"]
        assert "release_date" not in item.attributes
        assert item.get("boxOffice") is None
        assert item.get("missing", "n/a") == "n/a"

    @pytest.mark.unit
    def test_absent_optional_fields_are_not_errors(self):
        body = b"""{
            "data": [{"id": "p1", "type": "potion", "attributes": {}}],
            "meta": {"pagination": {}, "copyright": "c", "generated_at": "g"}
        }"""

        env = decode_envelope(body)

        assert env.pagination.has_next is False
        assert env.links is None
        assert env.data[0].attributes == {}
        assert env.data[0].label == "p1"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"[]",
            b'{"data": "nope", "meta": {"pagination": {}, "copyright": "c", "generated_at": "g"}}',
            b'{"data": []}',
            b'{"data": [], "meta": "broken"}',
        ],
    )
    def test_malformed_bodies_raise_decode_error(self, body):
        with pytest.raises(DecodeError) as exc_info:
            decode_envelope(body)
        assert exc_info.value.user_message == "Invalid response"


class TestFailureClassification:
    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 429, 500])
    async def test_non_2xx_is_http_error(self, frozen_config, status):
        client, http = _client(
            frozen_config, lambda request: httpx.Response(status, text="nope")
        )
        async with http:
            with pytest.raises(HttpError) as exc_info:
                await client.fetch(ResourceFamily.MOVIES, 1, 5)

        assert exc_info.value.status_code == status
        assert exc_info.value.user_message == f"Request failed with code: {status}"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_2xx_other_than_200_is_success(self, frozen_config, wire_page):
        client, http = _client(
            frozen_config, lambda request: httpx.Response(203, json=wire_page(["m"]))
        )
        async with http:
            env = await client.fetch(ResourceFamily.MOVIES, 1, 5)
        assert [i.id for i in env.data] == ["m"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error_type", [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError]
    )
    async def test_transport_failures_are_wrapped(self, frozen_config, error_type):
        def handler(request: httpx.Request) -> httpx.Response:
            raise error_type("connection dropped", request=request)

        client, http = _client(frozen_config, handler)
        async with http:
            with pytest.raises(TransportError) as exc_info:
                await client.fetch(ResourceFamily.POTIONS, 1, 5)

        assert isinstance(exc_info.value.__cause__, error_type)
        assert exc_info.value.user_message.startswith("Network error")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bad_body_on_success_status_is_decode_error(self, frozen_config):
        client, http = _client(
            frozen_config, lambda request: httpx.Response(200, text="<html>")
        )
        async with http:
            with pytest.raises(DecodeError):
                await client.fetch(ResourceFamily.CHARACTERS, 1, 5)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_content_decoding_failure_is_decode_error(self, frozen_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.DecodingError("bad gzip", request=request)

        client, http = _client(frozen_config, handler)
        async with http:
            with pytest.raises(DecodeError) as exc_info:
                await client.fetch(ResourceFamily.BOOKS, 1, 5)

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_corrupt_gzip_body_is_decode_error(self, frozen_config):
        client, http = _client(
            frozen_config,
            lambda request: httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
            ),
        )
        async with http:
            with pytest.raises(DecodeError):
                await client.fetch(ResourceFamily.BOOKS, 1, 5)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_request_errors_are_transport_errors(self, frozen_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.TooManyRedirects("redirect loop", request=request)

        client, http = _client(frozen_config, handler)
        async with http:
            with pytest.raises(TransportError):
                await client.fetch(ResourceFamily.BOOKS, 1, 5)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_loader_settles_on_undecodable_body(self, frozen_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.DecodingError("bad gzip", request=request)

        client, http = _client(frozen_config, handler)
        loader = PaginatedLoader(ResourceFamily.BOOKS, client, config=frozen_config)
        async with http:
            await loader.load(reset=True)

        assert loader.state == LoaderState.failure("Invalid response")
        assert loader.items == ()
