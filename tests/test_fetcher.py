"""Tests for the HTTP fetcher."""

from __future__ import annotations

import httpx
import pytest

from errors import FetchError
from models import ErrorKind
from services import ItunesFetcher, build_search_request


def fetcher_for(handler) -> ItunesFetcher:
    return ItunesFetcher(httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_returns_body_bytes():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"resultCount": 0, "results": []}')

    payload = fetcher_for(handler).fetch(build_search_request("tune yards"))

    assert payload == b'{"resultCount": 0, "results": []}'
    (request,) = seen
    assert request.method == "GET"
    assert request.url.host == "itunes.apple.com"
    assert request.url.path == "/search"
    assert request.url.params["term"] == "tune yards"
    assert request.url.params["limit"] == "200"


def test_server_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="oops")

    with pytest.raises(FetchError) as excinfo:
        fetcher_for(handler).fetch(build_search_request("abba"))

    assert excinfo.value.kind is ErrorKind.FETCH
    assert excinfo.value.status_code == 500


def test_not_found_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(FetchError):
        fetcher_for(handler).fetch(build_search_request("abba"))


def test_timeout_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(FetchError) as excinfo:
        fetcher_for(handler).fetch(build_search_request("abba"))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.TimeoutException)


def test_network_failure_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(FetchError):
        fetcher_for(handler).fetch(build_search_request("abba"))


def test_injected_client_is_not_closed():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with ItunesFetcher(client):
        pass

    assert not client.is_closed


def test_own_client_is_closed():
    fetcher = ItunesFetcher(timeout=1.0)

    fetcher.close()

    assert fetcher.client.is_closed
