# tests/test_transport.py

from __future__ import annotations

import json
import logging

import httpx
import pytest

from urlscan_client.errors import NO_RESPONSE, TransportError
from urlscan_client.transport.http import API_KEY_HEADER, HttpTransport

API_KEY = "0123456789abcdef-secret"


def _transport(handler, **kwargs) -> HttpTransport:
    return HttpTransport(
        api_key=API_KEY,
        base_url="https://urlscan.test/api/v1/",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def test_post_sends_json_with_api_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"uuid": "u"})

    resp = _transport(handler, user_agent="ua/1").post("scan", b'{"url": "https://example.com/"}')

    assert resp.status_code == 200
    assert json.loads(resp.body) == {"uuid": "u"}
    [req] = seen
    assert req.method == "POST"
    assert str(req.url) == "https://urlscan.test/api/v1/scan/"
    assert req.headers[API_KEY_HEADER] == API_KEY
    assert req.headers["Content-Type"] == "application/json"
    assert req.headers["User-Agent"] == "ua/1"
    assert json.loads(req.content) == {"url": "https://example.com/"}


def test_get_builds_path_and_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404, json={"status": 404})

    resp = _transport(handler).get("result/abc", None)
    _transport(handler).get("search", {"q": "domain:example.com", "size": "1"})

    assert resp.status_code == 404
    assert str(seen[0].url) == "https://urlscan.test/api/v1/result/abc/"
    assert seen[0].headers[API_KEY_HEADER] == API_KEY
    assert seen[1].url.path == "/api/v1/search/"
    assert dict(seen[1].url.params) == {"q": "domain:example.com", "size": "1"}


def test_connect_failure_has_no_response_sentinel() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    with pytest.raises(TransportError) as ei:
        _transport(handler).get("result/abc")

    assert ei.value.status_code == NO_RESPONSE
    assert ei.value.no_response
    assert isinstance(ei.value.__cause__, httpx.ConnectError)


def test_timeout_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TransportError) as ei:
        _transport(handler).post("scan", b"{}", timeout=0.5)

    assert "timeout" in str(ei.value)


class _BrokenBody(httpx.SyncByteStream):
    def __iter__(self):
        yield b'{"partial": '
        raise httpx.ReadError("connection reset mid-body")


def test_body_read_failure_keeps_status_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_BrokenBody())

    with pytest.raises(TransportError) as ei:
        _transport(handler).get("result/abc")

    assert ei.value.status_code == 200
    assert not ei.value.no_response
    assert "Fail to read" in str(ei.value)
    assert isinstance(ei.value.__cause__, httpx.ReadError)


def test_unexpected_status_logged_as_warning(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, json={"message": "bad gateway"})

    with caplog.at_level(logging.WARNING, logger="urlscan_client.transport.http"):
        resp = _transport(handler).get("result/abc")

    assert resp.status_code == 502
    assert any("Unexpected status code" in r.getMessage() for r in caplog.records)


def test_not_ready_poll_status_is_not_warned(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status": 404})

    with caplog.at_level(logging.WARNING, logger="urlscan_client.transport.http"):
        _transport(handler).get("result/abc")

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_api_key_not_logged_in_full(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    with caplog.at_level(logging.DEBUG, logger="urlscan_client.transport.http"):
        t = _transport(handler)
        t.post("scan", b"{}")
        t.get("search", {"q": "x"})

    assert API_KEY not in caplog.text
    assert API_KEY not in repr(t)
    assert "0123***" in repr(t)


def test_requires_api_key() -> None:
    with pytest.raises(ValueError):
        HttpTransport(api_key=" ", base_url="https://urlscan.test/api/v1")
