# tests/test_codec.py

from __future__ import annotations

import json
import logging

import pytest

from urlscan_client.codec.models import SearchResponse, SubmitRequest, SubmitResponse, Visibility
from urlscan_client.codec.scan_result import ScanResult
from urlscan_client.codec.wire import decode, decode_document, encode, server_message
from urlscan_client.errors import DecodeError, EncodingError


def test_submit_request_echo_keeps_set_fields_only() -> None:
    req = SubmitRequest(url="https://example.com/", referer="https://ref.example/", visibility=Visibility.PRIVATE)

    wire = json.loads(encode(req))
    assert wire == {"url": "https://example.com/", "referer": "https://ref.example/", "public": "off"}
    assert "customagent" not in wire

    echoed = decode(json.dumps(wire).encode(), SubmitRequest)
    assert echoed == req


def test_submit_request_minimal_wire() -> None:
    req = SubmitRequest(url="https://example.com/")

    assert json.loads(encode(req)) == {"url": "https://example.com/"}
    assert decode(encode(req), SubmitRequest) == req


def test_submit_request_empty_string_is_sent() -> None:
    wire = json.loads(encode(SubmitRequest(url="https://example.com/", custom_agent="")))
    assert wire["customagent"] == ""


def test_encode_rejects_unserializable_payload() -> None:
    with pytest.raises(EncodingError):
        encode(SubmitRequest(url=object()))  # type: ignore[arg-type]


def test_submit_response_tolerates_extra_and_missing_fields() -> None:
    raw = json.dumps({"uuid": "u1", "api": "a1", "new_field": {"x": 1}, "options": "not-a-dict"}).encode()

    sub = decode(raw, SubmitResponse, status_code=200)

    assert (sub.uuid, sub.api, sub.message, sub.options) == ("u1", "a1", "", {})


@pytest.mark.parametrize("body", [b"", b"not json", b"\xff\xfe", b"[1, 2]", b'"text"'])
def test_decode_document_rejects_non_objects(body: bytes) -> None:
    with pytest.raises(DecodeError) as ei:
        decode_document(body, status_code=404)
    assert ei.value.status_code == 404


def test_server_message_extraction() -> None:
    assert server_message(b'{"message": "Invalid UUID", "status": 400}') == "Invalid UUID"
    assert server_message(b'{"description": "Rate limit"}') == "Rate limit"
    assert server_message(b"plain text error") == "plain text error"
    assert server_message(b"{}") is None


def test_search_response_decoding() -> None:
    raw = json.dumps(
        {
            "results": [
                {
                    "_id": "abc",
                    "page": {"url": "https://example.com/", "domain": "example.com", "ip": "93.184.216.34"},
                    "result": "https://urlscan.io/api/v1/result/abc/",
                    "stats": {"requests": 12, "uniqIPs": 3, "dataLength": "2048"},
                    "task": {"visibility": "public", "method": "api"},
                    "uniq_countries": 2,
                    "sort": [1, "x"],
                },
                "not-an-object",
            ],
            "total": 7,
            "took": 12,
        }
    ).encode()

    resp = decode(raw, SearchResponse)

    assert resp.total == 7
    [item] = resp.results
    assert item.id == "abc"
    assert item.page.domain == "example.com"
    assert item.stats.requests == 12
    assert item.stats.data_length == 2048
    assert item.task.visibility == "public"
    assert item.uniq_countries == 2
    assert item.raw["sort"] == [1, "x"]


# ---- scan result ----


def test_scan_result_sections(scan_result_doc) -> None:
    result = ScanResult(scan_result_doc)

    assert result.page.title == "Example Domain"
    assert result.task.uuid == "0e37e828-a9d9-45c0-ac50-1ca579b86c72"
    assert result.task.option_user_agent == "Mozilla/5.0 (custom)"
    assert result.lists.ips == ["93.184.216.34"]
    assert result.lists.certificates[0].subject_name == "www.example.org"
    assert result.stats.secure_percentage == 100
    assert result.stats.domain_stats[0].sub_domains[0].domain == "www"
    assert result.stats.ip_stats[0].asn_name == "EDGECAST"
    assert result.stats.ip_stats[0].country == "US"

    # Non-object cookie entries are skipped, odd scalar types coerced.
    assert [c.name for c in result.cookies] == ["sid", "pref"]
    assert result.cookies[0].http_only is True
    assert result.cookies[1].size == 12

    [req] = result.requests
    assert (req.url, req.method, req.status, req.remote_port) == ("https://example.com/", "GET", 200, 443)
    assert req.resource_type == "Document"
    assert req.asn == "15133"

    assert result.links[0].href.startswith("https://www.iana.org")
    assert result.globals[0].prop == "jQuery"
    assert result.console[0]["message"]["text"] == "hello"

    assert result.processors["asn"].state == "done"
    assert result.processors["newFieldNobodyKnows"].data == {"nested": [1, 2, 3]}


def test_scan_result_path_lookup(scan_result_doc) -> None:
    result = ScanResult(scan_result_doc)

    assert result.get("verdicts.overall.malicious") is False
    assert result.get("data.requests.0.response.response.protocol") == "h2"
    assert result.get("lists.ips.-1") == "93.184.216.34"
    assert result.get("lists.ips.5") is None
    assert result.get("page.url.deeper", "dflt") == "dflt"
    assert result.get("nope", 1) == 1


def test_scan_result_bad_section_does_not_break_others(scan_result_doc, caplog) -> None:
    scan_result_doc["stats"] = ["unexpected", "shape"]
    scan_result_doc["data"]["cookies"] = {"also": "wrong"}

    with caplog.at_level(logging.WARNING):
        result = ScanResult(scan_result_doc)
        stats = result.stats
        cookies = result.cookies
        page = result.page

    assert stats.malicious == 0 and stats.domain_stats == []
    assert cookies == []
    assert page.url == "https://example.com/"
    assert sum("unexpected type" in r.getMessage() for r in caplog.records) == 2


def test_scan_result_empty_document() -> None:
    result = ScanResult({})

    assert result.page.url == ""
    assert result.requests == []
    assert result.processors == {}
    assert result == ScanResult({})
