# src/urlscan_client/codec/scan_result.py

from __future__ import annotations

"""
Scan report document.

The report schema is large and keeps growing, and callers usually need a
handful of fields. ScanResult therefore keeps the decoded JSON tree as-is and
exposes:
- get("page.url") style lookups over the raw tree,
- flat, independently decoded sub-records (page, task, lists, stats, cookies,
  requests, ...).

Each section is decoded on first access. A section that has the wrong shape
decodes to its empty default and logs a warning; it never breaks the others.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, TypeVar

from ._coerce import as_bool, as_dict, as_float, as_int, as_list, as_str, as_str_list

_module_logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


# ---- flat sub-records ----


@dataclass(slots=True, frozen=True)
class ScanGeo:
    city: str = ""
    country: str = ""
    country_name: str = ""
    region: str = ""
    zip: str = ""
    metro: int = 0
    ll: tuple[float, ...] = ()

    @classmethod
    def from_wire(cls, data: Any) -> ScanGeo:
        d = as_dict(data)
        return cls(
            city=as_str(d.get("city")),
            country=as_str(d.get("country")),
            country_name=as_str(d.get("country_name")),
            region=as_str(d.get("region")),
            zip=as_str(d.get("zip")),
            metro=as_int(d.get("metro")),
            ll=tuple(as_float(x) for x in as_list(d.get("ll"))),
        )


@dataclass(slots=True, frozen=True)
class ScanPage:
    url: str = ""
    domain: str = ""
    ip: str = ""
    ptr: str = ""
    asn: str = ""
    asnname: str = ""
    city: str = ""
    country: str = ""
    server: str = ""
    title: str = ""
    status: str = ""
    mime_type: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> ScanPage:
        d = as_dict(data)
        return cls(
            url=as_str(d.get("url")),
            domain=as_str(d.get("domain")),
            ip=as_str(d.get("ip")),
            ptr=as_str(d.get("ptr")),
            asn=as_str(d.get("asn")),
            asnname=as_str(d.get("asnname")),
            city=as_str(d.get("city")),
            country=as_str(d.get("country")),
            server=as_str(d.get("server")),
            title=as_str(d.get("title")),
            status=as_str(d.get("status")),
            mime_type=as_str(d.get("mimeType")),
        )


@dataclass(slots=True, frozen=True)
class ScanTask:
    uuid: str = ""
    url: str = ""
    time: str = ""
    method: str = ""
    source: str = ""
    visibility: str = ""
    user_agent: str = ""
    report_url: str = ""
    screenshot_url: str = ""
    dom_url: str = ""
    option_user_agent: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> ScanTask:
        d = as_dict(data)
        return cls(
            uuid=as_str(d.get("uuid")),
            url=as_str(d.get("url")),
            time=as_str(d.get("time")),
            method=as_str(d.get("method")),
            source=as_str(d.get("source")),
            visibility=as_str(d.get("visibility")),
            user_agent=as_str(d.get("userAgent")),
            report_url=as_str(d.get("reportURL")),
            screenshot_url=as_str(d.get("screenshotURL")),
            dom_url=as_str(d.get("domURL")),
            option_user_agent=as_str(as_dict(d.get("options")).get("useragent")),
        )


@dataclass(slots=True, frozen=True)
class Certificate:
    issuer: str = ""
    subject_name: str = ""
    valid_from: int = 0
    valid_to: int = 0

    @classmethod
    def from_wire(cls, data: Any) -> Certificate:
        d = as_dict(data)
        return cls(
            issuer=as_str(d.get("issuer")),
            subject_name=as_str(d.get("subjectName")),
            valid_from=as_int(d.get("validFrom")),
            valid_to=as_int(d.get("validTo")),
        )


@dataclass(slots=True, frozen=True)
class ScanLists:
    ips: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    asns: list[str] = field(default_factory=list)
    domains: list[str] = field(default_factory=list)
    servers: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    link_domains: list[str] = field(default_factory=list)
    hashes: list[str] = field(default_factory=list)
    certificates: list[Certificate] = field(default_factory=list)

    @classmethod
    def from_wire(cls, data: Any) -> ScanLists:
        d = as_dict(data)
        return cls(
            ips=as_str_list(d.get("ips")),
            countries=as_str_list(d.get("countries")),
            asns=as_str_list(d.get("asns")),
            domains=as_str_list(d.get("domains")),
            servers=as_str_list(d.get("servers")),
            urls=as_str_list(d.get("urls")),
            link_domains=as_str_list(d.get("linkDomains")),
            hashes=as_str_list(d.get("hashes")),
            certificates=[Certificate.from_wire(x) for x in as_list(d.get("certificates")) if isinstance(x, dict)],
        )


@dataclass(slots=True, frozen=True)
class Cookie:
    name: str = ""
    value: str = ""
    domain: str = ""
    path: str = ""
    expires: float = 0.0
    size: int = 0
    http_only: bool = False
    secure: bool = False
    session: bool = False

    @classmethod
    def from_wire(cls, data: Any) -> Cookie:
        d = as_dict(data)
        return cls(
            name=as_str(d.get("name")),
            value=as_str(d.get("value")),
            domain=as_str(d.get("domain")),
            path=as_str(d.get("path")),
            expires=as_float(d.get("expires")),
            size=as_int(d.get("size")),
            http_only=as_bool(d.get("httpOnly")),
            secure=as_bool(d.get("secure")),
            session=as_bool(d.get("session")),
        )


@dataclass(slots=True, frozen=True)
class Link:
    href: str = ""
    text: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> Link:
        d = as_dict(data)
        return cls(href=as_str(d.get("href")), text=as_str(d.get("text")))


@dataclass(slots=True, frozen=True)
class GlobalVariable:
    prop: str = ""
    type: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> GlobalVariable:
        d = as_dict(data)
        return cls(prop=as_str(d.get("prop")), type=as_str(d.get("type")))


@dataclass(slots=True, frozen=True)
class RequestRecord:
    """
    One network request observed during the scan, flattened.

    The unflattened entry (request/response/initiator trees) stays in `raw`.
    """

    url: str = ""
    method: str = ""
    resource_type: str = ""
    document_url: str = ""
    status: int = 0
    mime_type: str = ""
    protocol: str = ""
    remote_ip: str = ""
    remote_port: int = 0
    security_state: str = ""
    response_hash: str = ""
    data_length: int = 0
    encoded_data_length: int = 0
    size: int = 0
    asn: str = ""
    country: str = ""
    initiator_url: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_wire(cls, data: Any) -> RequestRecord:
        d = as_dict(data)
        req_outer = as_dict(d.get("request"))
        req = as_dict(req_outer.get("request"))
        resp_outer = as_dict(d.get("response"))
        resp = as_dict(resp_outer.get("response"))
        return cls(
            url=as_str(req.get("url")) or as_str(resp.get("url")),
            method=as_str(req.get("method")),
            resource_type=as_str(req_outer.get("type")) or as_str(resp_outer.get("type")),
            document_url=as_str(req_outer.get("documentURL")),
            status=as_int(resp.get("status")),
            mime_type=as_str(resp.get("mimeType")),
            protocol=as_str(resp.get("protocol")),
            remote_ip=as_str(resp.get("remoteIPAddress")),
            remote_port=as_int(resp.get("remotePort")),
            security_state=as_str(resp.get("securityState")),
            response_hash=as_str(resp_outer.get("hash")),
            data_length=as_int(resp_outer.get("dataLength")),
            encoded_data_length=as_int(resp_outer.get("encodedDataLength")),
            size=as_int(resp_outer.get("size")),
            asn=as_str(as_dict(resp_outer.get("asn")).get("asn")),
            country=as_str(as_dict(resp_outer.get("geoip")).get("country")),
            initiator_url=as_str(as_dict(d.get("initiatorInfo")).get("url")),
            raw=d,
        )


@dataclass(slots=True, frozen=True)
class SubDomain:
    domain: str = ""
    failed: bool = False


@dataclass(slots=True, frozen=True)
class StatsDetail:
    """Row of the per-domain/protocol/resource/server/TLS tables."""

    count: int = 0
    size: int = 0
    encoded_size: int = 0
    latency: int = 0
    redirects: int = 0
    index: int = 0
    domain: str = ""
    reg_domain: str = ""
    protocol: str = ""
    server: str = ""
    type: str = ""
    compression: str = ""
    countries: list[str] = field(default_factory=list)
    ips: list[str] = field(default_factory=list)
    initiators: list[str] = field(default_factory=list)
    sub_domains: list[SubDomain] = field(default_factory=list)
    percentage: Any = None
    security_state: Any = None

    @classmethod
    def from_wire(cls, data: Any) -> StatsDetail:
        d = as_dict(data)
        return cls(
            count=as_int(d.get("count")),
            size=as_int(d.get("size")),
            encoded_size=as_int(d.get("encodedSize")),
            latency=as_int(d.get("latency")),
            redirects=as_int(d.get("redirects")),
            index=as_int(d.get("index")),
            domain=as_str(d.get("domain")),
            reg_domain=as_str(d.get("regDomain")),
            protocol=as_str(d.get("protocol")),
            server=as_str(d.get("server")),
            type=as_str(d.get("type")),
            compression=as_str(d.get("compression")),
            countries=as_str_list(d.get("countries")),
            ips=as_str_list(d.get("ips")),
            initiators=as_str_list(d.get("initiators")),
            sub_domains=[
                SubDomain(domain=as_str(x.get("domain")), failed=as_bool(x.get("failed")))
                for x in as_list(d.get("subDomains"))
                if isinstance(x, dict)
            ],
            percentage=d.get("percentage"),
            security_state=d.get("securityState"),
        )


@dataclass(slots=True, frozen=True)
class IpStat:
    ip: str = ""
    asn: str = ""
    asn_name: str = ""
    country: str = ""
    ptr: str = ""
    ipv6: bool = False
    requests: int = 0
    redirects: int = 0
    size: int = 0
    encoded_size: int = 0
    domains: list[str] = field(default_factory=list)
    geoip: ScanGeo = field(default_factory=ScanGeo)

    @classmethod
    def from_wire(cls, data: Any) -> IpStat:
        d = as_dict(data)
        asn = as_dict(d.get("asn"))
        geoip = ScanGeo.from_wire(d.get("geoip"))
        return cls(
            ip=as_str(d.get("ip")),
            asn=as_str(asn.get("asn")),
            asn_name=as_str(asn.get("name")),
            country=geoip.country,
            ptr=as_str(as_dict(d.get("rdns")).get("ptr")),
            ipv6=as_bool(d.get("ipv6")),
            requests=as_int(d.get("requests")),
            redirects=as_int(d.get("redirects")),
            size=as_int(d.get("size")),
            encoded_size=as_int(d.get("encodedSize")),
            domains=as_str_list(d.get("domains")),
            geoip=geoip,
        )


def _details(v: Any) -> list[StatsDetail]:
    return [StatsDetail.from_wire(x) for x in as_list(v) if isinstance(x, dict)]


@dataclass(slots=True, frozen=True)
class ScanStats:
    malicious: int = 0
    ad_blocked: int = 0
    ipv6_percentage: int = 0
    secure_percentage: int = 0
    secure_requests: int = 0
    total_links: int = 0
    uniq_countries: int = 0
    domain_stats: list[StatsDetail] = field(default_factory=list)
    reg_domain_stats: list[StatsDetail] = field(default_factory=list)
    protocol_stats: list[StatsDetail] = field(default_factory=list)
    resource_stats: list[StatsDetail] = field(default_factory=list)
    server_stats: list[StatsDetail] = field(default_factory=list)
    tls_stats: list[StatsDetail] = field(default_factory=list)
    ip_stats: list[IpStat] = field(default_factory=list)

    @classmethod
    def from_wire(cls, data: Any) -> ScanStats:
        d = as_dict(data)
        return cls(
            malicious=as_int(d.get("malicious")),
            ad_blocked=as_int(d.get("adBlocked")),
            ipv6_percentage=as_int(d.get("IPv6Percentage")),
            secure_percentage=as_int(d.get("securePercentage")),
            secure_requests=as_int(d.get("secureRequests")),
            total_links=as_int(d.get("totalLinks")),
            uniq_countries=as_int(d.get("uniqCountries")),
            domain_stats=_details(d.get("domainStats")),
            reg_domain_stats=_details(d.get("regDomainStats")),
            protocol_stats=_details(d.get("protocolStats")),
            resource_stats=_details(d.get("resourceStats")),
            server_stats=_details(d.get("serverStats")),
            tls_stats=_details(d.get("tlsStats")),
            ip_stats=[IpStat.from_wire(x) for x in as_list(d.get("ipStats")) if isinstance(x, dict)],
        )


@dataclass(slots=True, frozen=True)
class ProcessorState:
    """Output of one server-side processor (asn, geoip, rdns, wappa, ...)."""

    name: str
    state: str = ""
    data: Any = None


# ---- document ----


class ScanResult:
    """Read-only view over a scan report JSON document."""

    def __init__(self, raw: Mapping[str, Any], *, logger: logging.Logger | None = None) -> None:
        self._raw = dict(raw)
        self._log = logger or _module_logger

    @property
    def raw(self) -> dict[str, Any]:
        return self._raw

    def __repr__(self) -> str:
        return f"ScanResult(uuid={self.task.uuid!r}, url={self.page.url!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScanResult):
            return NotImplemented
        return self._raw == other._raw

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> ScanResult:
        return cls(data)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Dotted-path lookup over the raw tree.

        Integer segments index into lists: get("data.requests.0.request.request.url").
        Missing keys, out-of-range indexes or wrong container types -> default.
        """
        node: Any = self._raw
        for part in path.split("."):
            if isinstance(node, Mapping):
                node = node.get(part, _MISSING)
            elif isinstance(node, list) and part.lstrip("-").isdigit():
                idx = int(part)
                node = node[idx] if -len(node) <= idx < len(node) else _MISSING
            else:
                node = _MISSING
            if node is _MISSING:
                return default
        return node

    # ---- sections ----

    def _section(self, path: str, expected: type, decode: Callable[[Any], T], empty: Callable[[], T]) -> T:
        value = self.get(path)
        if value is None:
            return empty()
        if not isinstance(value, expected):
            self._log.warning(
                "Scan result section %s has unexpected type %s; using empty default",
                path,
                type(value).__name__,
            )
            return empty()
        try:
            return decode(value)
        except (TypeError, ValueError, AttributeError):
            self._log.warning("Scan result section %s could not be decoded; using empty default", path, exc_info=True)
            return empty()

    def _records(self, path: str, decode: Callable[[Any], T]) -> list[T]:
        def _decode_items(items: list[Any]) -> list[T]:
            out: list[T] = []
            for item in items:
                if isinstance(item, dict):
                    out.append(decode(item))
                else:
                    self._log.debug("Skipping non-object entry in %s", path)
            return out

        return self._section(path, list, _decode_items, list)

    @cached_property
    def page(self) -> ScanPage:
        return self._section("page", dict, ScanPage.from_wire, ScanPage)

    @cached_property
    def task(self) -> ScanTask:
        return self._section("task", dict, ScanTask.from_wire, ScanTask)

    @cached_property
    def lists(self) -> ScanLists:
        return self._section("lists", dict, ScanLists.from_wire, ScanLists)

    @cached_property
    def stats(self) -> ScanStats:
        return self._section("stats", dict, ScanStats.from_wire, ScanStats)

    @cached_property
    def cookies(self) -> list[Cookie]:
        return self._records("data.cookies", Cookie.from_wire)

    @cached_property
    def requests(self) -> list[RequestRecord]:
        return self._records("data.requests", RequestRecord.from_wire)

    @cached_property
    def links(self) -> list[Link]:
        return self._records("data.links", Link.from_wire)

    @cached_property
    def globals(self) -> list[GlobalVariable]:
        return self._records("data.globals", GlobalVariable.from_wire)

    @cached_property
    def console(self) -> list[dict[str, Any]]:
        return self._records("data.console", dict)

    @cached_property
    def processors(self) -> dict[str, ProcessorState]:
        def _decode(procs: dict[str, Any]) -> dict[str, ProcessorState]:
            out: dict[str, ProcessorState] = {}
            for name, body in procs.items():
                b = as_dict(body)
                out[str(name)] = ProcessorState(name=str(name), state=as_str(b.get("state")), data=b.get("data"))
            return out

        return self._section("meta.processors", dict, _decode, dict)
