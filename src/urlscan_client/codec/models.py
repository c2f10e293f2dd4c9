# src/urlscan_client/codec/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ._coerce import as_dict, as_int, as_str


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def wire_flag(self) -> str:
        # The scan endpoint takes public=on|off.
        return "on" if self is Visibility.PUBLIC else "off"

    @classmethod
    def from_wire(cls, raw: Any) -> Visibility | None:
        if raw is None:
            return None
        s = str(raw).strip().lower()
        if s in ("on", "public"):
            return cls.PUBLIC
        if s in ("off", "private"):
            return cls.PRIVATE
        return None


@dataclass(slots=True, frozen=True)
class SubmitRequest:
    """
    Arguments of a scan submission.

    Optional fields use None for "not set"; an empty string is sent as-is.
    Visibility None leaves the decision to the server (private).
    """

    url: str
    custom_agent: str | None = None
    referer: str | None = None
    visibility: Visibility | None = None

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"url": self.url}
        if self.custom_agent is not None:
            out["customagent"] = self.custom_agent
        if self.referer is not None:
            out["referer"] = self.referer
        if self.visibility is not None:
            out["public"] = Visibility(self.visibility).wire_flag
        return out

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> SubmitRequest:
        return cls(
            url=as_str(data.get("url")),
            custom_agent=as_str(data["customagent"]) if data.get("customagent") is not None else None,
            referer=as_str(data["referer"]) if data.get("referer") is not None else None,
            visibility=Visibility.from_wire(data.get("public")),
        )


@dataclass(slots=True, frozen=True)
class SubmitResponse:
    uuid: str
    api: str
    url: str = ""
    visibility: str = ""
    message: str = ""
    result: str = ""
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> SubmitResponse:
        return cls(
            uuid=as_str(data.get("uuid")),
            api=as_str(data.get("api")),
            url=as_str(data.get("url")),
            visibility=as_str(data.get("visibility")),
            message=as_str(data.get("message")),
            result=as_str(data.get("result")),
            options=as_dict(data.get("options")),
        )


@dataclass(slots=True, frozen=True)
class SearchQuery:
    """
    Search arguments. None means "not sent"; "" is sent as an empty value.

    sort is given as "<field>:<order>"; the server defaults to _score.
    """

    query: str | None = None
    size: int | None = None
    offset: int | None = None
    sort: str | None = None

    def __post_init__(self) -> None:
        for name in ("size", "offset"):
            v = getattr(self, name)
            if v is not None and (isinstance(v, bool) or not isinstance(v, int) or v < 0):
                raise ValueError(f"{name} must be a non-negative integer, got {v!r}")


@dataclass(slots=True, frozen=True)
class SearchPage:
    asn: str = ""
    asnname: str = ""
    city: str = ""
    country: str = ""
    domain: str = ""
    ip: str = ""
    ptr: str = ""
    server: str = ""
    url: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> SearchPage:
        d = as_dict(data)
        return cls(**{name: as_str(d.get(name)) for name in cls.__dataclass_fields__})


@dataclass(slots=True, frozen=True)
class SearchStats:
    console_msgs: int = 0
    data_length: int = 0
    encoded_data_length: int = 0
    requests: int = 0
    uniq_ips: int = 0

    @classmethod
    def from_wire(cls, data: Any) -> SearchStats:
        d = as_dict(data)
        return cls(
            console_msgs=as_int(d.get("consoleMsgs")),
            data_length=as_int(d.get("dataLength")),
            encoded_data_length=as_int(d.get("encodedDataLength")),
            requests=as_int(d.get("requests")),
            uniq_ips=as_int(d.get("uniqIPs")),
        )


@dataclass(slots=True, frozen=True)
class SearchTask:
    method: str = ""
    source: str = ""
    time: str = ""
    url: str = ""
    visibility: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> SearchTask:
        d = as_dict(data)
        return cls(**{name: as_str(d.get(name)) for name in cls.__dataclass_fields__})


@dataclass(slots=True, frozen=True)
class SearchResult:
    id: str
    page: SearchPage
    result: str
    stats: SearchStats
    task: SearchTask
    uniq_countries: int
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_wire(cls, data: Any) -> SearchResult:
        d = as_dict(data)
        return cls(
            id=as_str(d.get("_id")),
            page=SearchPage.from_wire(d.get("page")),
            result=as_str(d.get("result")),
            stats=SearchStats.from_wire(d.get("stats")),
            task=SearchTask.from_wire(d.get("task")),
            uniq_countries=as_int(d.get("uniq_countries")),
            raw=d,
        )


@dataclass(slots=True, frozen=True)
class SearchResponse:
    results: list[SearchResult] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> SearchResponse:
        items = data.get("results")
        results = [SearchResult.from_wire(x) for x in items if isinstance(x, dict)] if isinstance(items, list) else []
        return cls(results=results, total=as_int(data.get("total")))
