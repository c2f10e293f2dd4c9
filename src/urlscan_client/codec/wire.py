# src/urlscan_client/codec/wire.py

from __future__ import annotations

import json
from typing import Any, Protocol, TypeVar

from ..errors import DecodeError, EncodingError

T = TypeVar("T", covariant=True)


class WireDecodable(Protocol[T]):
    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> T: ...


def encode(obj: Any) -> bytes:
    """
    Serialize a request record (anything with to_wire()) or a plain mapping to JSON bytes.
    """
    payload = obj.to_wire() if hasattr(obj, "to_wire") else obj
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError("Fail to marshal urlscan.io request argument") from e


def decode_document(raw: bytes, *, status_code: int = 0) -> dict[str, Any]:
    """
    Parse a response body into a JSON object.

    Unknown keys are kept; only a non-JSON body or a non-object top level fails.
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(
            f"Fail to unmarshal urlscan.io result (status {status_code})",
            status_code=status_code,
        ) from e
    if not isinstance(data, dict):
        raise DecodeError(
            f"Unexpected urlscan.io result type {type(data).__name__} (status {status_code})",
            status_code=status_code,
        )
    return data


def decode(raw: bytes, target: type[WireDecodable[Any]], *, status_code: int = 0) -> Any:
    return target.from_wire(decode_document(raw, status_code=status_code))


def server_message(raw: bytes) -> str | None:
    """Best-effort extraction of the error text the API puts in error bodies."""
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        text = raw[:300].decode("utf-8", errors="replace").strip()
        return text or None
    if not isinstance(data, dict):
        return None
    for key in ("message", "description", "error"):
        v = data.get(key)
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None
