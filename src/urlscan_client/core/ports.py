# src/urlscan_client/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task lifecycle and search depend on Protocols instead of concrete
implementations. This keeps the HTTP stack swappable and makes testing easier.
"""

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

QueryParams = Mapping[str, str]


@dataclass(slots=True, frozen=True)
class RawResponse:
    """Status code and undecoded body of a response that did arrive."""

    status_code: int
    body: bytes


class Transport(Protocol):
    """
    Single-request HTTP transport.

    Implementations attach the API key, build the URL from the base URL and a
    path such as "scan" or "result/<uuid>", and raise TransportError when no
    response (or no readable body) was obtained.
    """

    def post(self, path: str, body: bytes, *, timeout: float | None = None) -> RawResponse: ...

    def get(
            self,
            path: str,
            params: QueryParams | None = None,
            *,
            timeout: float | None = None,
    ) -> RawResponse: ...


class Sleeper(Protocol):
    """
    Interruptible sleep between poll attempts.

    Returns True when `cancel` fired before the delay elapsed.
    """

    def __call__(self, seconds: float, cancel: threading.Event | None) -> bool: ...


def interruptible_sleep(seconds: float, cancel: threading.Event | None) -> bool:
    if seconds <= 0:
        return bool(cancel is not None and cancel.is_set())
    if cancel is None:
        time.sleep(seconds)
        return False
    return cancel.wait(seconds)
