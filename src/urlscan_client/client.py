# src/urlscan_client/client.py

"""
UrlscanClient: the public entry point.

The client holds only immutable collaborators (transport, poll policy, logger),
so one instance can be shared by threads that each poll their own Task.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from .codec.models import SearchQuery, SearchResponse, SubmitRequest
from .config import DEFAULT_BASE_URL, Settings, get_settings
from .core.ports import Sleeper, Transport, interruptible_sleep
from .errors import ConfigurationError
from .logging_setup import mask_secret
from .search import search as _search
from .tasks.lifecycle import DEFAULT_POLICY, PollPolicy, submit_scan, wait_for_report
from .tasks.task_models import Task
from .transport.http import HttpTransport, make_timeout

_module_logger = logging.getLogger(__name__)


class UrlscanClient:
    def __init__(
            self,
            api_key: str,
            *,
            base_url: str = DEFAULT_BASE_URL,
            transport: Transport | None = None,
            policy: PollPolicy = DEFAULT_POLICY,
            logger: logging.Logger | None = None,
            connect_timeout: float = 5.0,
            read_timeout: float = 30.0,
            user_agent: str | None = None,
            sleep: Sleeper = interruptible_sleep,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("urlscan.io API key is required")

        self._log = logger or _module_logger
        self._policy = policy
        self._sleep = sleep
        self._clock = clock
        self._api_key_hint = mask_secret(api_key)
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpTransport(
            api_key=api_key,
            base_url=base_url,
            timeout=make_timeout(connect_timeout, read_timeout),
            user_agent=user_agent,
            logger=self._log,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> UrlscanClient:
        s = settings or get_settings()
        if not s.api_key:
            raise ConfigurationError("urlscan.io API key is not set. Set URLSCAN_API_KEY in your environment or .env.")

        kwargs: dict[str, Any] = {
            "base_url": s.base_url,
            "policy": PollPolicy(max_attempts=s.max_poll_attempts),
            "connect_timeout": s.connect_timeout_seconds,
            "read_timeout": s.read_timeout_seconds,
            "user_agent": s.user_agent,
        }
        kwargs.update(overrides)
        return cls(s.api_key, **kwargs)

    @property
    def policy(self) -> PollPolicy:
        return self._policy

    def __repr__(self) -> str:
        return f"UrlscanClient(api_key={self._api_key_hint!r}, transport={self._transport!r})"

    # ---- lifecycle ----

    def close(self) -> None:
        if self._owns_transport:
            close = getattr(self._transport, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> UrlscanClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- API ----

    def submit(self, request: SubmitRequest, *, timeout: float | None = None) -> Task:
        """Send a URL for scanning. Returns a Task in CREATED state."""
        return submit_scan(self._transport, request, timeout=timeout, log=self._log)

    def wait_for_report(
            self,
            task: Task,
            *,
            cancel: threading.Event | None = None,
            timeout: float | None = None,
    ) -> None:
        """
        Block until task.result is available.

        Raises RejectedError (400), ScanTimeoutError (attempts exhausted),
        WaitCancelledError (cancel set / timeout passed) or the transport/decode
        error that stopped the loop.
        """
        wait_for_report(
            self._transport,
            task,
            policy=self._policy,
            cancel=cancel,
            timeout=timeout,
            sleep=self._sleep,
            clock=self._clock,
            log=self._log,
        )

    def scan(
            self,
            request: SubmitRequest,
            *,
            cancel: threading.Event | None = None,
            timeout: float | None = None,
    ) -> Task:
        """Submit and wait; returns the completed Task."""
        task = self.submit(request)
        self.wait_for_report(task, cancel=cancel, timeout=timeout)
        return task

    def search(self, query: SearchQuery, *, timeout: float | None = None) -> SearchResponse:
        return _search(self._transport, query, timeout=timeout, log=self._log)
