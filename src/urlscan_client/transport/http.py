# src/urlscan_client/transport/http.py

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from ..core.ports import QueryParams, RawResponse
from ..errors import NO_RESPONSE, TransportError
from ..logging_setup import mask_secret

_module_logger = logging.getLogger(__name__)

API_KEY_HEADER = "API-Key"


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


def _failure_kind(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, httpx.ConnectError):
        return "connect"
    if isinstance(exc, httpx.RemoteProtocolError):
        return "protocol"
    return exc.__class__.__name__


class HttpTransport:
    """
    One request per call against `{base_url}/{path}/`.

    - Attaches the API key header to every request.
    - A failure before any response arrived -> TransportError(status_code=-1).
    - A response whose body could not be read -> TransportError(status_code=<status>).
    - Non-expected statuses are logged as warnings and still returned; judging
      them is the caller's job.

    The transport owns the httpx.Client only when it created it.
    """

    def __init__(
            self,
            *,
            api_key: str,
            base_url: str,
            timeout: httpx.Timeout | float | None = None,
            user_agent: str | None = None,
            client: httpx.Client | None = None,
            logger: logging.Logger | None = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ValueError("api_key is required")
        self._api_key = str(api_key)
        self._base_url = str(base_url).rstrip("/")
        self._log = logger or _module_logger
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout if timeout is not None else make_timeout(5.0, 30.0),
        )
        self._headers = {API_KEY_HEADER: self._api_key}
        if user_agent:
            self._headers["User-Agent"] = user_agent

        self._log.debug("HttpTransport ready base_url=%s api_key=%s", self._base_url, mask_secret(self._api_key))

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __repr__(self) -> str:
        return f"HttpTransport(base_url={self._base_url!r}, api_key={mask_secret(self._api_key)!r})"

    # ---- Transport port ----

    def post(self, path: str, body: bytes, *, timeout: float | None = None) -> RawResponse:
        uri = self._uri(path)
        self._log.debug("Generated query uri=%s body=%s", uri, body.decode("utf-8", errors="replace"))

        headers = dict(self._headers)
        headers["Content-Type"] = "application/json"
        return self._send("POST", uri, headers=headers, content=body, timeout=timeout, expected=(200,))

    def get(
            self,
            path: str,
            params: QueryParams | None = None,
            *,
            timeout: float | None = None,
    ) -> RawResponse:
        uri = self._uri(path)
        self._log.info("Generated query uri=%s params=%s", uri, dict(params or {}))
        return self._send(
            "GET",
            uri,
            headers=dict(self._headers),
            params=dict(params) if params else None,
            timeout=timeout,
            expected=(200, 404),
        )

    # ---- helpers ----

    def _uri(self, path: str) -> str:
        return f"{self._base_url}/{path.strip('/')}/"

    def _send(
            self,
            method: str,
            uri: str,
            *,
            headers: dict[str, str],
            expected: Iterable[int],
            content: bytes | None = None,
            params: dict[str, str] | None = None,
            timeout: float | None = None,
    ) -> RawResponse:
        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = timeout

        req = self._client.build_request(method, uri, headers=headers, content=content, params=params, **kwargs)
        try:
            resp = self._client.send(req, stream=True)
        except httpx.HTTPError as e:
            kind = _failure_kind(e)
            self._log.info("%s %s failed before a response (%s)", method, uri, kind)
            raise TransportError(
                f"Fail to send urlscan.io {method} request ({kind})",
                status_code=NO_RESPONSE,
            ) from e

        # The status line is in; from here on failures carry its code.
        try:
            body = resp.read()
        except httpx.HTTPError as e:
            self._log.info("%s %s body read failed status=%s (%s)", method, uri, resp.status_code, _failure_kind(e))
            raise TransportError(
                f"Fail to read urlscan.io {method} result",
                status_code=resp.status_code,
            ) from e
        finally:
            resp.close()

        if resp.status_code not in tuple(expected):
            self._log.warning(
                "Unexpected status code code=%s body=%s",
                resp.status_code,
                body[:300].decode("utf-8", errors="replace"),
            )

        return RawResponse(status_code=resp.status_code, body=body)
