# src/urlscan_client/search.py

from __future__ import annotations

import logging

from .codec.models import SearchQuery, SearchResponse
from .codec.wire import decode, server_message
from .core.ports import Transport
from .errors import RejectedError

logger = logging.getLogger(__name__)


def encode_search_params(query: SearchQuery) -> dict[str, str]:
    """
    Only fields that are set are sent. An empty query string is "set": q= goes out.
    """
    params: dict[str, str] = {}
    if query.query is not None:
        params["q"] = query.query
    if query.size is not None:
        params["size"] = str(int(query.size))
    if query.offset is not None:
        params["offset"] = str(int(query.offset))
    if query.sort is not None:
        params["sort"] = query.sort
    return params


def search(
        transport: Transport,
        query: SearchQuery,
        *,
        timeout: float | None = None,
        log: logging.Logger | None = None,
) -> SearchResponse:
    """Single GET on the search index; no paging loop, no retry."""
    log = log or logger

    params = encode_search_params(query)
    resp = transport.get("search", params or None, timeout=timeout)
    if resp.status_code != 200:
        msg = server_message(resp.body)
        raise RejectedError(
            f"Unexpected status code: {resp.status_code}" + (f" ({msg})" if msg else ""),
            status_code=resp.status_code,
            server_message=msg,
        )

    out: SearchResponse = decode(resp.body, SearchResponse, status_code=resp.status_code)
    log.debug("Search returned %d/%d results", len(out.results), out.total)
    return out
