# src/urlscan_client/__init__.py

"""Client library for the urlscan.io scanning service."""

from ._version import __version__
from .client import UrlscanClient
from .codec.models import SearchQuery, SearchResponse, SearchResult, SubmitRequest, SubmitResponse, Visibility
from .codec.scan_result import ScanResult
from .config import Settings, get_settings
from .errors import (
    NO_RESPONSE,
    ConfigurationError,
    DecodeError,
    EncodingError,
    RejectedError,
    ScanTimeoutError,
    TaskStateError,
    TransportError,
    UrlscanError,
    WaitCancelledError,
)
from .tasks.lifecycle import PollPolicy, backoff_ms
from .tasks.task_models import Task, TaskState

__all__ = [
    "__version__",
    "UrlscanClient",
    "SubmitRequest",
    "SubmitResponse",
    "SearchQuery",
    "SearchResponse",
    "SearchResult",
    "Visibility",
    "ScanResult",
    "Settings",
    "get_settings",
    "NO_RESPONSE",
    "UrlscanError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "DecodeError",
    "RejectedError",
    "ScanTimeoutError",
    "TaskStateError",
    "WaitCancelledError",
    "PollPolicy",
    "backoff_ms",
    "Task",
    "TaskState",
]
