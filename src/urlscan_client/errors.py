# src/urlscan_client/errors.py

"""
Error taxonomy.

Every error carries the HTTP status code that produced it:
- NO_RESPONSE (-1) when nothing came back from the server,
- 0 for failures that never left the process (encoding, configuration).

Causes are chained with `raise ... from exc`.
"""

from __future__ import annotations

NO_RESPONSE = -1


class UrlscanError(Exception):
    def __init__(self, message: str, *, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(UrlscanError):
    """Client cannot be built from the given settings (e.g. no API key)."""


class EncodingError(UrlscanError):
    """Request arguments could not be serialized."""


class TransportError(UrlscanError):
    """Connection, DNS, TLS, timeout or response-read failure."""

    def __init__(self, message: str, *, status_code: int = NO_RESPONSE) -> None:
        super().__init__(message, status_code=status_code)

    @property
    def no_response(self) -> bool:
        return self.status_code == NO_RESPONSE


class DecodeError(UrlscanError):
    """Response body is not the document we expected."""


class RejectedError(UrlscanError):
    """The server understood the request and refused it."""

    def __init__(self, message: str, *, status_code: int, server_message: str | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.server_message = server_message


class TaskStateError(UrlscanError):
    """Operation is not allowed in the task's current (terminal) state."""


class ScanTimeoutError(UrlscanError, TimeoutError):
    """Report never became available within the attempt budget."""

    def __init__(self, task_id: str, *, attempts: int, status_code: int = 0) -> None:
        super().__init__(
            f"Timeout of task id: {task_id} (attempts={attempts}, last_status={status_code})",
            status_code=status_code,
        )
        self.task_id = task_id
        self.attempts = attempts


class WaitCancelledError(UrlscanError):
    """The caller cancelled the wait or its deadline passed."""

    def __init__(self, task_id: str, *, reason: str = "cancelled", status_code: int = 0) -> None:
        super().__init__(f"Wait for task id: {task_id} {reason}", status_code=status_code)
        self.task_id = task_id
        self.reason = reason
