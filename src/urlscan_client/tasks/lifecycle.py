# src/urlscan_client/tasks/lifecycle.py

from __future__ import annotations

"""
Submit-then-poll lifecycle of a scan.

submit_scan():
- POST the encoded SubmitRequest to "scan"
- status 200 with uuid + api -> Task (CREATED); anything else -> error

wait_for_report():
- GET "result/<uuid>" up to policy.max_attempts times
- every body is decoded (the API sends JSON even while the report is pending)
- 200            -> result stored on the task, COMPLETED
- 400            -> FAILED, RejectedError, no more requests
- anything else  -> not ready yet; sleep backoff_ms(i) and try again
- transport / decode failure -> raised at once, no retry
- attempts exhausted -> TIMED_OUT, ScanTimeoutError

Both functions keep no state between calls; the Task is the only thing mutated.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..codec.models import SubmitRequest, SubmitResponse
from ..codec.scan_result import ScanResult
from ..codec.wire import decode, decode_document, encode, server_message
from ..core.ports import Sleeper, Transport, interruptible_sleep
from ..errors import DecodeError, RejectedError, ScanTimeoutError, TaskStateError, TransportError, WaitCancelledError
from .task_models import Task, TaskState

logger = logging.getLogger(__name__)

STATUS_READY = 200
STATUS_REJECTED = 400


@dataclass(slots=True, frozen=True)
class PollPolicy:
    """
    Attempt budget and backoff curve.

    delay(i) = min(i*i*step_ms + base_ms, cap_ms); with the defaults the delay
    starts at 1s, reaches the 20s cap at i=14 and stays there.
    """

    max_attempts: int = 30
    base_ms: int = 1000
    step_ms: int = 100
    cap_ms: int = 20_000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def delay_ms(self, attempt: int) -> int:
        if attempt < 0:
            raise ValueError("attempt must be >= 0")
        return min(attempt * attempt * self.step_ms + self.base_ms, self.cap_ms)


DEFAULT_POLICY = PollPolicy()


def backoff_ms(attempt: int, policy: PollPolicy = DEFAULT_POLICY) -> int:
    return policy.delay_ms(attempt)


def submit_scan(
        transport: Transport,
        request: SubmitRequest,
        *,
        timeout: float | None = None,
        log: logging.Logger | None = None,
) -> Task:
    log = log or logger

    body = encode(request)
    resp = transport.post("scan", body, timeout=timeout)

    if resp.status_code != STATUS_READY:
        msg = server_message(resp.body)
        raise RejectedError(
            f"Unexpected status code: {resp.status_code}" + (f" ({msg})" if msg else ""),
            status_code=resp.status_code,
            server_message=msg,
        )

    sub: SubmitResponse = decode(resp.body, SubmitResponse, status_code=resp.status_code)
    if not sub.uuid or not sub.api:
        raise DecodeError(
            "urlscan.io submission response has no uuid/api",
            status_code=resp.status_code,
        )

    log.info("Scan submitted uuid=%s url=%s visibility=%s", sub.uuid, sub.url or request.url, sub.visibility)
    return Task(
        id=sub.uuid,
        report_location=sub.api,
        submitted_url=sub.url or request.url,
        message=sub.message,
    )


def wait_for_report(
        transport: Transport,
        task: Task,
        *,
        policy: PollPolicy = DEFAULT_POLICY,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
        request_timeout: float | None = None,
        sleep: Sleeper = interruptible_sleep,
        clock: Callable[[], float] = time.monotonic,
        log: logging.Logger | None = None,
) -> None:
    """
    Poll until the report is ready, rejected, or the attempt budget runs out.

    cancel:   event checked before every request and watched during sleeps.
    timeout:  wall-clock bound (seconds) for the whole wait; request timeouts and
              sleeps are clipped to what is left of it.
    """
    log = log or logger

    if task.state == TaskState.COMPLETED:
        return
    if task.state in (TaskState.FAILED, TaskState.TIMED_OUT):
        raise TaskStateError(f"Task id: {task.id} is already {task.state.value}")
    if task.state == TaskState.POLLING:
        raise TaskStateError(f"Task id: {task.id} is already being polled")

    deadline = clock() + timeout if timeout is not None else None

    def _remaining() -> float | None:
        return None if deadline is None else deadline - clock()

    def _check_cancelled() -> None:
        if cancel is not None and cancel.is_set():
            raise WaitCancelledError(task.id, reason="cancelled", status_code=task.last_status or 0)
        left = _remaining()
        if left is not None and left <= 0:
            raise WaitCancelledError(task.id, reason="deadline exceeded", status_code=task.last_status or 0)

    task.state = TaskState.POLLING
    try:
        for i in range(policy.max_attempts):
            _check_cancelled()

            per_request = request_timeout
            left = _remaining()
            if left is not None:
                per_request = left if per_request is None else min(per_request, left)

            try:
                resp = transport.get(f"result/{task.id}", timeout=per_request)
            except TransportError as e:
                if deadline is not None and clock() >= deadline:
                    raise WaitCancelledError(task.id, reason="deadline exceeded", status_code=e.status_code) from e
                raise

            task.attempts += 1
            task.last_status = resp.status_code
            doc = decode_document(resp.body, status_code=resp.status_code)

            if resp.status_code == STATUS_READY:
                task._complete(ScanResult(doc, logger=log))
                log.info("Scan report ready uuid=%s attempts=%d", task.id, i + 1)
                return

            if resp.status_code == STATUS_REJECTED:
                task.state = TaskState.FAILED
                msg = server_message(resp.body)
                log.info("Scan rejected uuid=%s message=%s", task.id, msg)
                raise RejectedError(
                    "status: 400" + (f" ({msg})" if msg else ""),
                    status_code=STATUS_REJECTED,
                    server_message=msg,
                )

            # Any other status (404 while processing, 5xx, ...) means "not yet".
            if i == policy.max_attempts - 1:
                break

            delay = policy.delay_ms(i) / 1000.0
            left = _remaining()
            clipped = left is not None and left < delay
            sleep_for = delay if left is None else max(0.0, min(delay, left))
            log.debug(
                "Scan report not ready uuid=%s status=%s attempt=%d/%d sleep=%.1fs",
                task.id,
                resp.status_code,
                i + 1,
                policy.max_attempts,
                sleep_for,
            )
            if sleep(sleep_for, cancel):
                raise WaitCancelledError(task.id, reason="cancelled", status_code=resp.status_code)
            if clipped:
                # Slept up to the deadline.
                raise WaitCancelledError(task.id, reason="deadline exceeded", status_code=resp.status_code)

        task.state = TaskState.TIMED_OUT
        log.warning("Scan report timeout uuid=%s attempts=%d", task.id, policy.max_attempts)
        raise ScanTimeoutError(task.id, attempts=policy.max_attempts, status_code=task.last_status or 0)

    finally:
        if task.state == TaskState.POLLING:
            task.state = TaskState.CREATED
