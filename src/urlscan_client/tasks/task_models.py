# src/urlscan_client/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ..codec.scan_result import ScanResult
from ..errors import TaskStateError

_FIXED_FIELDS = frozenset({"id", "report_location"})


class TaskState(StrEnum):
    """
    Scan task lifecycle.

    CREATED -> POLLING -> COMPLETED | FAILED | TIMED_OUT

    A wait that is cancelled, or that hits a transport/decode failure, puts the
    task back to CREATED: the scan itself was not judged and may be waited on again.
    """

    CREATED = "created"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.FAILED, TaskState.TIMED_OUT)


@dataclass(slots=True, eq=False)
class Task:
    """
    Handle of a submitted scan, owned by the caller.

    `id` and `report_location` are fixed at submission. `result` is set once,
    by the poll that observed status 200, and never replaced.
    """

    id: str
    report_location: str
    submitted_url: str = ""
    message: str = ""
    state: TaskState = TaskState.CREATED
    attempts: int = 0
    last_status: int | None = None
    _result: ScanResult | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("task id must be non-empty")

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_FIELDS and hasattr(self, name):
            raise AttributeError(f"Task.{name} is read-only")
        object.__setattr__(self, name, value)

    @property
    def result(self) -> ScanResult | None:
        return self._result

    @property
    def done(self) -> bool:
        return self.state == TaskState.COMPLETED

    def _complete(self, result: ScanResult) -> None:
        if self._result is not None:
            raise TaskStateError(f"Result of task id: {self.id} is already set")
        self._result = result
        self.state = TaskState.COMPLETED
