# tests/conftest.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from urlscan_client.tasks.task_models import Task

from .fakes import FakeClock, RecordingSleeper

DATA_DIR = Path(__file__).parent / "data"

TASK_ID = "0e37e828-a9d9-45c0-ac50-1ca579b86c72"


@pytest.fixture()
def scan_result_doc() -> dict[str, Any]:
    """Trimmed report document in the shape the result endpoint returns."""
    return json.loads((DATA_DIR / "scan_result.json").read_text("utf-8"))


@pytest.fixture()
def task() -> Task:
    return Task(id=TASK_ID, report_location=f"https://urlscan.io/api/v1/result/{TASK_ID}/")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleeper(clock: FakeClock) -> RecordingSleeper:
    return RecordingSleeper(clock=clock)


@pytest.fixture()
def client_logger() -> logging.Logger:
    """
    Logger injected into the client, as an application would do it.

    It propagates to root, so caplog sees its records.
    """
    log = logging.getLogger("urlscan_client.tests")
    log.setLevel(logging.DEBUG)
    return log
