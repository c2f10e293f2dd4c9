# tests/test_ports.py

from __future__ import annotations

import threading
import time

from urlscan_client.core.ports import interruptible_sleep


def test_sleep_returns_early_when_cancelled() -> None:
    cancel = threading.Event()
    timer = threading.Timer(0.05, cancel.set)
    timer.start()
    try:
        started = time.monotonic()
        assert interruptible_sleep(10.0, cancel) is True
        assert time.monotonic() - started < 2.0
    finally:
        timer.cancel()


def test_sleep_runs_full_delay_without_cancel() -> None:
    cancel = threading.Event()

    started = time.monotonic()
    assert interruptible_sleep(0.05, cancel) is False
    assert time.monotonic() - started >= 0.04


def test_sleep_without_event_is_plain_sleep() -> None:
    started = time.monotonic()
    assert interruptible_sleep(0.02, None) is False
    assert time.monotonic() - started >= 0.015


def test_zero_delay_only_reports_event_state() -> None:
    cancel = threading.Event()
    assert interruptible_sleep(0, None) is False
    assert interruptible_sleep(-1.0, cancel) is False

    cancel.set()
    assert interruptible_sleep(0, cancel) is True
