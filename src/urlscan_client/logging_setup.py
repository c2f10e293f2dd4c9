# src/urlscan_client/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path


def mask_secret(secret: str | None) -> str:
    """Render a credential for logs: first 4 characters, the rest hidden."""
    if not secret:
        return "<unset>"
    s = str(secret)
    if len(s) <= 4:
        return "***"
    return f"{s[:4]}***"


def parse_level(level: int | str | None, default: int = logging.INFO) -> int:
    """Map "debug" / "WARNING" / 10 style values to a logging level; unknown names give `default`."""
    if isinstance(level, int):
        return level
    if not level:
        return default
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep console output about the client itself:
    - allow all urlscan_client logs
    - suppress HTTP stack chatter (httpx/httpcore) unless WARNING+
    - suppress any other third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("urlscan_client"):
            return True

        if name.startswith(("httpx", "httpcore")):
            return record.levelno >= logging.WARNING

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


class SecretRedactionFilter(logging.Filter):
    """Replace known secrets in the rendered message with their masked form."""

    def __init__(self, secrets: Iterable[str | None]) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        msg = record.getMessage()
        redacted = msg
        for secret in self._secrets:
            redacted = redacted.replace(secret, mask_secret(secret))
        if redacted != msg:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    *,
    console_level: int | str = logging.INFO,
    log_file: str | Path | None = None,
    file_level: int = logging.DEBUG,
    secrets: Iterable[str | None] = (),
) -> None:
    """
    Configure root logging for scripts that use the client:
    - Console handler: filtered to client logs + third-party warnings
    - File handler (optional): full logs for debugging

    `console_level` also accepts a level name such as Settings.log_level.

    The library itself never calls this; it only logs through the logger
    handed to the client (or its module loggers).
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redactor = SecretRedactionFilter(secrets)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(parse_level(console_level))
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    ch.addFilter(redactor)
    root.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        fh.addFilter(redactor)
        root.addHandler(fh)

    logging.captureWarnings(True)
