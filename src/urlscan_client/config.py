# src/urlscan_client/config.py

"""Settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object per process, but clients never read it implicitly.
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ._version import __version__

ENV_PREFIX = "URLSCAN"

DEFAULT_BASE_URL = "https://urlscan.io/api/v1"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip()
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Credentials / endpoint ----
    api_key: Optional[str]
    base_url: str
    user_agent: str

    # ---- Network timeouts (seconds) ----
    connect_timeout_seconds: float
    read_timeout_seconds: float

    # ---- Polling ----
    max_poll_attempts: int

    # ---- Logging ----
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        api_key = _env(_k("API_KEY")).strip() or None
        base_url = _env(_k("BASE_URL"), DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL

        connect_timeout = _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("READ_TIMEOUT_SECONDS"), 30.0)

        max_poll_attempts = _env_int(_k("MAX_POLL_ATTEMPTS"), 30)
        if max_poll_attempts < 1:
            max_poll_attempts = 30

        return Settings(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            user_agent=_env(_k("USER_AGENT"), f"urlscan-client/{__version__}"),
            connect_timeout_seconds=connect_timeout,
            read_timeout_seconds=read_timeout,
            max_poll_attempts=max_poll_attempts,
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return process settings, loading .env and the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _load_dotenv_if_available()
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings_cache() -> None:
    global _SETTINGS
    _SETTINGS = None
