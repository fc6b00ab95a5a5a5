from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_BACKEND_ENV = "TMPSNREAD_BACKEND"
_HWMON_ROOT_ENV = "TMPSNREAD_HWMON_ROOT"
_DELIMITER_ENV = "TMPSNREAD_DELIMITER"
_LOG_LEVEL_ENV = "LOG_LEVEL"

KNOWN_BACKENDS = ("libsensors", "hwmon")
DEFAULT_HWMON_ROOT = "/sys/class/hwmon"
DEFAULT_DELIMITER = ";"


@dataclass(frozen=True)
class Settings:
    backend: str
    hwmon_root: str
    delimiter: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_backend(default: str) -> str:
    candidate = _read_str_env(_BACKEND_ENV, default).lower()
    return candidate if candidate in KNOWN_BACKENDS else default


def _read_delimiter(default: str) -> str:
    # Whitespace is a legitimate delimiter, so the value is not stripped.
    value = os.getenv(_DELIMITER_ENV)
    if value is None or len(value) != 1:
        return default
    return value


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        backend=_read_backend("libsensors"),
        hwmon_root=_read_str_env(_HWMON_ROOT_ENV, DEFAULT_HWMON_ROOT),
        delimiter=_read_delimiter(DEFAULT_DELIMITER),
        log_level=_read_log_level("WARNING"),
    )
