from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_REGION_ENV = "AWS_FITS_REGION"
_QUEUE_ENV = "AWS_FITS_QUEUE"
_QUEUE_BACKEND_ENV = "HILLTOP_QUEUE_BACKEND"
_MOCK_QUEUE_ROOT_ENV = "MOCK_SQS_ROOT_PATH"
_LOCAL_TIMEZONE_ENV = "HILLTOP_LOCAL_TIMEZONE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

QUEUE_BACKENDS = ("sqs", "mock")


@dataclass(frozen=True)
class Settings:
    region: Optional[str]
    queue_name: Optional[str]
    queue_backend: str
    mock_queue_root_path: Optional[str]
    local_timezone: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_queue_backend(default: str) -> str:
    candidate = _read_str_env(_QUEUE_BACKEND_ENV, default).lower()
    return candidate if candidate in QUEUE_BACKENDS else default


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
        region=_read_optional_env(_REGION_ENV, None),
        queue_name=_read_optional_env(_QUEUE_ENV, None),
        queue_backend=_read_queue_backend("sqs"),
        mock_queue_root_path=_read_optional_env(_MOCK_QUEUE_ROOT_ENV, "./tmp/mock_sqs"),
        local_timezone=_read_optional_env(_LOCAL_TIMEZONE_ENV, None),
        log_level=_read_log_level("INFO"),
    )
