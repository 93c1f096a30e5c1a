"""Centralised configuration for the calendar export service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from ical_service.services.calendar import DEFAULT_PRODUCT_IDENTIFIER

ENV_PREFIX = "ICAL"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ExportConfig:
    """Settings applied when calendars are exported over HTTP."""

    product_identifier: str = DEFAULT_PRODUCT_IDENTIFIER
    calendar_filename: str = "events.ics"
    max_attachment_bytes: int = 1024 * 1024
    log_level: str = "INFO"


def _get_env_name(key: str) -> str:
    return f"{ENV_PREFIX}_{key.upper()}"


def _get_int(key: str, default: int) -> int:
    value = os.getenv(_get_env_name(key))
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_log_level(default: str) -> str:
    value = os.getenv(_get_env_name("LOG_LEVEL"), default).upper()
    return value if value in LOG_LEVELS else default


def load_config() -> ExportConfig:
    defaults = ExportConfig()
    return ExportConfig(
        product_identifier=os.getenv(_get_env_name("PRODUCT_ID"), defaults.product_identifier),
        calendar_filename=os.getenv(
            _get_env_name("CALENDAR_FILENAME"), defaults.calendar_filename
        ),
        max_attachment_bytes=_get_int("MAX_ATTACHMENT_BYTES", defaults.max_attachment_bytes),
        log_level=_get_log_level(defaults.log_level),
    )


@lru_cache()
def get_config() -> ExportConfig:
    """Return the lazily initialised export configuration."""

    return load_config()
