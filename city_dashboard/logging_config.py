from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "CITY_DASHBOARD_LOG_FORMAT"
LOG_LEVEL_ENV = "CITY_DASHBOARD_LOG_LEVEL"

JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
PLAIN_FIELDS = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Libraries whose DEBUG output drowns the app's own logs
NOISY_LOGGERS = ("urllib3", "werkzeug")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(PLAIN_FIELDS)
    return jsonlogger.JsonFormatter(JSON_FIELDS)


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the dashboard

    Format, in order of precedence:
        1) force_format argument ("json" or "plain")
        2) env var CITY_DASHBOARD_LOG_FORMAT
        3) "json"

    Level: the level argument, else CITY_DASHBOARD_LOG_LEVEL, else INFO.
    Unknown level names fall back to INFO; unknown formats to JSON.
    """
    format_mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).strip().lower()
    resolved_level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    # One handler only; re-running this must not duplicate every line
    root.handlers.clear()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))
