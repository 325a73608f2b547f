from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from city_dashboard.config.model import API_BASE_URL_ENV, AppSettings
from city_dashboard.core.exceptions import ConfigError
from city_dashboard.core.pipeline import RANKING_METRICS, TOP_N_MAX, TOP_N_MIN

logger = logging.getLogger(__name__)


def _read_global_json(root: Path) -> Dict[str, Any]:
    global_path = root / "global.json"
    if not global_path.is_file():
        logger.info("No global.json found, using defaults", extra={"config_root": str(root)})
        return {}

    try:
        with global_path.open() as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")
    return raw


def _optional_timeout(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"request_timeout must be a positive number or null, got {value!r}")
    return float(value)


def load_app_settings(
    root: Path | str = Path("config"),
    environ: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    """
    Load settings from <root>/global.json (optional) and the environment.

    The gateway URL only ever comes from CITY_DASHBOARD_API_BASE_URL.
    """
    root = Path(root)
    environ = os.environ if environ is None else environ
    logger.info("Loading global config", extra={"config_root": str(root)})

    raw = _read_global_json(root)
    defaults = AppSettings()

    default_metric = raw.get("default_metric", defaults.default_metric)
    if default_metric not in RANKING_METRICS:
        raise ConfigError(f"default_metric must be one of {RANKING_METRICS}, got {default_metric!r}")

    default_top_n = raw.get("default_top_n", defaults.default_top_n)
    if isinstance(default_top_n, bool) or not isinstance(default_top_n, int):
        raise ConfigError(f"default_top_n must be an integer, got {default_top_n!r}")
    if not TOP_N_MIN <= default_top_n <= TOP_N_MAX:
        raise ConfigError(f"default_top_n must be between {TOP_N_MIN} and {TOP_N_MAX}")

    api_base_url = environ.get(API_BASE_URL_ENV) or defaults.api_base_url

    return AppSettings(
        ui_title=str(raw.get("ui_title", defaults.ui_title)),
        subtitle=str(raw.get("subtitle", defaults.subtitle)),
        api_base_url=api_base_url.rstrip("/"),
        request_timeout=_optional_timeout(raw.get("request_timeout")),
        default_metric=default_metric,
        default_top_n=default_top_n,
    )
