from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from city_dashboard.services.api_client import DEFAULT_BASE_URL

API_BASE_URL_ENV = "CITY_DASHBOARD_API_BASE_URL"


@dataclass(frozen=True)
class AppSettings:
    """
    Resolved application settings.

    - api_base_url: gateway root, from CITY_DASHBOARD_API_BASE_URL
    - request_timeout: seconds per gateway request; None waits forever
    - default_metric / default_top_n: initial ranking options on the comparisons tab
    """
    ui_title: str = "City Lifestyle Dashboard"
    subtitle: str = "Urban quality of life: happiness, income, mobility, environment"
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: Optional[float] = None
    default_metric: str = "happiness_score"
    default_top_n: int = 8
