from __future__ import annotations

from dataclasses import dataclass

from city_dashboard.config.model import AppSettings
from city_dashboard.core.view_registry import ViewRegistry
from city_dashboard.services.data_service import DashboardLoader


@dataclass
class AppContext:
    """
    Holds shared services for the Dash app: settings, the gateway loader and
    the view registry. This is passed into layout + callback registration
    functions instead of using module-level globals.

    Per-session data (snapshot, filters, active tab) lives in dcc.Store
    components, never here.
    """
    settings: AppSettings
    loader: DashboardLoader
    registry: ViewRegistry
