from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from city_dashboard.config.loader import load_app_settings
from city_dashboard.core.view_registry import ViewRegistry
from city_dashboard.services.api_client import GatewayClient
from city_dashboard.services.data_service import DashboardLoader
from city_dashboard.ui.callbacks.callbacks_filters import register_filter_callbacks
from city_dashboard.ui.callbacks.callbacks_load import register_load_callbacks
from city_dashboard.ui.callbacks.callbacks_render import register_render_callbacks
from city_dashboard.ui.context import AppContext
from city_dashboard.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_view_registry() -> ViewRegistry:
    from city_dashboard.views import (
        OverviewView,
        DistributionsView,
        ComparisonsView,
        CorrelationsView,
        GeographyView,
    )

    registry = ViewRegistry()
    registry.register(OverviewView)
    registry.register(DistributionsView)
    registry.register(ComparisonsView)
    registry.register(CorrelationsView)
    registry.register(GeographyView)
    return registry


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    # 1) Load Config
    settings = load_app_settings(config_root)

    # 2) Initialize Service Layer
    client = GatewayClient(settings.api_base_url, timeout=settings.request_timeout)
    loader = DashboardLoader(client)
    registry = build_view_registry()

    logger.info(
        "Creating dash app",
        extra={"api_base_url": settings.api_base_url, "n_views": len(registry.all_classes())},
    )

    # 3) App Context
    ctx = AppContext(settings=settings, loader=loader, registry=registry)

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
    )
    app.title = settings.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_load_callbacks(app, ctx)
    register_filter_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    return app
