from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from city_dashboard.config.model import AppSettings
from city_dashboard.ui.ids import IDs


def build_navbar(settings: AppSettings) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                # Left: title
                html.Div(
                    [
                        html.H2(settings.ui_title, className="mb-0"),
                        html.Small(settings.subtitle, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                # Right: gateway + dataset badges
                html.Div(
                    [
                        dbc.Badge(f"API: {settings.api_base_url}", color="light", text_color="dark", className="me-2"),
                        dbc.Badge("Cities: ...", id=IDs.Control.NAVBAR_CITY_COUNT, color="primary"),
                    ],
                    className="ms-auto",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm cd-navbar",
    )
