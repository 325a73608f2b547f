from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from city_dashboard.core.app_state import AppState
from city_dashboard.core.pipeline import RANKING_METRICS, TOP_N_MAX, TOP_N_MIN
from city_dashboard.ui.context import AppContext
from city_dashboard.ui.helpers import loading_screen
from city_dashboard.ui.ids import IDs
from city_dashboard.ui.layout.build_filter_panel import build_filter_panel
from city_dashboard.ui.layout.build_navbar import build_navbar
from city_dashboard.views.comparisons_view import METRIC_LABELS


def _build_ranking_controls(state: AppState) -> html.Div:
    return html.Div(
        id=IDs.Control.RANKING_CONTROLS,
        children=[
            html.Div(
                [
                    html.Label("Ranking metric", className="form-label small text-muted"),
                    dcc.Dropdown(
                        id=IDs.Control.METRIC_SELECT,
                        options=[{"label": METRIC_LABELS[m], "value": m} for m in RANKING_METRICS],
                        value=state.metric,
                        clearable=False,
                        style={"minWidth": "220px"},
                    ),
                ],
                className="me-4",
            ),
            html.Div(
                [
                    html.Label("Number of cities", className="form-label small text-muted"),
                    dcc.Slider(
                        id=IDs.Control.TOP_N_SLIDER,
                        min=TOP_N_MIN,
                        max=TOP_N_MAX,
                        step=1,
                        value=state.top_n,
                        marks={n: str(n) for n in (TOP_N_MIN, 8, TOP_N_MAX)},
                    ),
                ],
                style={"minWidth": "260px"},
            ),
        ],
        className="d-flex flex-wrap align-items-end mb-3",
        style={"display": "none"},
    )


def build_layout(ctx: AppContext):
    settings = ctx.settings
    initial_state = AppState(metric=settings.default_metric, top_n=settings.default_top_n)

    tabs = dcc.Tabs(
        id=IDs.Control.TAB_SELECT,
        value=initial_state.active_tab,
        children=[dcc.Tab(label=label, value=view_id) for view_id, label in ctx.registry.tabs()],
        className="mb-3",
    )

    main_content = html.Div(
        id=IDs.Control.MAIN_CONTENT,
        style={"display": "none"},
        className="mt-3",
        children=[
            html.Div(
                [
                    tabs,
                    dbc.Button(
                        "Filters",
                        id=IDs.Control.FILTERS_TOGGLE_BTN,
                        color="secondary",
                        outline=True,
                        size="sm",
                        n_clicks=0,
                        className="mb-3",
                    ),
                ],
            ),
            build_filter_panel(),
            _build_ranking_controls(initial_state),
            dbc.Alert(
                id=IDs.Control.RANKING_ERROR_ALERT,
                color="warning",
                dismissable=True,
                is_open=False,
            ),
            dcc.Loading(
                type="default",
                children=[
                    dbc.Row(id=IDs.Control.STAT_CARDS, className="gx-3"),
                    html.Div(id=IDs.Control.TAB_CONTENT),
                ],
            ),
        ],
    )

    return dbc.Container(
        fluid=True,
        className="cd-root",
        children=[
            dcc.Location(id=IDs.Control.URL),
            build_navbar(settings),

            # Per-session stores
            dcc.Store(id=IDs.Store.LOAD_RESULT, storage_type="memory"),
            dcc.Store(id=IDs.Store.APP_STATE, storage_type="memory", data=initial_state.to_dict()),
            dcc.Store(id=IDs.Store.RANKING, storage_type="memory"),

            html.Div(
                id=IDs.Control.STATUS_SCREEN,
                children=loading_screen(),
            ),
            main_content,
        ],
    )
