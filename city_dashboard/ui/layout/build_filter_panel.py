from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from city_dashboard.ui.ids import IDs


def _range_inputs(label: str, min_id: str, max_id: str, *, step: float, max_value=None) -> html.Div:
    return html.Div(
        [
            html.Label(label, className="form-label small text-muted"),
            html.Div(
                [
                    dcc.Input(
                        id=min_id,
                        type="number",
                        placeholder="0",
                        min=0,
                        max=max_value,
                        step=step,
                        debounce=True,
                        className="form-control form-control-sm",
                        style={"width": "90px"},
                    ),
                    html.Span("to", className="mx-2 text-muted small"),
                    dcc.Input(
                        id=max_id,
                        type="number",
                        placeholder=str(max_value) if max_value is not None else "∞",
                        min=0,
                        max=max_value,
                        step=step,
                        debounce=True,
                        className="form-control form-control-sm",
                        style={"width": "90px"},
                    ),
                ],
                className="d-flex align-items-center",
            ),
        ],
        className="me-4 mb-2",
    )


def build_filter_panel() -> dbc.Collapse:
    return dbc.Collapse(
        dbc.Card(
            dbc.CardBody(
                html.Div(
                    [
                        html.Div(
                            [
                                html.Label("Continent", className="form-label small text-muted"),
                                # Buttons are filled in once the filter vocabulary is loaded
                                html.Div(id=IDs.Control.GROUP_BUTTONS, className="d-flex flex-wrap"),
                            ],
                            className="me-4 mb-2",
                        ),
                        _range_inputs(
                            "Happiness",
                            IDs.Control.HAPPINESS_MIN,
                            IDs.Control.HAPPINESS_MAX,
                            step=0.5,
                            max_value=10,
                        ),
                        _range_inputs(
                            "Income (€)",
                            IDs.Control.INCOME_MIN,
                            IDs.Control.INCOME_MAX,
                            step=500,
                        ),
                        html.Div(
                            [
                                html.Span(id=IDs.Control.RESULT_COUNT, className="small text-muted me-3"),
                                dbc.Button(
                                    "Clear",
                                    id=IDs.Control.RESET_FILTERS_BTN,
                                    color="link",
                                    size="sm",
                                    n_clicks=0,
                                    style={"display": "none"},
                                ),
                            ],
                            className="ms-auto d-flex align-items-center",
                        ),
                    ],
                    className="d-flex flex-wrap align-items-end",
                )
            ),
            className="cd-filter-panel mb-3",
        ),
        id=IDs.Control.FILTERS_COLLAPSE,
        is_open=True,
    )
