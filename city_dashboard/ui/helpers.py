from __future__ import annotations

from typing import Iterable, List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from city_dashboard.core.base_view import ChartCard, StatItem
from city_dashboard.ui.ids import group_toggle_id


def build_stat_cards(items: Iterable[StatItem]) -> List[dbc.Col]:
    return [
        dbc.Col(
            dbc.Card(
                dbc.CardBody(
                    [
                        html.Div(item.label, className="text-muted small"),
                        html.Div(
                            [
                                html.Span(item.value, className="fs-3 fw-semibold"),
                                html.Span(f" {item.unit}" if item.unit else "", className="text-muted ms-1"),
                            ]
                        ),
                    ]
                ),
                className="cd-stat-card h-100",
            ),
            md=3,
            xs=6,
            className="mb-3",
        )
        for item in items
    ]


def build_chart_cards(cards: Iterable[ChartCard]) -> dbc.Row:
    cols = []
    for card in cards:
        header = [html.Strong(card.title)]
        if card.subtitle:
            header.append(html.Small(card.subtitle, className="text-muted d-block"))

        # Tall charts (maps, matrices) get the full row
        width = 12 if card.height >= 500 else 6
        cols.append(
            dbc.Col(
                dbc.Card(
                    [
                        dbc.CardHeader(header, className="p-2"),
                        dbc.CardBody(
                            dcc.Graph(
                                figure=card.figure,
                                style={"height": f"{card.height}px"},
                                config={"displayModeBar": False, "responsive": True},
                            ),
                            className="p-1",
                        ),
                    ],
                    className="cd-chart-card h-100",
                ),
                md=width,
                className="mb-3",
            )
        )
    return dbc.Row(cols, className="gx-3")


def message_card(title: str, details: Optional[str] = None, color: str = "secondary") -> dbc.Alert:
    children = [html.H5(title, className="alert-heading")]
    if details:
        children.append(html.P(details, className="mb-0"))
    return dbc.Alert(children, color=color, className="mt-3")


def build_group_buttons(labels: Iterable[str], selected: Iterable[str] = ()) -> List[dbc.Button]:
    selected = set(selected)
    return [
        dbc.Button(
            label,
            id=group_toggle_id(label),
            size="sm",
            color="secondary",
            outline=label not in selected,
            className="me-1 mb-1",
            n_clicks=0,
        )
        for label in labels
    ]


def format_city_count(count: int) -> str:
    return f"{count} city" if count == 1 else f"{count} cities"


def loading_screen() -> html.Div:
    return html.Div(
        [dbc.Spinner(color="primary"), html.Span("Loading city data...", className="ms-2")],
        className="d-flex align-items-center justify-content-center py-5",
    )
