from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import dash
import dash_bootstrap_components as dbc
from dash import Input, Output, html

from city_dashboard.core.snapshot import DashboardSnapshot
from city_dashboard.services.data_service import DashboardLoader, LoadResult, LoadStatus
from city_dashboard.ui.helpers import build_group_buttons, loading_screen
from city_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from city_dashboard.ui.context import AppContext

logger = logging.getLogger(__name__)

HIDDEN = {"display": "none"}
VISIBLE: Dict[str, Any] = {}


def _error_screen(message: str, base_url: Optional[str]) -> html.Div:
    return html.Div(
        dbc.Card(
            dbc.CardBody(
                [
                    html.H3("Error", className="card-title"),
                    html.P(message, className="text-muted"),
                    html.P(
                        f"Check that the API backend is running on {base_url}. Reload the page to try again.",
                        className="small mb-0",
                    ),
                ],
                className="text-center",
            ),
            style={"maxWidth": "640px"},
        ),
        className="d-flex justify-content-center align-items-center",
        style={"minHeight": "70vh"},
    )


def page_status(
    load_result: Optional[Dict[str, Any]],
    base_url: Optional[str] = None,
) -> Tuple[Any, Dict[str, Any], List[Any], str]:
    """
    Map a LoadResult dict onto the page:
    (status screen children, main content style, group buttons, navbar badge text).

    Only a READY result shows the dashboard; ERROR replaces it with a full-screen card.
    """
    status = (load_result or {}).get("status", LoadStatus.LOADING.value)

    if status == LoadStatus.ERROR.value:
        message = load_result.get("error") or "Unknown error"
        return _error_screen(message, base_url), HIDDEN, [], "Cities: -"

    if status != LoadStatus.READY.value or not load_result.get("snapshot"):
        return loading_screen(), HIDDEN, [], "Cities: ..."

    snapshot = DashboardSnapshot.from_dict(load_result["snapshot"])
    total = snapshot.overview.get("total_cities", len(snapshot.geo))
    return None, VISIBLE, build_group_buttons(snapshot.filter_options), f"Cities: {total}"


def load_or_error(loader: DashboardLoader) -> Dict[str, Any]:
    """
    Run one load for the page. Anything the loader did not turn into a
    LoadResult still ends in the ERROR screen, never in an endless spinner.
    """
    try:
        return loader.load().to_dict()
    except Exception as exc:
        logger.exception("Unexpected error while loading the dashboard")
        message = f"Internal error while loading data: {exc}"
        return LoadResult(status=LoadStatus.ERROR, error=message).to_dict()


def register_load_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # Initial load: every page load restarts the loader
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.LOAD_RESULT, "data"),
        Input(IDs.Control.URL, "pathname"),
    )
    def load_dashboard(_pathname: Optional[str]):
        return load_or_error(ctx.loader)

    # ---------------------------------------------------------
    # Loading / error / ready switch
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STATUS_SCREEN, "children"),
        Output(IDs.Control.MAIN_CONTENT, "style"),
        Output(IDs.Control.GROUP_BUTTONS, "children"),
        Output(IDs.Control.NAVBAR_CITY_COUNT, "children"),
        Input(IDs.Store.LOAD_RESULT, "data"),
    )
    def update_page_status(load_result: Optional[Dict[str, Any]]):
        try:
            return page_status(load_result, ctx.settings.api_base_url)
        except Exception:
            logger.exception("Invalid load result in page status callback")
            return (
                _error_screen("Internal error: the loaded data could not be read.", ctx.settings.api_base_url),
                HIDDEN,
                [],
                "Cities: -",
            )
