from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import dash
from dash import Input, Output, State

from city_dashboard.core.app_state import AppState
from city_dashboard.core.pipeline import run_pipeline
from city_dashboard.core.snapshot import DashboardSnapshot, RankedCities
from city_dashboard.core.view_registry import ViewRegistry
from city_dashboard.services.data_service import DashboardLoader, LoadStatus
from city_dashboard.ui.helpers import (
    build_chart_cards,
    build_stat_cards,
    format_city_count,
    message_card,
)
from city_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from city_dashboard.ui.context import AppContext

logger = logging.getLogger(__name__)


def _ranking_from_store(ranking_data: Optional[Dict[str, Any]]) -> Optional[RankedCities]:
    if not ranking_data or not ranking_data.get("ranking"):
        return None
    return RankedCities.from_dict(ranking_data["ranking"])


def render_tab(
    registry: ViewRegistry,
    load_result: Optional[Dict[str, Any]],
    state_data: Optional[Dict[str, Any]],
    ranking_data: Optional[Dict[str, Any]] = None,
) -> Tuple[List[Any], Any, str]:
    """
    Run the pipeline for the current state and render the active tab.

    Returns (stat cards, tab content, result count text). Nothing is rendered
    until the load result is READY.
    """
    if not load_result or load_result.get("status") != LoadStatus.READY.value:
        return [], None, ""

    snapshot = DashboardSnapshot.from_dict(load_result["snapshot"])
    state = AppState.from_dict(state_data)
    result = run_pipeline(snapshot.geo, state.criteria)

    view = registry.create(state.active_tab, snapshot, ranking=_ranking_from_store(ranking_data))
    cards = view.render(result, state)

    count = result.stats.count if result.stats is not None else 0
    return (
        build_stat_cards(view.stat_items(result)),
        build_chart_cards(cards),
        format_city_count(count),
    )


def refresh_ranking(
    loader: DashboardLoader,
    state: AppState,
    current: Optional[Dict[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Fetch the server ranking if the requested (metric, top_n) changed.

    Returns the new store value, or None when nothing needs fetching. On
    failure the previous ranking is kept and the error is recorded alongside it.
    """
    current = current or {}
    if current.get("metric") == state.metric and current.get("top_n") == state.top_n:
        return None

    outcome = loader.fetch_top_cities(state.metric, state.top_n)
    if outcome.ranking is not None:
        ranking = outcome.ranking.to_dict()
    else:
        ranking = current.get("ranking")

    return {
        "metric": state.metric,
        "top_n": state.top_n,
        "ranking": ranking,
        "error": outcome.error,
    }


def register_render_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # Secondary fetch: server ranking for the comparisons tab
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.RANKING, "data"),
        Output(IDs.Control.RANKING_ERROR_ALERT, "children"),
        Output(IDs.Control.RANKING_ERROR_ALERT, "is_open"),
        Input(IDs.Store.APP_STATE, "data"),
        Input(IDs.Store.LOAD_RESULT, "data"),
        State(IDs.Store.RANKING, "data"),
    )
    def update_ranking(state_data, load_result, ranking_data):
        if not load_result or load_result.get("status") != LoadStatus.READY.value:
            return dash.no_update, dash.no_update, dash.no_update

        state = AppState.from_dict(state_data)
        new_data = refresh_ranking(ctx.loader, state, ranking_data)
        if new_data is None:
            return dash.no_update, dash.no_update, dash.no_update

        error = new_data.get("error")
        if error:
            return new_data, f"Could not refresh the ranking: {error}", True
        return new_data, None, False

    # ---------------------------------------------------------
    # Main content: (snapshot, state, ranking) -> charts
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STAT_CARDS, "children"),
        Output(IDs.Control.TAB_CONTENT, "children"),
        Output(IDs.Control.RESULT_COUNT, "children"),
        Input(IDs.Store.LOAD_RESULT, "data"),
        Input(IDs.Store.APP_STATE, "data"),
        Input(IDs.Store.RANKING, "data"),
    )
    def update_tab_content(load_result, state_data, ranking_data):
        try:
            return render_tab(ctx.registry, load_result, state_data, ranking_data)
        except Exception:
            logger.exception(
                "Error in update_tab_content",
                extra={"app_state": state_data},
            )
            return (
                [],
                message_card(
                    "Something went wrong while rendering this tab.",
                    "The app hit an unexpected error. If this keeps happening, grab the logs and open an issue.",
                    color="danger",
                ),
                "",
            )
