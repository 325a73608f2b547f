from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import dash
from dash import ALL, Input, Output, State

from city_dashboard.core.app_state import AppState
from city_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from city_dashboard.ui.context import AppContext

logger = logging.getLogger(__name__)

BOUND_INPUTS = {
    IDs.Control.HAPPINESS_MIN: ("happiness", "min"),
    IDs.Control.HAPPINESS_MAX: ("happiness", "max"),
    IDs.Control.INCOME_MIN: ("income", "min"),
    IDs.Control.INCOME_MAX: ("income", "max"),
}


def reduce_app_state(state: AppState, trigger: Any, value: Any) -> AppState:
    """
    Apply one UI event to the app state.

    trigger is the Dash id of the component that fired (a string, or a dict for
    pattern-matching group buttons) and value is its new property value.
    Unknown triggers leave the state unchanged.
    """
    if isinstance(trigger, dict):
        if trigger.get("type") == IDs.Pattern.GROUP_TOGGLE and value:
            return state.with_criteria(state.criteria.toggle_group(str(trigger["index"])))
        return state

    if trigger == IDs.Control.TAB_SELECT:
        return state.with_tab(value) if value else state

    if trigger == IDs.Control.FILTERS_TOGGLE_BTN:
        return state.toggle_filters_panel()

    if trigger == IDs.Control.RESET_FILTERS_BTN:
        return state.with_criteria(state.criteria.reset())

    if trigger in BOUND_INPUTS:
        field_name, side = BOUND_INPUTS[trigger]
        criteria = state.criteria
        if field_name == "happiness":
            criteria = criteria.set_happiness_bound(side, value)
        else:
            criteria = criteria.set_income_bound(side, value)
        return state.with_criteria(criteria)

    if trigger == IDs.Control.METRIC_SELECT:
        return state.with_metric(value) if value else state

    if trigger == IDs.Control.TOP_N_SLIDER:
        return state.with_top_n(value)

    return state


def register_filter_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # UI events -> AppState
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.APP_STATE, "data"),
        Output(IDs.Control.HAPPINESS_MIN, "value"),
        Output(IDs.Control.HAPPINESS_MAX, "value"),
        Output(IDs.Control.INCOME_MIN, "value"),
        Output(IDs.Control.INCOME_MAX, "value"),
        Input(IDs.Control.TAB_SELECT, "value"),
        Input(IDs.Control.FILTERS_TOGGLE_BTN, "n_clicks"),
        Input({"type": IDs.Pattern.GROUP_TOGGLE, "index": ALL}, "n_clicks"),
        Input(IDs.Control.HAPPINESS_MIN, "value"),
        Input(IDs.Control.HAPPINESS_MAX, "value"),
        Input(IDs.Control.INCOME_MIN, "value"),
        Input(IDs.Control.INCOME_MAX, "value"),
        Input(IDs.Control.RESET_FILTERS_BTN, "n_clicks"),
        Input(IDs.Control.METRIC_SELECT, "value"),
        Input(IDs.Control.TOP_N_SLIDER, "value"),
        State(IDs.Store.APP_STATE, "data"),
        prevent_initial_call=True,
    )
    def update_app_state(*args):
        state_data: Optional[Dict[str, Any]] = args[-1]
        trigger = dash.ctx.triggered_id
        if trigger is None:
            return (dash.no_update,) * 5

        value = dash.ctx.triggered[0]["value"] if dash.ctx.triggered else None
        state = AppState.from_dict(state_data)

        try:
            new_state = reduce_app_state(state, trigger, value)
        except ValueError:
            logger.warning("Ignoring invalid UI event", extra={"trigger": str(trigger), "value": str(value)})
            return (dash.no_update,) * 5

        if trigger == IDs.Control.RESET_FILTERS_BTN:
            return new_state.to_dict(), None, None, None, None
        return (new_state.to_dict(),) + (dash.no_update,) * 4

    # ---------------------------------------------------------
    # AppState -> filter panel widgets
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FILTERS_COLLAPSE, "is_open"),
        Output(IDs.Control.FILTERS_TOGGLE_BTN, "outline"),
        Output(IDs.Control.RESET_FILTERS_BTN, "style"),
        Output(IDs.Control.RANKING_CONTROLS, "style"),
        Output({"type": IDs.Pattern.GROUP_TOGGLE, "index": ALL}, "outline"),
        Input(IDs.Store.APP_STATE, "data"),
        State({"type": IDs.Pattern.GROUP_TOGGLE, "index": ALL}, "id"),
    )
    def update_filter_panel(state_data: Optional[Dict[str, Any]], button_ids: List[Dict[str, Any]]):
        state = AppState.from_dict(state_data)
        criteria = state.criteria

        reset_style = {} if criteria.has_active_filters() else {"display": "none"}
        ranking_style = {} if state.active_tab == "comparisons" else {"display": "none"}
        outlines = [b["index"] not in criteria.continents for b in button_ids or []]

        return state.show_filters, not state.show_filters, reset_style, ranking_style, outlines
