from __future__ import annotations

__all__ = ["IDs", "group_toggle_id"]


class IDs:
    class Store:
        LOAD_RESULT = "load-result"
        APP_STATE = "app-state"
        RANKING = "ranking"

    class Control:
        URL = "url"

        # Navigation
        TAB_SELECT = "tab-select"
        FILTERS_TOGGLE_BTN = "filters-toggle-btn"
        FILTERS_COLLAPSE = "filters-collapse"

        # Filters
        GROUP_BUTTONS = "group-buttons"
        HAPPINESS_MIN = "happiness-min"
        HAPPINESS_MAX = "happiness-max"
        INCOME_MIN = "income-min"
        INCOME_MAX = "income-max"
        RESET_FILTERS_BTN = "reset-filters-btn"
        RESULT_COUNT = "result-count"

        # Ranking options (comparisons tab)
        RANKING_CONTROLS = "ranking-controls"
        METRIC_SELECT = "metric-select"
        TOP_N_SLIDER = "top-n-slider"
        RANKING_ERROR_ALERT = "ranking-error-alert"

        # Page
        NAVBAR_CITY_COUNT = "navbar-city-count"
        STATUS_SCREEN = "status-screen"
        MAIN_CONTENT = "main-content"
        STAT_CARDS = "stat-cards"
        TAB_CONTENT = "tab-content"

    class Pattern:
        # pattern-matching "type" strings
        GROUP_TOGGLE = "group-toggle"


def group_toggle_id(label: str) -> dict:
    return {"type": IDs.Pattern.GROUP_TOGGLE, "index": label}
