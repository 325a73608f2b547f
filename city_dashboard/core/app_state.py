from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from city_dashboard.core.filter_state import FilterCriteria
from city_dashboard.core.pipeline import RANKING_METRICS, clamp_top_n

TABS = ("overview", "distributions", "comparisons", "correlations", "geography")
DEFAULT_TAB = "overview"
DEFAULT_METRIC = "happiness_score"
DEFAULT_TOP_N = 8


@dataclass(frozen=True)
class AppState:
    """
    UI navigation + filter state for one browser session.

    Fields:

    - active_tab: id of the visible tab (one of TABS)
    - show_filters: whether the filter panel is expanded
    - criteria: current FilterCriteria
    - metric / top_n: ranking options for the comparisons tab

    Every update returns a new AppState; nothing is mutated in place so the
    value can live in a dcc.Store and be handed to pure view functions.
    """

    active_tab: str = DEFAULT_TAB
    show_filters: bool = True
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    metric: str = DEFAULT_METRIC
    top_n: int = DEFAULT_TOP_N

    def with_tab(self, tab: str) -> AppState:
        if tab not in TABS:
            raise ValueError(f"Unknown tab '{tab}'. Expected one of {TABS}")
        return replace(self, active_tab=tab)

    def toggle_filters_panel(self) -> AppState:
        return replace(self, show_filters=not self.show_filters)

    def with_criteria(self, criteria: FilterCriteria) -> AppState:
        return replace(self, criteria=criteria)

    def with_metric(self, metric: str) -> AppState:
        if metric not in RANKING_METRICS:
            raise ValueError(f"Unknown ranking metric '{metric}'")
        return replace(self, metric=metric)

    def with_top_n(self, top_n: Any) -> AppState:
        return replace(self, top_n=clamp_top_n(top_n))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_tab": self.active_tab,
            "show_filters": self.show_filters,
            "criteria": self.criteria.to_dict(),
            "metric": self.metric,
            "top_n": self.top_n,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> AppState:
        data = data or {}
        tab = data.get("active_tab", DEFAULT_TAB)
        metric = data.get("metric", DEFAULT_METRIC)
        return cls(
            active_tab=tab if tab in TABS else DEFAULT_TAB,
            show_filters=bool(data.get("show_filters", True)),
            criteria=FilterCriteria.from_dict(data.get("criteria")),
            metric=metric if metric in RANKING_METRICS else DEFAULT_METRIC,
            top_n=clamp_top_n(data.get("top_n", DEFAULT_TOP_N)),
        )
