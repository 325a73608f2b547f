from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

import plotly.graph_objs as go

from .app_state import AppState
from .pipeline import PipelineResult
from .snapshot import DashboardSnapshot, RankedCities

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No cities match the current filters"


@dataclass(frozen=True)
class StatItem:
    """One headline number shown above the charts."""
    label: str
    value: str
    unit: str = ""


@dataclass(frozen=True)
class ChartCard:
    """One titled chart inside a tab."""
    title: str
    figure: go.Figure
    subtitle: Optional[str] = None
    height: int = 320


class BaseView(ABC):
    """
    Abstract base class for all dashboard tabs.

    Defines the contract that every tab in the app must follow
    - expose an 'id' - used internally and as the tab value
    - expose a 'label' - used for the tab bar
    - implement 'compute_data' - pick the pipeline outputs the tab needs
    - implement 'render_figures' - turn that data into Plotly figures

    Views never recompute aggregates; they only read PipelineResult and,
    for map markers and hover text, the filtered rows.
    """

    id: str = None
    label: str = None

    def __init__(self, snapshot: DashboardSnapshot, ranking: Optional[RankedCities] = None):
        self.snapshot = snapshot
        # Last server-side ranking fetched for the comparisons tab, if any
        self.ranking = ranking

    @abstractmethod
    def compute_data(self, result: PipelineResult, state: AppState) -> Any:
        """
        Select the data this tab needs
        :param result: the pipeline output for the current criteria
        :param state: the current {@link AppState}
        :return: data consumed by {@link render_figures()}
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figures(self, data: Any, state: AppState) -> List[ChartCard]:
        """
        Render the tab's charts from the computed data
        :param data: the data provided by {@link compute_data()}
        :param state: the current {@link AppState}
        :return: one ChartCard per chart, in display order
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def render(self, result: PipelineResult, state: AppState) -> List[ChartCard]:
        start = time.perf_counter()
        data = self.compute_data(result, state)
        cards = self.render_figures(data, state)
        logger.info(
            "view_rendered",
            extra={
                "view_id": self.id,
                "n_cities": len(result.filtered),
                "n_charts": len(cards),
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return cards

    def stat_items(self, result: PipelineResult) -> List[StatItem]:
        """Headline numbers for this tab; most tabs have none."""
        return []

    @staticmethod
    def empty_figure(message: str = NO_DATA_MESSAGE) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
