from __future__ import annotations

from typing import Any, Dict, List, Sequence

import plotly.graph_objects as go

from city_dashboard.core.app_state import AppState
from city_dashboard.core.base_view import BaseView, ChartCard
from city_dashboard.core.pipeline import PipelineResult
from city_dashboard.views.palette import CHART_COLORS, group_color

# (key, title, subtitle, x axis title, bins for single trace, bins per group)
HISTOGRAMS = (
    ("happiness_score", "Happiness distribution", "Scores from 0 to 10", "Happiness score (/10)", 20, 15),
    ("avg_income", "Income distribution", "Average monthly income", "Income (€/month)", 25, 20),
    ("affordability", "Housing effort", "Rent to monthly income ratio", "Rent / income (%)", 25, 20),
    ("air_quality_index", "Air quality", "AQI index (lower is better)", "Air quality index (AQI)", 20, 15),
)


class DistributionsView(BaseView):
    """
    Histograms of happiness, income, rent effort and air quality.

    When groups are selected in the filters, each selected group gets its own
    overlaid trace in selection order; otherwise one grey trace covers every city.
    """

    id = "distributions"
    label = "Distributions"

    def compute_data(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        filtered = result.filtered
        return {
            "countries": filtered.column("country"),
            "happiness_score": filtered.column("happiness_score"),
            "avg_income": filtered.column("avg_income"),
            "air_quality_index": filtered.column("air_quality_index"),
            "affordability": list(result.affordability),
            "selected_groups": list(result.criteria.continents),
        }

    @staticmethod
    def _histogram(
        values: Sequence[Any],
        countries: Sequence[str],
        selected: Sequence[str],
        axis_title: str,
        bins_single: int,
        bins_group: int,
    ) -> go.Figure:
        fig = go.Figure()
        if selected:
            for group in selected:
                fig.add_histogram(
                    name=group,
                    x=[v for v, c in zip(values, countries) if c == group and v is not None],
                    nbinsx=bins_group,
                    opacity=0.7,
                    marker={"color": group_color(group)},
                )
        else:
            fig.add_histogram(
                x=[v for v in values if v is not None],
                nbinsx=bins_single,
                marker={"color": CHART_COLORS["neutral"], "opacity": 0.8},
            )

        fig.update_layout(
            xaxis={"title": axis_title},
            yaxis={"title": "Number of cities"},
            barmode="overlay",
            showlegend=len(selected) > 1,
            legend={"x": 1, "xanchor": "right", "y": 1, "bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}},
            margin=dict(l=40, r=20, t=10, b=40),
        )
        return fig

    def render_figures(self, data: Dict[str, Any], state: AppState) -> List[ChartCard]:
        cards: List[ChartCard] = []
        for key, title, subtitle, axis_title, bins_single, bins_group in HISTOGRAMS:
            if not data["countries"]:
                fig = self.empty_figure()
            else:
                fig = self._histogram(
                    data[key],
                    data["countries"],
                    data["selected_groups"],
                    axis_title,
                    bins_single,
                    bins_group,
                )
            cards.append(ChartCard(title, fig, subtitle))
        return cards
