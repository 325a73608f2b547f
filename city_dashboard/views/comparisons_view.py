from __future__ import annotations

from typing import Any, Dict, List

import plotly.graph_objects as go

from city_dashboard.core.app_state import AppState
from city_dashboard.core.base_view import BaseView, ChartCard
from city_dashboard.core.pipeline import PipelineResult, top_by_metric
from city_dashboard.views.palette import group_color, group_colors

METRIC_LABELS = {
    "happiness_score": "Happiness",
    "avg_income": "Income",
    "internet_penetration": "Internet",
    "public_transport_score": "Public transport",
    "green_space_ratio": "Green space",
    "air_quality_index": "Air quality",
}


class ComparisonsView(BaseView):
    """
    Scatter plots against happiness, per-group box plots, and a ranking of
    cities by a selectable metric.

    The ranking comes from the gateway while no filter is active. As soon as a
    filter is set the gateway ranking would ignore it, so the filtered rows are
    ranked locally instead.
    """

    id = "comparisons"
    label = "Comparisons"

    def _ranking(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        ranking = self.ranking
        if (
            not result.criteria.has_active_filters()
            and ranking is not None
            and ranking.metric == state.metric
        ):
            return {
                "source": "gateway",
                "cities": list(ranking.cities),
                "countries": list(ranking.countries),
                "values": list(ranking.metric_values),
            }

        ranked = top_by_metric(result.filtered, state.metric, state.top_n)
        return {
            "source": "filtered",
            "cities": [c.city for c in ranked],
            "countries": [c.country for c in ranked],
            "values": [c.value for c in ranked],
        }

    def compute_data(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        filtered = result.filtered
        return {
            "cities": filtered.column("city"),
            "countries": filtered.column("country"),
            "avg_income": filtered.column("avg_income"),
            "happiness_score": filtered.column("happiness_score"),
            "air_quality_index": filtered.column("air_quality_index"),
            "groups": filtered.groups(),
            "ranking": self._ranking(result, state),
        }

    @staticmethod
    def _scatter(data: Dict[str, Any], x_key: str, x_title: str, hover: str) -> go.Figure:
        fig = go.Figure(
            go.Scatter(
                mode="markers",
                x=data[x_key],
                y=data["happiness_score"],
                text=data["cities"],
                marker={"size": 8, "color": group_colors(data["countries"]), "opacity": 0.7},
                hovertemplate=hover,
            )
        )
        fig.update_layout(
            xaxis={"title": x_title},
            yaxis={"title": "Happiness (/10)", "range": [0, 10]},
            margin=dict(l=40, r=20, t=10, b=40),
        )
        return fig

    @staticmethod
    def _box_by_group(data: Dict[str, Any], y_key: str, y_title: str) -> go.Figure:
        fig = go.Figure()
        for group in data["groups"]:
            fig.add_box(
                name=group,
                y=[v for v, c in zip(data[y_key], data["countries"]) if c == group and v is not None],
                marker={"color": group_color(group)},
                boxpoints=False,
            )
        fig.update_layout(showlegend=False, yaxis={"title": y_title}, margin=dict(l=40, r=20, t=10, b=40))
        return fig

    def _ranking_figure(self, ranking: Dict[str, Any], state: AppState) -> go.Figure:
        if not ranking["cities"]:
            return self.empty_figure()

        labels = [f"{city} · {country}" for city, country in zip(ranking["cities"], ranking["countries"])]
        fig = go.Figure(
            go.Bar(
                orientation="h",
                x=list(reversed(ranking["values"])),
                y=list(reversed(labels)),
                marker={"color": group_colors(reversed(ranking["countries"]))},
                hovertemplate="%{y}: %{x:.2f}<extra></extra>",
            )
        )
        fig.update_layout(
            xaxis={"title": METRIC_LABELS.get(state.metric, state.metric)},
            margin=dict(l=160, r=20, t=10, b=40),
        )
        return fig

    def render_figures(self, data: Dict[str, Any], state: AppState) -> List[ChartCard]:
        metric_label = METRIC_LABELS.get(state.metric, state.metric)
        source = "all cities" if data["ranking"]["source"] == "gateway" else "filtered cities"
        ranking_card = ChartCard(
            f"Top cities by {metric_label.lower()}",
            self._ranking_figure(data["ranking"], state),
            f"Ranking over {source}",
            height=360,
        )

        if not data["cities"]:
            empty = [
                ChartCard(title, self.empty_figure(), subtitle, height=350)
                for title, subtitle in (
                    ("Income vs happiness", "Wealth and well-being"),
                    ("Air quality vs happiness", "Environmental impact on well-being"),
                    ("Income by continent", "Distribution of monthly income"),
                    ("Happiness by continent", "Distribution of happiness scores"),
                )
            ]
            return empty + [ranking_card]

        return [
            ChartCard(
                "Income vs happiness",
                self._scatter(
                    data,
                    "avg_income",
                    "Income (€/month)",
                    "%{text}<br>Income: %{x}€<br>Happiness: %{y:.1f}/10<extra></extra>",
                ),
                "Wealth and well-being",
                height=350,
            ),
            ChartCard(
                "Air quality vs happiness",
                self._scatter(
                    data,
                    "air_quality_index",
                    "Air quality index (AQI, lower is better)",
                    "%{text}<br>AQI: %{x}<br>Happiness: %{y:.1f}/10<extra></extra>",
                ),
                "Environmental impact on well-being",
                height=350,
            ),
            ChartCard(
                "Income by continent",
                self._box_by_group(data, "avg_income", "Income (€/month)"),
                "Distribution of monthly income",
            ),
            ChartCard(
                "Happiness by continent",
                self._box_by_group(data, "happiness_score", "Happiness (/10)"),
                "Distribution of happiness scores",
            ),
            ranking_card,
        ]
