from __future__ import annotations

from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from city_dashboard.core.app_state import AppState
from city_dashboard.core.base_view import BaseView, ChartCard, StatItem
from city_dashboard.core.pipeline import PipelineResult
from city_dashboard.views.palette import group_colors

PLACEHOLDER = "-"


def _fmt(value: Optional[float], pattern: str) -> str:
    return PLACEHOLDER if value is None else pattern.format(value)


class OverviewView(BaseView):
    """
    Headline numbers plus the top 10 cities by happiness and the city count
    per group, all over the filtered rows.
    """

    id = "overview"
    label = "Overview"

    def stat_items(self, result: PipelineResult) -> List[StatItem]:
        stats = result.stats
        if stats is None:
            return [
                StatItem("Filtered cities", "0"),
                StatItem("Average happiness", PLACEHOLDER, "/10"),
                StatItem("Average income", PLACEHOLDER, "€"),
                StatItem("Air quality", PLACEHOLDER, "AQI"),
            ]
        return [
            StatItem("Filtered cities", str(stats.count)),
            StatItem("Average happiness", _fmt(stats.avg_happiness, "{:.1f}"), "/10"),
            StatItem("Average income", _fmt(stats.avg_income, "{:.0f}"), "€"),
            StatItem("Air quality", _fmt(stats.avg_air_quality, "{:.0f}"), "AQI"),
        ]

    def compute_data(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        return {
            "top_cities": list(result.top_cities),
            "groups": list(result.groups),
        }

    def render_figures(self, data: Dict[str, Any], state: AppState) -> List[ChartCard]:
        top = data["top_cities"]
        groups = data["groups"]

        if not top:
            top_fig = self.empty_figure()
        else:
            # Horizontal bars read bottom-up, so reverse to put the best city on top
            ranked = list(reversed(top))
            top_fig = go.Figure(
                go.Bar(
                    orientation="h",
                    y=[c.city for c in ranked],
                    x=[c.value for c in ranked],
                    marker={"color": group_colors(c.country for c in ranked)},
                    hovertemplate="%{y}: %{x:.1f}/10<extra></extra>",
                )
            )
            top_fig.update_layout(
                margin=dict(l=100, r=20, t=10, b=30),
                xaxis={"title": "Happiness score", "range": [0, 10]},
            )

        if not groups:
            group_fig = self.empty_figure()
        else:
            group_fig = go.Figure(
                go.Bar(
                    x=[g.group for g in groups],
                    y=[g.city_count for g in groups],
                    marker={"color": group_colors(g.group for g in groups)},
                    hovertemplate="%{x}: %{y} cities<extra></extra>",
                )
            )
            group_fig.update_layout(
                margin=dict(l=40, r=20, t=10, b=40),
                yaxis={"title": "Number of cities"},
                bargap=0.3,
            )

        return [
            ChartCard("Top 10 cities by happiness", top_fig, "Highest happiness scores"),
            ChartCard("Cities per continent", group_fig, "Number of cities per region"),
        ]
