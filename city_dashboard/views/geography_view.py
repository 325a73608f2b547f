from __future__ import annotations

from typing import Any, Dict, List

import plotly.graph_objects as go

from city_dashboard.core.app_state import AppState
from city_dashboard.core.base_view import BaseView, ChartCard
from city_dashboard.core.pipeline import PipelineResult
from city_dashboard.views.palette import HAPPINESS_SCALE, group_colors


def _fmt(value: Any, pattern: str) -> str:
    return "-" if value is None else pattern.format(value)


class GeographyView(BaseView):
    """
    World map of the filtered cities plus per-group breakdowns.

    The map reads city/country/lat/lon straight from the filtered rows; the
    group charts read the pipeline aggregates. The last chart is the gateway's
    own per-country breakdown over the full dataset.
    """

    id = "geography"
    label = "Geography"

    def compute_data(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        filtered = result.filtered
        cities = filtered.column("city")
        countries = filtered.column("country")
        happiness = filtered.column("happiness_score")
        income = filtered.column("avg_income")

        hover = [
            f"{city}<br>{country}<br>Happiness: {_fmt(h, '{:.1f}')}/10<br>Income: {_fmt(i, '{:.0f}')}€"
            for city, country, h, i in zip(cities, countries, happiness, income)
        ]
        return {
            "lat": filtered.column("latitude"),
            "lon": filtered.column("longitude"),
            "happiness": happiness,
            "hover": hover,
            "groups": list(result.groups),
            "by_country": self.snapshot.by_country,
        }

    def _map_figure(self, data: Dict[str, Any]) -> go.Figure:
        fig = go.Figure(
            go.Scattergeo(
                mode="markers",
                lon=data["lon"],
                lat=data["lat"],
                text=data["hover"],
                hoverinfo="text",
                marker={
                    "size": 10,
                    "color": data["happiness"],
                    "colorscale": HAPPINESS_SCALE,
                    "cmin": 2,
                    "cmax": 9,
                    "colorbar": {"title": "Happiness", "thickness": 15, "len": 0.6},
                    "line": {"color": "#171717", "width": 1},
                },
            )
        )
        fig.update_layout(
            margin=dict(l=0, r=0, t=10, b=10),
            geo={
                "projection": {"type": "natural earth"},
                "showland": True,
                "showocean": True,
                "showcoastlines": True,
                "showcountries": True,
                "showframe": False,
            },
        )
        return fig

    def render_figures(self, data: Dict[str, Any], state: AppState) -> List[ChartCard]:
        groups = data["groups"]
        by_country = data["by_country"]

        if not data["hover"]:
            map_fig = self.empty_figure()
            pie_fig = self.empty_figure()
            bar_fig = self.empty_figure()
        else:
            map_fig = self._map_figure(data)

            labels = [g.group for g in groups]
            pie_fig = go.Figure(
                go.Pie(
                    labels=labels,
                    values=[g.city_count for g in groups],
                    marker={"colors": group_colors(labels)},
                    textinfo="label+percent",
                    hovertemplate="%{label}: %{value} cities<extra></extra>",
                )
            )
            pie_fig.update_layout(showlegend=False, margin=dict(l=20, r=20, t=20, b=20))

            bar_fig = go.Figure(
                go.Bar(
                    x=labels,
                    y=[g.avg_happiness for g in groups],
                    marker={"color": group_colors(labels)},
                    hovertemplate="%{x}: %{y:.1f}/10<extra></extra>",
                )
            )
            bar_fig.update_layout(
                yaxis={"title": "Average happiness (/10)", "range": [0, 10]},
                margin=dict(l=40, r=20, t=10, b=40),
            )

        if not by_country.countries:
            country_fig = self.empty_figure("No per-country data available")
        else:
            country_fig = go.Figure(
                go.Bar(
                    x=list(by_country.countries),
                    y=list(by_country.city_count),
                    customdata=list(by_country.avg_happiness),
                    marker={"color": group_colors(by_country.countries)},
                    hovertemplate="%{x}: %{y} cities<br>Average happiness: %{customdata:.1f}/10<extra></extra>",
                )
            )
            country_fig.update_layout(
                yaxis={"title": "Number of cities"},
                margin=dict(l=40, r=20, t=10, b=40),
            )

        return [
            ChartCard(
                "World map",
                map_fig,
                "Approximate coordinates, coloured by happiness",
                height=500,
            ),
            ChartCard("Geographic breakdown", pie_fig, "Number of cities per continent", height=300),
            ChartCard("Happiness by region", bar_fig, "Average score per continent", height=300),
            ChartCard("Dataset coverage", country_fig, "All cities per country, as reported by the API", height=300),
        ]
