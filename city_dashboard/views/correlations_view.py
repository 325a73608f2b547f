from __future__ import annotations

from typing import Any, Dict, List

import plotly.graph_objects as go

from city_dashboard.core.app_state import AppState
from city_dashboard.core.base_view import BaseView, ChartCard
from city_dashboard.core.pipeline import PipelineResult
from city_dashboard.views.palette import CORRELATION_SCALE


class CorrelationsView(BaseView):
    """
    Pearson correlation heatmap as computed by the gateway.

    Filters don't apply here: the matrix covers the whole dataset.
    """

    id = "correlations"
    label = "Correlations"

    def compute_data(self, result: PipelineResult, state: AppState) -> Dict[str, Any]:
        corr = self.snapshot.correlations
        return {
            "labels": corr.display_labels(),
            "matrix": [list(row) for row in corr.matrix],
        }

    def render_figures(self, data: Dict[str, Any], state: AppState) -> List[ChartCard]:
        if not data["labels"]:
            fig = self.empty_figure("No correlation data available")
        else:
            fig = go.Figure(
                go.Heatmap(
                    z=data["matrix"],
                    x=data["labels"],
                    y=data["labels"],
                    colorscale=CORRELATION_SCALE,
                    zmin=-1,
                    zmax=1,
                    hovertemplate="%{x}<br>×<br>%{y}<br><b>r = %{z:.2f}</b><extra></extra>",
                    showscale=True,
                    colorbar={"title": "r", "thickness": 15},
                )
            )
            fig.update_layout(
                margin=dict(l=140, r=40, t=20, b=120),
                xaxis={"tickangle": -45, "side": "bottom"},
            )

        return [
            ChartCard(
                "Correlation matrix",
                fig,
                "Pearson coefficient between variables (-1 to +1)",
                height=500,
            )
        ]
