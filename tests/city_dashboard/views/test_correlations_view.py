from dataclasses import replace

from city_dashboard.core.app_state import AppState
from city_dashboard.core.pipeline import run_pipeline
from city_dashboard.core.snapshot import CorrelationMatrix
from city_dashboard.views.correlations_view import CorrelationsView


def test_heatmap_uses_gateway_matrix(snapshot):
    state = AppState().with_tab("correlations")
    cards = CorrelationsView(snapshot).render(run_pipeline(snapshot.geo), state)

    assert len(cards) == 1
    heatmap = cards[0].figure.data[0]
    assert list(heatmap.x) == ["happiness score", "avg income"]
    assert heatmap.zmin == -1
    assert heatmap.zmax == 1
    assert [list(r) for r in heatmap.z] == [[1.0, 0.42], [0.42, 1.0]]


def test_empty_matrix_gives_empty_figure(snapshot):
    bare = replace(snapshot, correlations=CorrelationMatrix())
    cards = CorrelationsView(bare).render(run_pipeline(bare.geo), AppState())

    assert len(cards[0].figure.data) == 0
