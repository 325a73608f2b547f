from city_dashboard.core.app_state import AppState
from city_dashboard.core.filter_state import FilterCriteria
from city_dashboard.core.pipeline import run_pipeline
from city_dashboard.core.snapshot import RankedCities
from city_dashboard.views.comparisons_view import ComparisonsView


def _gateway_ranking(metric="happiness_score"):
    return RankedCities(
        metric=metric,
        cities=("C", "A", "B"),
        countries=("X", "X", "Y"),
        metric_values=(9.0, 8.0, 5.0),
    )


def test_uses_gateway_ranking_without_filters(snapshot):
    state = AppState().with_tab("comparisons")
    result = run_pipeline(snapshot.geo, state.criteria)

    data = ComparisonsView(snapshot, ranking=_gateway_ranking()).compute_data(result, state)

    assert data["ranking"]["source"] == "gateway"
    assert data["ranking"]["cities"] == ["C", "A", "B"]


def test_ranks_locally_when_filters_are_active(snapshot):
    criteria = FilterCriteria().toggle_group("X")
    state = AppState().with_tab("comparisons").with_criteria(criteria)
    result = run_pipeline(snapshot.geo, criteria)

    view = ComparisonsView(snapshot, ranking=_gateway_ranking())
    data = view.compute_data(result, state)

    assert data["ranking"]["source"] == "filtered"
    assert data["ranking"]["cities"] == ["C", "A"]

    cards = view.render_figures(data, state)
    assert cards[-1].subtitle == "Ranking over filtered cities"


def test_ranks_locally_when_gateway_ranking_is_for_another_metric(snapshot):
    state = AppState().with_tab("comparisons").with_metric("avg_income")
    result = run_pipeline(snapshot.geo, state.criteria)

    data = ComparisonsView(snapshot, ranking=_gateway_ranking()).compute_data(result, state)

    assert data["ranking"]["source"] == "filtered"
    assert data["ranking"]["values"] == [3000.0, 1000.0, 0.0]


def test_render_produces_scatter_box_and_ranking_cards(snapshot):
    state = AppState().with_tab("comparisons")
    result = run_pipeline(snapshot.geo, state.criteria)

    cards = ComparisonsView(snapshot).render(result, state)

    assert len(cards) == 5
    assert cards[0].figure.data[0].type == "scatter"
    assert [t.name for t in cards[2].figure.data] == ["X", "Y"]
    assert cards[-1].title == "Top cities by happiness"
    # best city drawn last (top of the horizontal bar chart)
    assert cards[-1].figure.data[0].y[-1].startswith("C")


def test_empty_result_keeps_every_card(snapshot):
    criteria = FilterCriteria().set_income_bound("min", 10**6)
    state = AppState().with_tab("comparisons").with_criteria(criteria)
    result = run_pipeline(snapshot.geo, criteria)

    cards = ComparisonsView(snapshot).render(result, state)

    assert len(cards) == 5
    assert all(len(c.figure.data) == 0 for c in cards)
