import math

import numpy as np
import pytest

from city_dashboard.core.dataset import GeoDataset
from city_dashboard.core.filter_state import FilterCriteria
from city_dashboard.core.pipeline import (
    TOP_N_MAX,
    TOP_N_MIN,
    affordability_ratios,
    clamp_top_n,
    filter_rows,
    group_aggregates,
    row_mask,
    run_pipeline,
    summary_stats,
    top_by_happiness,
    top_by_metric,
)


def _make_geo(geo_payload):
    return GeoDataset.from_payload(geo_payload)


def test_no_filters_returns_every_row_in_order(geo_payload):
    geo = _make_geo(geo_payload)
    out = filter_rows(geo, FilterCriteria())

    assert out.column("city") == ["A", "B", "C"]
    assert out == geo
    assert out is not geo


def test_group_filter_and_aggregates(geo_payload):
    geo = _make_geo(geo_payload)
    criteria = FilterCriteria().toggle_group("X")

    result = run_pipeline(geo, criteria)

    assert result.filtered.column("city") == ["A", "C"]
    assert result.stats.count == 2
    assert result.stats.avg_happiness == pytest.approx(8.5)
    assert result.stats.avg_income == pytest.approx(1500.0)
    assert [c.city for c in result.top_cities][:1] == ["C"]
    # C has zero income
    assert result.affordability[1] == 0.0
    assert result.affordability[0] == pytest.approx(30.0)


def test_happiness_min_bound_is_inclusive(geo_payload):
    geo = _make_geo(geo_payload)

    out = filter_rows(geo, FilterCriteria().set_happiness_bound("min", "6"))
    assert out.column("city") == ["A", "C"]

    out = filter_rows(geo, FilterCriteria().set_happiness_bound("min", "8").set_happiness_bound("max", "8"))
    assert out.column("city") == ["A"]


def test_zero_bound_is_applied(geo_payload):
    geo = _make_geo(geo_payload)
    out = filter_rows(geo, FilterCriteria().set_income_bound("max", "0"))
    assert out.column("city") == ["C"]


def test_inverted_range_matches_nothing(geo_payload):
    geo = _make_geo(geo_payload)
    criteria = FilterCriteria().set_happiness_bound("min", 9).set_happiness_bound("max", 1)

    result = run_pipeline(geo, criteria)

    assert result.is_empty
    assert result.stats is None
    assert result.top_cities == ()
    assert result.groups == ()
    assert result.affordability == ()


def test_unknown_group_selection_matches_nothing(geo_payload):
    geo = _make_geo(geo_payload)
    assert not row_mask(geo, FilterCriteria(continents=("Atlantis",))).any()


def test_filter_is_idempotent(geo_payload):
    geo = _make_geo(geo_payload)
    criteria = FilterCriteria().toggle_group("X").set_income_bound("min", 500)

    once = filter_rows(geo, criteria)
    twice = filter_rows(once, criteria)
    assert once == twice


def test_missing_values_fail_set_bounds(geo_payload):
    geo_payload["happiness_score"] = [8.0, None, 9.0]
    geo = _make_geo(geo_payload)

    assert filter_rows(geo, FilterCriteria()).column("city") == ["A", "B", "C"]
    assert filter_rows(geo, FilterCriteria().set_happiness_bound("min", 0)).column("city") == ["A", "C"]


def test_group_aggregates_keep_first_seen_order(geo_payload):
    geo = _make_geo(geo_payload)
    groups = group_aggregates(geo)

    assert [g.group for g in groups] == ["X", "Y"]
    x, y = groups
    assert (x.city_count, x.avg_happiness, x.avg_income) == (2, pytest.approx(8.5), pytest.approx(1500.0))
    assert (y.city_count, y.avg_happiness, y.avg_income) == (1, pytest.approx(5.0), pytest.approx(1000.0))
    assert sum(g.city_count for g in groups) == len(geo)


def test_summary_stats_none_for_empty():
    assert summary_stats(GeoDataset.empty()) is None
    assert group_aggregates(GeoDataset.empty()) == []
    assert top_by_happiness(GeoDataset.empty()) == []


def test_top_ranking_is_stable_on_ties(geo_payload):
    geo_payload["happiness_score"] = [7.0, 9.0, 7.0]
    geo = _make_geo(geo_payload)

    ranked = top_by_happiness(geo)
    assert [r.city for r in ranked] == ["B", "A", "C"]


def test_top_by_happiness_caps_at_ten():
    n = 14
    payload = {
        "cities": [f"city{i}" for i in range(n)],
        "countries": ["X"] * n,
        "avg_income": [1000] * n,
        "happiness_score": list(range(n)),
        "air_quality_index": [50] * n,
        "public_transport_score": [5] * n,
        "green_space_ratio": [0.2] * n,
        "internet_penetration": [80] * n,
        "population_density": [3000] * n,
        "avg_rent": [500] * n,
        "latitude": [0.0] * n,
        "longitude": [0.0] * n,
    }
    ranked = top_by_happiness(GeoDataset.from_payload(payload))

    assert len(ranked) == 10
    assert ranked[0].city == "city13"
    values = [r.value for r in ranked]
    assert values == sorted(values, reverse=True)


def test_top_by_metric_clamps_and_validates(geo_payload):
    geo = _make_geo(geo_payload)

    ranked = top_by_metric(geo, "avg_income", 1)
    assert [r.city for r in ranked] == ["A", "B", "C"]
    assert ranked[0].value == 3000.0

    with pytest.raises(ValueError):
        top_by_metric(geo, "population_density", 5)


@pytest.mark.parametrize(
    "raw, expected",
    [(1, TOP_N_MIN), (8, 8), (99, TOP_N_MAX), ("5", 5), (None, TOP_N_MIN), ("x", TOP_N_MIN)],
)
def test_clamp_top_n(raw, expected):
    assert clamp_top_n(raw) == expected


def test_affordability_never_leaks_non_finite(geo_payload):
    geo_payload["avg_income"] = [0, None, 2000]
    geo_payload["avg_rent"] = [500, 400, None]
    ratios = affordability_ratios(_make_geo(geo_payload))

    assert ratios[0] == 0.0
    assert ratios[1] == 0.0
    assert all(math.isfinite(r) for r in ratios)


def test_row_mask_has_dataset_length(geo_payload):
    geo = _make_geo(geo_payload)
    mask = row_mask(geo, FilterCriteria().toggle_group("Y"))
    assert isinstance(mask, np.ndarray)
    assert mask.tolist() == [False, True, False]


def _mixed_payload():
    """Eight cities across three groups, with ties, a zero income and a missing happiness."""
    groups = ["X", "Y", "Z", "X", "Y", "Z", "X", "Y"]
    happiness = [8.0, 5.0, 9.0, 6.5, None, 7.0, 6.5, 3.0]
    income = [3000, 1000, 0, 2200, 1800, 2500, 1200, 900]
    n = len(groups)
    return {
        "cities": [f"c{i}" for i in range(n)],
        "countries": groups,
        "avg_income": income,
        "happiness_score": happiness,
        "air_quality_index": [40] * n,
        "public_transport_score": [5] * n,
        "green_space_ratio": [0.2] * n,
        "internet_penetration": [80] * n,
        "population_density": [3000] * n,
        "avg_rent": [600] * n,
        "latitude": [0.0] * n,
        "longitude": [0.0] * n,
    }


@pytest.mark.parametrize(
    "groups, happiness, income",
    [
        ((), (None, None), (None, None)),
        (("X",), (None, None), (None, None)),
        (("X", "Z"), ("6", None), (None, "2500")),
        (("Y",), (None, "5"), ("900", None)),
        ((), ("6.5", "8"), ("1000", "3000")),
        (("X", "Y", "Z"), ("0", "10"), ("0", "0")),
        (("Z",), ("9.5", None), (None, None)),
    ],
)
def test_filtered_rows_satisfy_every_predicate(groups, happiness, income):
    geo = GeoDataset.from_payload(_mixed_payload())
    criteria = FilterCriteria(continents=groups)
    criteria = criteria.set_happiness_bound("min", happiness[0]).set_happiness_bound("max", happiness[1])
    criteria = criteria.set_income_bound("min", income[0]).set_income_bound("max", income[1])

    result = run_pipeline(geo, criteria)
    rows = result.filtered.frame

    for row in rows.itertuples(index=False):
        if groups:
            assert row.country in groups
        if criteria.happiness.min is not None:
            assert row.happiness_score >= criteria.happiness.min
        if criteria.happiness.max is not None:
            assert row.happiness_score <= criteria.happiness.max
        if criteria.income.min is not None:
            assert row.avg_income >= criteria.income.min
        if criteria.income.max is not None:
            assert row.avg_income <= criteria.income.max

    happiness_values = result.filtered.values("happiness_score")
    finite = happiness_values[np.isfinite(happiness_values)]
    if finite.size:
        assert finite.min() <= result.stats.avg_happiness <= finite.max()
    if result.stats is not None:
        assert result.stats.count == len(rows)
        assert sum(g.city_count for g in result.groups) == len(rows)


def test_column_without_values_gives_no_mean(geo_payload):
    geo_payload["avg_income"] = [None, None, None]
    stats = summary_stats(GeoDataset.from_payload(geo_payload))

    assert stats.count == 3
    assert stats.avg_income is None
    assert stats.avg_happiness == pytest.approx(22.0 / 3)


def test_missing_metric_ranks_last_and_keeps_length(geo_payload):
    geo_payload["avg_income"] = [3000, None, 1000]
    ranked = top_by_metric(GeoDataset.from_payload(geo_payload), "avg_income", 3)

    assert [r.city for r in ranked] == ["A", "C", "B"]
    assert ranked[-1].value is None
    assert len(ranked) == min(3, len(geo_payload["cities"]))
