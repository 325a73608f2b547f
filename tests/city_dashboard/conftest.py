from __future__ import annotations

import copy
from typing import Any, Dict

import pytest


def _three_city_payload() -> Dict[str, Any]:
    """
    Tiny /api/geographic payload:
    - A: happiness 8, income 3000, group X
    - B: happiness 5, income 1000, group Y
    - C: happiness 9, income 0,    group X
    """
    return {
        "cities": ["A", "B", "C"],
        "countries": ["X", "Y", "X"],
        "avg_income": [3000, 1000, 0],
        "happiness_score": [8.0, 5.0, 9.0],
        "air_quality_index": [40, 80, 30],
        "public_transport_score": [7.5, 4.0, 6.0],
        "green_space_ratio": [0.3, 0.1, 0.4],
        "internet_penetration": [95, 60, 90],
        "population_density": [4000, 9000, 2500],
        "avg_rent": [900, 400, 700],
        "latitude": [48.8, 35.7, 59.3],
        "longitude": [2.3, 139.7, 18.1],
    }


def _snapshot_payloads() -> Dict[str, Any]:
    return {
        "overview": {
            "total_cities": 3,
            "countries": ["X", "Y"],
            "avg_happiness": 7.33,
            "happiness_range": {"min": 5.0, "max": 9.0},
            "avg_income": 1333.33,
            "income_range": {"min": 0, "max": 3000},
            "avg_air_quality": 50.0,
        },
        "geographic": _three_city_payload(),
        "filters": {"countries": ["X", "Y"]},
        "correlations": {
            "columns": ["happiness_score", "avg_income"],
            "correlation_matrix": [[1.0, 0.42], [0.42, 1.0]],
        },
        "by_country": {
            "countries": ["X", "Y"],
            "city_count": [2, 1],
            "avg_happiness": [8.5, 5.0],
        },
    }


@pytest.fixture
def geo_payload() -> Dict[str, Any]:
    return _three_city_payload()


@pytest.fixture
def snapshot_payloads() -> Dict[str, Any]:
    return copy.deepcopy(_snapshot_payloads())


@pytest.fixture
def snapshot(snapshot_payloads):
    from city_dashboard.core.snapshot import DashboardSnapshot

    return DashboardSnapshot.from_payloads(base_url="http://gateway.test", **snapshot_payloads)
