"""
Client-side filtering and aggregation.

Every function here is pure: it reads a GeoDataset (and criteria) and returns
new values. Nothing is cached; the whole pipeline is recomputed on every filter
change, which is O(number of cities).

Degenerate inputs never raise and never leak NaN/inf: empty sets give None
stats and empty lists, a column with no finite value gives a None mean,
zero incomes give a 0.0 affordability ratio.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from city_dashboard.core.dataset import GeoDataset
from city_dashboard.core.filter_state import FilterCriteria, RangeBound

logger = logging.getLogger(__name__)

TOP_CITIES_LIMIT = 10
TOP_N_MIN = 3
TOP_N_MAX = 15

RANKING_METRICS = (
    "happiness_score",
    "avg_income",
    "internet_penetration",
    "public_transport_score",
    "green_space_ratio",
    "air_quality_index",
)


@dataclass(frozen=True)
class SummaryStats:
    """Means are None when the column has no finite value in the set."""
    count: int
    avg_happiness: Optional[float]
    avg_income: Optional[float]
    avg_air_quality: Optional[float]


@dataclass(frozen=True)
class RankedCity:
    city: str
    country: str
    value: Optional[float]


@dataclass(frozen=True)
class ContinentAggregate:
    group: str
    city_count: int
    avg_happiness: Optional[float]
    avg_income: Optional[float]


@dataclass(frozen=True)
class PipelineResult:
    """Everything the views need for one (snapshot, criteria) pair."""
    criteria: FilterCriteria
    filtered: GeoDataset
    stats: Optional[SummaryStats]
    top_cities: Tuple[RankedCity, ...]
    groups: Tuple[ContinentAggregate, ...]
    affordability: Tuple[float, ...]

    @property
    def is_empty(self) -> bool:
        return self.filtered.is_empty


# -----------------------------------------------------------------------------
# Filtering
# -----------------------------------------------------------------------------
def _range_mask(values: np.ndarray, bound: RangeBound) -> np.ndarray:
    mask = np.ones(len(values), dtype=bool)
    # NaN compares False, so a city with a missing value fails any set bound
    if bound.min is not None:
        mask &= values >= bound.min
    if bound.max is not None:
        mask &= values <= bound.max
    return mask


def row_mask(geo: GeoDataset, criteria: FilterCriteria) -> np.ndarray:
    """Boolean mask of the rows that pass every active predicate."""
    mask = np.ones(len(geo), dtype=bool)

    if criteria.continents:
        mask &= geo.frame["country"].isin(criteria.continents).to_numpy()

    mask &= _range_mask(geo.values("happiness_score"), criteria.happiness)
    mask &= _range_mask(geo.values("avg_income"), criteria.income)
    return mask


def filter_rows(geo: GeoDataset, criteria: FilterCriteria) -> GeoDataset:
    if not criteria.has_active_filters():
        return geo.subset(None)
    return geo.subset(row_mask(geo, criteria))


# -----------------------------------------------------------------------------
# Aggregates
# -----------------------------------------------------------------------------
def _mean(values: np.ndarray) -> Optional[float]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return None
    return float(finite.mean())


def summary_stats(geo: GeoDataset) -> Optional[SummaryStats]:
    if geo.is_empty:
        return None
    return SummaryStats(
        count=len(geo),
        avg_happiness=_mean(geo.values("happiness_score")),
        avg_income=_mean(geo.values("avg_income")),
        avg_air_quality=_mean(geo.values("air_quality_index")),
    )


def clamp_top_n(value: object) -> int:
    try:
        n = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        n = TOP_N_MIN
    return max(TOP_N_MIN, min(TOP_N_MAX, n))


def _ranked(geo: GeoDataset, metric: str, n: int) -> List[RankedCity]:
    if geo.is_empty or n <= 0:
        return []

    # mergesort is stable: ties keep their original relative order.
    # Cities missing the metric rank after every known value, with value None.
    ordered = geo.frame.sort_values(metric, ascending=False, kind="mergesort", na_position="last")
    head = ordered.head(n)
    out: List[RankedCity] = []
    for row in head.itertuples(index=False):
        value = float(getattr(row, metric))
        out.append(
            RankedCity(
                city=str(row.city),
                country=str(row.country),
                value=value if math.isfinite(value) else None,
            )
        )
    return out


def top_by_happiness(geo: GeoDataset, n: int = TOP_CITIES_LIMIT) -> List[RankedCity]:
    return _ranked(geo, "happiness_score", n)


def top_by_metric(geo: GeoDataset, metric: str, top_n: int) -> List[RankedCity]:
    if metric not in RANKING_METRICS:
        raise ValueError(f"Unknown ranking metric '{metric}'. Expected one of {RANKING_METRICS}")
    return _ranked(geo, metric, clamp_top_n(top_n))


def group_aggregates(geo: GeoDataset) -> List[ContinentAggregate]:
    if geo.is_empty:
        return []

    frame = geo.frame
    out: List[ContinentAggregate] = []
    for group, part in frame.groupby("country", sort=False):
        out.append(
            ContinentAggregate(
                group=str(group),
                city_count=int(len(part)),
                avg_happiness=_mean(part["happiness_score"].to_numpy(dtype=float)),
                avg_income=_mean(part["avg_income"].to_numpy(dtype=float)),
            )
        )
    return out


def _affordability(rent: float, income: float) -> float:
    if not math.isfinite(income) or income == 0:
        return 0.0
    ratio = rent / income * 100
    return ratio if math.isfinite(ratio) else 0.0


def affordability_ratios(geo: GeoDataset) -> List[float]:
    """Rent as a percentage of income, one value per row."""
    rents = geo.values("avg_rent")
    incomes = geo.values("avg_income")
    return [_affordability(float(r), float(i)) for r, i in zip(rents, incomes)]


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------
def run_pipeline(geo: GeoDataset, criteria: Optional[FilterCriteria] = None) -> PipelineResult:
    criteria = criteria or FilterCriteria()
    filtered = filter_rows(geo, criteria)

    logger.debug(
        "pipeline_run",
        extra={"n_cities": len(geo), "n_filtered": len(filtered)},
    )

    return PipelineResult(
        criteria=criteria,
        filtered=filtered,
        stats=summary_stats(filtered),
        top_cities=tuple(top_by_happiness(filtered)),
        groups=tuple(group_aggregates(filtered)),
        affordability=tuple(affordability_ratios(filtered)),
    )
