from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from city_dashboard.core.dataset import GeoDataset
from city_dashboard.core.exceptions import DatasetSchemaError


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DatasetSchemaError(f"{what} payload must be an object, got {type(payload).__name__}")
    return payload


def _as_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        raise DatasetSchemaError(f"{what} contains a non-numeric value: {value!r}") from None


def _as_count(value: Any, what: str) -> int:
    number = _as_float(value, what)
    if not math.isfinite(number):
        raise DatasetSchemaError(f"{what} contains a non-finite count: {value!r}")
    return int(number)


def _require_list(payload: Mapping[str, Any], key: str, what: str) -> List[Any]:
    if key not in payload:
        raise DatasetSchemaError(f"{what} payload is missing '{key}'")
    value = payload[key]
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise DatasetSchemaError(f"{what} '{key}' must be a list")
    return list(value)


@dataclass(frozen=True)
class CorrelationMatrix:
    """
    Pairwise correlation matrix computed by the gateway.

    The numbers are displayed as received; only the labels are reformatted.
    """
    columns: Tuple[str, ...] = ()
    matrix: Tuple[Tuple[float, ...], ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> CorrelationMatrix:
        payload = _require_mapping(payload, "Correlation")
        columns = [str(c) for c in _require_list(payload, "columns", "Correlation")]
        rows = _require_list(payload, "correlation_matrix", "Correlation")

        if len(rows) != len(columns):
            raise DatasetSchemaError(
                f"Correlation matrix has {len(rows)} rows for {len(columns)} columns"
            )
        matrix = []
        for i, row in enumerate(rows):
            if not isinstance(row, (list, tuple)) or len(row) != len(columns):
                raise DatasetSchemaError(f"Correlation matrix row {i} is not square")
            matrix.append(tuple(_as_float(v, "Correlation matrix") for v in row))

        return cls(columns=tuple(columns), matrix=tuple(matrix))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "columns": list(self.columns),
            "correlation_matrix": [list(row) for row in self.matrix],
        }

    def display_labels(self) -> List[str]:
        return [c.replace("_", " ") for c in self.columns]


@dataclass(frozen=True)
class CountryBreakdown:
    """Per-country aggregate computed by the gateway over the whole dataset."""
    countries: Tuple[str, ...] = ()
    city_count: Tuple[int, ...] = ()
    avg_happiness: Tuple[float, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> CountryBreakdown:
        payload = _require_mapping(payload, "By-country")
        countries = _require_list(payload, "countries", "By-country")
        counts = _require_list(payload, "city_count", "By-country")
        happiness = _require_list(payload, "avg_happiness", "By-country")

        if not len(countries) == len(counts) == len(happiness):
            raise DatasetSchemaError("By-country arrays must all have the same length")

        return cls(
            countries=tuple(str(c) for c in countries),
            city_count=tuple(_as_count(c, "By-country city_count") for c in counts),
            avg_happiness=tuple(_as_float(h, "By-country avg_happiness") for h in happiness),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "countries": list(self.countries),
            "city_count": list(self.city_count),
            "avg_happiness": list(self.avg_happiness),
        }


@dataclass(frozen=True)
class RankedCities:
    """Response of /api/cities/top/{metric}."""
    metric: str
    cities: Tuple[str, ...] = ()
    countries: Tuple[str, ...] = ()
    metric_values: Tuple[float, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any, metric: str) -> RankedCities:
        payload = _require_mapping(payload, "Top cities")
        cities = _require_list(payload, "cities", "Top cities")
        countries = _require_list(payload, "countries", "Top cities")
        values = _require_list(payload, "metric_values", "Top cities")

        if not len(cities) == len(countries) == len(values):
            raise DatasetSchemaError("Top cities arrays must all have the same length")

        return cls(
            metric=metric,
            cities=tuple(str(c) for c in cities),
            countries=tuple(str(c) for c in countries),
            metric_values=tuple(_as_float(v, "Top cities metric_values") for v in values),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "cities": list(self.cities),
            "countries": list(self.countries),
            "metric_values": list(self.metric_values),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RankedCities:
        return cls.from_payload(data, metric=str(data.get("metric", "")))


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Everything fetched from the gateway at startup.

    Replaced as a whole whenever a new load completes; never patched in place.
    """
    overview: Dict[str, Any]
    geo: GeoDataset
    filter_options: Tuple[str, ...]
    correlations: CorrelationMatrix
    by_country: CountryBreakdown
    base_url: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_payloads(
        cls,
        *,
        overview: Any,
        geographic: Any,
        filters: Any,
        correlations: Any,
        by_country: Any,
        base_url: Optional[str] = None,
    ) -> DashboardSnapshot:
        overview = dict(_require_mapping(overview, "Overview"))
        filters = _require_mapping(filters, "Filters")
        options = tuple(str(c) for c in _require_list(filters, "countries", "Filters"))

        return cls(
            overview=overview,
            geo=GeoDataset.from_payload(geographic),
            filter_options=options,
            correlations=CorrelationMatrix.from_payload(correlations),
            by_country=CountryBreakdown.from_payload(by_country),
            base_url=base_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overview": self.overview,
            "geographic": self.geo.to_payload(),
            "filters": {"countries": list(self.filter_options)},
            "correlations": self.correlations.to_payload(),
            "by_country": self.by_country.to_payload(),
            "base_url": self.base_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DashboardSnapshot:
        return cls.from_payloads(
            overview=data.get("overview"),
            geographic=data.get("geographic"),
            filters=data.get("filters"),
            correlations=data.get("correlations"),
            by_country=data.get("by_country"),
            base_url=data.get("base_url"),
        )
