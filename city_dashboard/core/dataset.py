from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

from city_dashboard.core.exceptions import DatasetSchemaError

# Gateway key -> DataFrame column. Everything except cities/countries keeps its name.
PAYLOAD_COLUMNS: Dict[str, str] = {
    "cities": "city",
    "countries": "country",
    "avg_income": "avg_income",
    "happiness_score": "happiness_score",
    "air_quality_index": "air_quality_index",
    "public_transport_score": "public_transport_score",
    "green_space_ratio": "green_space_ratio",
    "internet_penetration": "internet_penetration",
    "population_density": "population_density",
    "avg_rent": "avg_rent",
    "latitude": "latitude",
    "longitude": "longitude",
}

LABEL_COLUMNS = ("city", "country")
NUMERIC_COLUMNS = tuple(c for c in PAYLOAD_COLUMNS.values() if c not in LABEL_COLUMNS)


class GeoDataset:
    """
    Row-set of cities used throughout the dashboard.

    Wraps the columnar `/api/geographic` payload as a DataFrame with one row per
    city, so that index i always refers to the same city across every metric.

    Includes:
    - Payload validation (all arrays present, all arrays the same length)
    - Boolean-mask subsetting that never mutates the source frame
    - Conversion back to the columnar payload shape for JSON stores
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        missing = [c for c in PAYLOAD_COLUMNS.values() if c not in frame.columns]
        if missing:
            raise DatasetSchemaError(f"Geographic data is missing columns: {missing}")
        self._frame = frame.reset_index(drop=True)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------
    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GeoDataset:
        """
        Build a GeoDataset from the gateway's columnar response.

        Raises:
            DatasetSchemaError: if an array is missing, not an array, or the arrays differ in length
        """
        if not isinstance(payload, Mapping):
            raise DatasetSchemaError(
                f"Geographic payload must be an object, got {type(payload).__name__}"
            )

        missing = [key for key in PAYLOAD_COLUMNS if key not in payload]
        if missing:
            raise DatasetSchemaError(f"Geographic payload is missing arrays: {missing}")

        not_arrays = [
            key for key in PAYLOAD_COLUMNS
            if payload[key] is not None and not isinstance(payload[key], (list, tuple))
        ]
        if not_arrays:
            raise DatasetSchemaError(f"Geographic payload fields must be arrays: {not_arrays}")

        lengths = {key: len(payload[key] or []) for key in PAYLOAD_COLUMNS}
        if len(set(lengths.values())) > 1:
            raise DatasetSchemaError(
                f"Geographic arrays must all have the same length, got {lengths}"
            )

        data: Dict[str, Any] = {}
        for key, column in PAYLOAD_COLUMNS.items():
            values = list(payload[key] or [])
            if any(isinstance(v, (list, tuple, dict)) for v in values):
                raise DatasetSchemaError(f"Geographic array '{key}' contains nested values")
            if column in LABEL_COLUMNS:
                data[column] = pd.Series(values, dtype="object").astype(str)
            else:
                data[column] = pd.to_numeric(
                    pd.Series(values, dtype="object"), errors="coerce"
                ).astype(float)

        return cls(pd.DataFrame(data, columns=list(PAYLOAD_COLUMNS.values())))

    @classmethod
    def empty(cls) -> GeoDataset:
        return cls.from_payload({key: [] for key in PAYLOAD_COLUMNS})

    def to_payload(self) -> Dict[str, List[Any]]:
        """Inverse of from_payload; missing numbers come back as None."""
        out: Dict[str, List[Any]] = {}
        for key, column in PAYLOAD_COLUMNS.items():
            out[key] = self.column(column)
        return out

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    @property
    def frame(self) -> pd.DataFrame:
        """Read-only view; callers must not mutate it."""
        return self._frame

    def __len__(self) -> int:
        return len(self._frame)

    @property
    def is_empty(self) -> bool:
        return self._frame.empty

    def column(self, name: str) -> List[Any]:
        if name not in self._frame.columns:
            raise KeyError(f"Unknown column '{name}'")
        series = self._frame[name]
        if name in LABEL_COLUMNS:
            return [str(v) for v in series]
        return [None if pd.isna(v) else float(v) for v in series]

    def values(self, name: str) -> np.ndarray:
        """Numeric column as a float array (NaN for missing values)."""
        return self._frame[name].to_numpy(dtype=float)

    def groups(self) -> List[str]:
        """Distinct country/group labels in first-seen order."""
        return list(dict.fromkeys(self._frame["country"]))

    # -------------------------------------------------------------------------
    # Subsetting
    # -------------------------------------------------------------------------
    def subset(self, mask: Optional[np.ndarray]) -> GeoDataset:
        """
        Return a new GeoDataset restricted to rows where mask is True.
        Row order is preserved. A mask of None returns an unfiltered copy.
        """
        if mask is None:
            return GeoDataset(self._frame.copy())

        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (len(self._frame),):
            raise ValueError(
                f"Mask length {mask.shape} does not match dataset length {len(self._frame)}"
            )
        return GeoDataset(self._frame.loc[mask].copy())

    def equals(self, other: object) -> bool:
        return isinstance(other, GeoDataset) and self._frame.equals(other._frame)

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GeoDataset(n_cities={len(self)})"
