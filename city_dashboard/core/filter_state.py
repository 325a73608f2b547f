from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

BOUND_SIDES = ("min", "max")


def parse_bound(value: Any) -> Optional[float]:
    """
    Convert a form value into an optional bound.

    None, "", whitespace, unparsable text and non-finite numbers mean "unset".
    Everything else is a real bound, including 0.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


@dataclass(frozen=True)
class RangeBound:
    """Inclusive [min, max] range; None on either side means unconstrained."""
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None

    def with_side(self, side: str, value: Any) -> RangeBound:
        if side not in BOUND_SIDES:
            raise ValueError(f"Bound side must be one of {BOUND_SIDES}, got {side!r}")
        return replace(self, **{side: parse_bound(value)})

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> RangeBound:
        data = data or {}
        return cls(min=parse_bound(data.get("min")), max=parse_bound(data.get("max")))


@dataclass(frozen=True)
class FilterCriteria:
    """
    Represents the current user filters.

    Fields:

    - continents: group labels the user selected; empty means every group.
    - happiness: inclusive happiness_score range.
    - income: inclusive avg_income range.

    Instances are immutable; every operation returns a new FilterCriteria.
    Bound ordering is not validated: min > max simply matches no city.
    """

    continents: Tuple[str, ...] = field(default_factory=tuple)
    happiness: RangeBound = field(default_factory=RangeBound)
    income: RangeBound = field(default_factory=RangeBound)

    def toggle_group(self, label: str) -> FilterCriteria:
        if label in self.continents:
            continents = tuple(c for c in self.continents if c != label)
        else:
            continents = self.continents + (label,)
        return replace(self, continents=continents)

    def set_happiness_bound(self, side: str, value: Any) -> FilterCriteria:
        return replace(self, happiness=self.happiness.with_side(side, value))

    def set_income_bound(self, side: str, value: Any) -> FilterCriteria:
        return replace(self, income=self.income.with_side(side, value))

    def reset(self) -> FilterCriteria:
        return FilterCriteria()

    def has_active_filters(self) -> bool:
        return bool(self.continents) or self.happiness.is_set or self.income.is_set

    def to_dict(self) -> Dict[str, Any]:
        return {
            "continents": list(self.continents),
            "happiness": self.happiness.to_dict(),
            "income": self.income.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> FilterCriteria:
        data = data or {}
        # dict.fromkeys drops duplicates while keeping selection order
        continents = tuple(dict.fromkeys(str(c) for c in data.get("continents") or []))
        return cls(
            continents=continents,
            happiness=RangeBound.from_dict(data.get("happiness")),
            income=RangeBound.from_dict(data.get("income")),
        )
