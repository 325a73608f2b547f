from __future__ import annotations

from typing import Iterable, List

CHART_COLORS = {
    "primary": "#3b82f6",
    "secondary": "#8b5cf6",
    "success": "#10b981",
    "warning": "#f59e0b",
    "danger": "#ef4444",
    "neutral": "#6b7280",
}

CONTINENT_COLORS = {
    "Europe": "#3b82f6",
    "Asia": "#f59e0b",
    "North America": "#10b981",
    "South America": "#8b5cf6",
    "Africa": "#ef4444",
    "Oceania": "#06b6d4",
}

# red -> neutral -> blue, for values in [-1, 1]
CORRELATION_SCALE = [[0, "#ef4444"], [0.5, "#262626"], [1, "#3b82f6"]]
# red -> amber -> green, for happiness on the map
HAPPINESS_SCALE = [[0, "#ef4444"], [0.5, "#f59e0b"], [1, "#10b981"]]


def group_color(label: str) -> str:
    return CONTINENT_COLORS.get(label, CHART_COLORS["neutral"])


def group_colors(labels: Iterable[str]) -> List[str]:
    return [group_color(label) for label in labels]
