"""
Core domain layer: gateway data model, filter criteria, the filtering and
aggregation pipeline, app state, view base class and the view registry
"""

from .app_state import AppState
from .base_view import BaseView, ChartCard, StatItem
from .dataset import GeoDataset
from .filter_state import FilterCriteria, RangeBound
from .pipeline import PipelineResult, run_pipeline
from .snapshot import DashboardSnapshot
from .view_registry import ViewRegistry

__all__ = [
    "AppState",
    "BaseView",
    "ChartCard",
    "DashboardSnapshot",
    "FilterCriteria",
    "GeoDataset",
    "PipelineResult",
    "RangeBound",
    "StatItem",
    "ViewRegistry",
    "run_pipeline",
]
