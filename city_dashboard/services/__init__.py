"""
Service layer: the HTTP gateway client and the startup data loader.
"""

from .api_client import GatewayClient
from .data_service import DashboardLoader, LoadResult, LoadStatus, TopCitiesResult

__all__ = ["GatewayClient", "DashboardLoader", "LoadResult", "LoadStatus", "TopCitiesResult"]
