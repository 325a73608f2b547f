from __future__ import annotations

from typing import Optional


class CityDashboardError(Exception):
    """Base exception for all city_dashboard errors"""
    pass


class ConfigError(CityDashboardError):
    """Invalid or inconsistent global.json"""
    pass


class DatasetSchemaError(CityDashboardError):
    """
    Gateway payload doesn't match what the data model expects
    missing arrays, arrays of different lengths, non-square matrices, etc
    """
    pass


class GatewayError(CityDashboardError):
    """
    A request to the remote data gateway failed.

    status_code is None for transport failures (DNS, refused connection, ...)
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
