"""
Top-level package for the city lifestyle dashboard.

This package exposes the core architecture (domain, services, views, UI adapters).
Most code should import from submodules such as:
    city_dashboard.core
    city_dashboard.services
    city_dashboard.views
    city_dashboard.ui
"""

__all__: list[str] = []
