"""
Config package for city_dashboard.

Responsible for:
- the settings model (AppSettings)
- loading global.json and the environment (load_app_settings)
"""

from .model import AppSettings
from .loader import load_app_settings

__all__ = ["AppSettings", "load_app_settings"]
