"""
Vidly Rental Management
Configuration Module
"""
from .settings import (
    AnalyticsSettings,
    MonitoringSettings,
    RentalSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AnalyticsSettings",
    "MonitoringSettings",
    "RentalSettings",
    "Settings",
    "get_settings",
]
