"""
Configuration package for the Clearr backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    DatabaseSettings,
    JwtSettings,
    TwilioSettings,
    GenerationSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "DatabaseSettings",
    "JwtSettings",
    "TwilioSettings",
    "GenerationSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
