"""
Configuration module for IntentRelay
"""

from .settings import settings, Settings
from .settings import (
    RedisSettings,
    AttributionSettings,
    PresentationSettings,
    LoggingSettings,
)

__all__ = [
    "settings",
    "Settings",
    "RedisSettings",
    "AttributionSettings",
    "PresentationSettings",
    "LoggingSettings",
]
