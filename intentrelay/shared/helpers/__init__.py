"""
Helpers module for IntentRelay
"""

from .datetime_utils import (
    now_utc,
    now_ms,
    utc_day,
)


__all__ = [
    "now_utc",
    "now_ms",
    "utc_day",
]
