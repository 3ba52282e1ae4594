"""
DateTime utility functions for IntentRelay
"""

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Milliseconds since the epoch, the unit intent records are stamped in"""
    return int(now_utc().timestamp() * 1000)


def utc_day(moment: Optional[datetime] = None) -> str:
    """ISO date (YYYY-MM-DD) used to bucket daily counters"""
    return (moment or now_utc()).date().isoformat()

