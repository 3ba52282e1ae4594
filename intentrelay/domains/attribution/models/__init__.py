"""
Attribution domain models
"""

from .signals import (
    AppInfo,
    CAPTURED_FIELDS,
    ObservationContext,
    SIGNAL_FIELDS,
    SignalTuple,
)
from .intent import ClickOutcome, IntentRecord, MatchedIntent, ResolveResult

__all__ = [
    "AppInfo",
    "CAPTURED_FIELDS",
    "ObservationContext",
    "SIGNAL_FIELDS",
    "SignalTuple",
    "ClickOutcome",
    "IntentRecord",
    "MatchedIntent",
    "ResolveResult",
]
