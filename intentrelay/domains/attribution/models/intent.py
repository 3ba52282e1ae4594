"""
Intent records and resolution results
"""

from typing import Optional

from pydantic import BaseModel, Field

from intentrelay.shared.constants.attribution import (
    DEFAULT_CAMPAIGN,
    DEFAULT_CONTENT,
    DEFAULT_SOURCE,
)
from .signals import SignalTuple


class IntentRecord(BaseModel):
    """Click-time payload waiting for a matching install"""

    link_id: str
    content: str = DEFAULT_CONTENT
    campaign: str = DEFAULT_CAMPAIGN
    source: str = DEFAULT_SOURCE
    fingerprint: str
    signals: SignalTuple = Field(default_factory=SignalTuple)
    created_at: int = Field(..., description="Milliseconds since the epoch")

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.created_at

    def is_stale(self, now_ms: int, ttl_seconds: int) -> bool:
        return self.age_ms(now_ms) > ttl_seconds * 1000


class MatchedIntent(BaseModel):
    """Payload handed back to the app after a successful match"""

    link_id: str
    content: str
    campaign: str
    source: str
    score: float
    timestamp: int


class ResolveResult(BaseModel):
    """Outcome of an install-time query"""

    found: bool
    reason: Optional[str] = None
    record: Optional[MatchedIntent] = None
    score: Optional[float] = None


class ClickOutcome(BaseModel):
    """Outcome of recording a link click"""

    mobile: bool
    record_written: bool
    redirect_target: str
    fingerprint: Optional[str] = None
    record: Optional[IntentRecord] = None
