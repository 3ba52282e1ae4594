"""
Attribution services
"""

from .fingerprint import build_fingerprint, resolve_fields, short_fingerprint
from .matcher import has_enough_evidence, is_match, network_bucket, score_signals
from .intent_store import IntentStore, InMemoryIntentStore, RedisIntentStore
from .stats import (
    InMemoryStatsRecorder,
    RedisStatsRecorder,
    StatsRecorder,
    record_outcome_safely,
)
from .attribution_service import AttributionService

__all__ = [
    "build_fingerprint",
    "resolve_fields",
    "short_fingerprint",
    "has_enough_evidence",
    "is_match",
    "network_bucket",
    "score_signals",
    "IntentStore",
    "InMemoryIntentStore",
    "RedisIntentStore",
    "InMemoryStatsRecorder",
    "RedisStatsRecorder",
    "StatsRecorder",
    "record_outcome_safely",
    "AttributionService",
]
